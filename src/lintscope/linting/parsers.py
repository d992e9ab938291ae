# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers turning linter output into ordered diagnostics."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, TypeAlias, runtime_checkable

from .models import Diagnostic, Severity

JsonValue: TypeAlias = dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None


class OutputParseError(ValueError):
    """Raised when linter output does not have the expected structure."""


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Describe the invocation whose output is being parsed.

    Attributes:
        tool: Name of the linter that produced the output.
        document: Absolute path of the linted document.
        cwd: Working directory the linter ran in; relative paths resolve against it.
        severity_overrides: Category to severity label overrides. Keys are either a
            bare category (``convention``) or a tool-qualified one (``pylint.convention``).
    """

    tool: str
    document: Path
    cwd: Path
    severity_overrides: Mapping[str, str] = field(default_factory=dict)

    def severity(self, category: str | None, defaults: Mapping[str, Severity], fallback: Severity) -> Severity:
        """Return the severity for ``category``, honouring configured overrides.

        Args:
            category: Category reported by the tool (``convention``, ``E``, ``HIGH``).
            defaults: Built-in category mapping of the tool.
            fallback: Severity used when neither overrides nor defaults match.

        Returns:
            Severity: Resolved severity.
        """

        if category is None:
            return fallback
        for key in (f"{self.tool}.{category}", category):
            label = self.severity_overrides.get(key)
            if label is not None:
                return Severity(label)
        return defaults.get(category.lower(), fallback)

    def is_document(self, file: str | None) -> bool:
        """Return ``True`` when ``file`` refers to the linted document."""

        if not file:
            return True
        candidate = Path(file)
        if not candidate.is_absolute():
            candidate = self.cwd / candidate
        return candidate.resolve() == self.document.resolve()


@runtime_checkable
class OutputParser(Protocol):
    """Protocol implemented by linter output parsers."""

    def parse(self, stdout: str, stderr: str, *, context: ParseContext) -> list[Diagnostic]:
        """Return diagnostics parsed from raw process output.

        Raises:
            OutputParseError: If the output is structurally invalid.
        """


@runtime_checkable
class ExitCodeInterpreter(Protocol):
    """Protocol deciding whether an exit code signals a tool failure."""

    def is_failure(self, returncode: int, diagnostics: Sequence[Diagnostic]) -> bool:
        """Return ``True`` when ``returncode`` means the tool itself failed."""


JsonTransform = Callable[[JsonValue, ParseContext], Sequence[Diagnostic]]
TextTransform = Callable[[Sequence[str], ParseContext], Sequence[Diagnostic]]


def _load_json(stdout: str) -> JsonValue:
    text = stdout.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise OutputParseError(f"invalid JSON output: {exc}") from exc


@dataclass(frozen=True, slots=True)
class JsonParser:
    """Parse stdout as JSON and delegate to a transform function."""

    transform: JsonTransform

    def parse(self, stdout: str, stderr: str, *, context: ParseContext) -> list[Diagnostic]:
        del stderr
        return list(self.transform(_load_json(stdout), context))


@dataclass(frozen=True, slots=True)
class TextParser:
    """Parse stdout line by line via a transform function."""

    transform: TextTransform

    def parse(self, stdout: str, stderr: str, *, context: ParseContext) -> list[Diagnostic]:
        del stderr
        return list(self.transform(stdout.splitlines(), context))


@dataclass(frozen=True, slots=True)
class ExitCodePolicy:
    """Treat zero and the tool's "issues found" codes as success."""

    issue_codes: frozenset[int] = frozenset({1})

    def is_failure(self, returncode: int, diagnostics: Sequence[Diagnostic]) -> bool:
        del diagnostics
        return returncode != 0 and returncode not in self.issue_codes


@dataclass(frozen=True, slots=True)
class BitmaskExitCodePolicy:
    """Interpret pylint-style exit codes where each bit flags a message class.

    ``usage_bits`` always mean failure. ``fatal_bits`` mean failure only when the
    tool produced no parseable diagnostics explaining the fatal condition.
    """

    usage_bits: int = 32
    fatal_bits: int = 1

    def is_failure(self, returncode: int, diagnostics: Sequence[Diagnostic]) -> bool:
        if returncode < 0 or returncode & self.usage_bits:
            return True
        return bool(returncode & self.fatal_bits) and not diagnostics


def iter_pattern_matches(lines: Sequence[str], pattern: re.Pattern[str]) -> Iterator[re.Match[str]]:
    """Yield regex matches from ``lines``, ignoring blank and unmatched lines."""

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        match = pattern.match(line)
        if match:
            yield match


def _optional_int(value: JsonValue | str | None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError:
        return None


def _mapping(value: JsonValue) -> Mapping[str, JsonValue]:
    return value if isinstance(value, Mapping) else {}


def _require_records(payload: JsonValue, key: str, tool: str) -> list[Mapping[str, JsonValue]]:
    if payload is None:
        return []
    if not isinstance(payload, Mapping):
        raise OutputParseError(f"{tool} output is not a JSON object")
    records = payload.get(key, [])
    if not isinstance(records, list):
        raise OutputParseError(f"{tool} output field '{key}' is not a list")
    return [record for record in records if isinstance(record, Mapping)]


# ===== Message-template based tools =====

TEMPLATE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<line>\d+),(?P<column>-?\d+),(?P<category>\w+),(?P<code>[\w-]+):(?P<message>.*)$",
)

PYLINT_MSG_TEMPLATE: Final[str] = "{line},{column},{category},{symbol}:{msg}"
PEP8_FORMAT: Final[str] = "%(row)d,%(col)d,%(code).1s,%(code)s:%(text)s"

PYLINT_CATEGORY_SEVERITY: Final[dict[str, Severity]] = {
    "convention": Severity.INFORMATION,
    "error": Severity.ERROR,
    "fatal": Severity.ERROR,
    "refactor": Severity.HINT,
    "warning": Severity.WARNING,
    "info": Severity.INFORMATION,
}

FLAKE8_CATEGORY_SEVERITY: Final[dict[str, Severity]] = {
    "e": Severity.ERROR,
    "w": Severity.WARNING,
    "f": Severity.WARNING,
    "c": Severity.WARNING,
}

PYCODESTYLE_CATEGORY_SEVERITY: Final[dict[str, Severity]] = {
    "e": Severity.ERROR,
    "w": Severity.WARNING,
}


def _template_diagnostics(
    lines: Sequence[str],
    context: ParseContext,
    *,
    defaults: Mapping[str, Severity],
    column_offset: int,
) -> list[Diagnostic]:
    results: list[Diagnostic] = []
    for match in iter_pattern_matches(lines, TEMPLATE_PATTERN):
        category = match.group("category")
        results.append(
            Diagnostic(
                file=str(context.document),
                line=int(match.group("line")),
                column=int(match.group("column")) - column_offset,
                severity=context.severity(category, defaults, Severity.WARNING),
                message=match.group("message").strip(),
                tool=context.tool,
                code=match.group("code"),
                category=category,
            ),
        )
    return results


def parse_pylint(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse pylint output produced with :data:`PYLINT_MSG_TEMPLATE` (0-based columns)."""

    return _template_diagnostics(lines, context, defaults=PYLINT_CATEGORY_SEVERITY, column_offset=0)


def parse_flake8(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse flake8 output produced with :data:`PEP8_FORMAT` (1-based columns)."""

    return _template_diagnostics(lines, context, defaults=FLAKE8_CATEGORY_SEVERITY, column_offset=1)


def parse_pycodestyle(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse pycodestyle output produced with :data:`PEP8_FORMAT` (1-based columns)."""

    return _template_diagnostics(lines, context, defaults=PYCODESTYLE_CATEGORY_SEVERITY, column_offset=1)


# ===== mypy =====

MYPY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+)(?::(?P<column>\d+))?(?::(?P<end_line>\d+):(?P<end_column>\d+))?:"
    r" (?P<category>error|warning|note): (?P<message>.*?)(?:\s+\[(?P<code>[\w-]+)\])?$",
)

MYPY_CATEGORY_SEVERITY: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "note": Severity.INFORMATION,
}


def parse_mypy(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse mypy text output, keeping only messages about the linted document.

    mypy reports 1-based columns when run with ``--show-column-numbers``.
    """

    results: list[Diagnostic] = []
    for match in iter_pattern_matches(lines, MYPY_PATTERN):
        file = match.group("file")
        if not context.is_document(file):
            continue
        column = _optional_int(match.group("column"))
        end_column = _optional_int(match.group("end_column"))
        category = match.group("category")
        results.append(
            Diagnostic(
                file=str(context.document),
                line=int(match.group("line")),
                column=(column or 1) - 1,
                end_line=_optional_int(match.group("end_line")),
                end_column=None if end_column is None else end_column - 1,
                severity=context.severity(category, MYPY_CATEGORY_SEVERITY, Severity.ERROR),
                message=match.group("message").strip(),
                tool=context.tool,
                code=match.group("code"),
                category=category,
            ),
        )
    return results


# ===== pydocstyle =====

PYDOCSTYLE_HEADER: Final[re.Pattern[str]] = re.compile(r"^(?P<file>.+?):(?P<line>\d+)\b.*:$")
PYDOCSTYLE_DETAIL: Final[re.Pattern[str]] = re.compile(r"^(?P<code>D\d{3}):\s*(?P<message>.*)$")


def parse_pydocstyle(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse pydocstyle's two-line records (location header, indented detail)."""

    results: list[Diagnostic] = []
    pending: re.Match[str] | None = None
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        detail = PYDOCSTYLE_DETAIL.match(line)
        if detail is not None and pending is not None:
            results.append(
                Diagnostic(
                    file=str(context.document),
                    line=int(pending.group("line")),
                    column=0,
                    severity=context.severity("D", {}, Severity.INFORMATION),
                    message=detail.group("message").strip(),
                    tool=context.tool,
                    code=detail.group("code"),
                    category="D",
                ),
            )
            pending = None
            continue
        pending = PYDOCSTYLE_HEADER.match(line)
    return results


# ===== JSON tools =====

BANDIT_CATEGORY_SEVERITY: Final[dict[str, Severity]] = {
    "low": Severity.INFORMATION,
    "medium": Severity.WARNING,
    "high": Severity.ERROR,
}


def parse_prospector(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse prospector ``--output-format=json`` output.

    Raises:
        OutputParseError: If the payload is not a prospector report.
    """

    results: list[Diagnostic] = []
    for record in _require_records(payload, "messages", context.tool):
        location = _mapping(record.get("location"))
        source = record.get("source")
        category = str(source) if source is not None else None
        code = record.get("code")
        results.append(
            Diagnostic(
                file=str(context.document),
                line=_optional_int(location.get("line")) or 1,
                column=_optional_int(location.get("character")) or 0,
                severity=context.severity(category, {}, Severity.WARNING),
                message=str(record.get("message", "")).strip(),
                tool=context.tool,
                code=None if code is None else str(code),
                category=category,
            ),
        )
    return results


def parse_bandit(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse bandit ``-f json`` output.

    Raises:
        OutputParseError: If the payload is not a bandit report.
    """

    results: list[Diagnostic] = []
    for record in _require_records(payload, "results", context.tool):
        category = record.get("issue_severity")
        category_label = None if category is None else str(category)
        test_id = record.get("test_id")
        results.append(
            Diagnostic(
                file=str(context.document),
                line=_optional_int(record.get("line_number")) or 1,
                column=_optional_int(record.get("col_offset")) or 0,
                end_column=_optional_int(record.get("end_col_offset")),
                severity=context.severity(category_label, BANDIT_CATEGORY_SEVERITY, Severity.WARNING),
                message=str(record.get("issue_text", "")).strip(),
                tool=context.tool,
                code=None if test_id is None else str(test_id),
                category=category_label,
            ),
        )
    return results


__all__ = [
    "BitmaskExitCodePolicy",
    "ExitCodeInterpreter",
    "ExitCodePolicy",
    "JsonParser",
    "OutputParseError",
    "OutputParser",
    "PEP8_FORMAT",
    "PYLINT_MSG_TEMPLATE",
    "ParseContext",
    "TextParser",
    "iter_pattern_matches",
    "parse_bandit",
    "parse_flake8",
    "parse_mypy",
    "parse_prospector",
    "parse_pycodestyle",
    "parse_pydocstyle",
    "parse_pylint",
]
