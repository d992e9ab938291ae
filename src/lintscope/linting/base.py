# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime shared by every linter: spawn, observe cancellation, parse."""

from __future__ import annotations

import logging
import shlex
from abc import ABC
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from textwrap import shorten
from typing import ClassVar

from ..cancellation import NEVER_CANCELLED, CancellationToken
from ..documents import TextDocument
from ..errors import LintExecutionError
from ..process import ProcessRequest, ProcessResult, ProcessRunner
from ..products.models import Product, ProductInvocation
from .models import Diagnostic, LinterState
from .parsers import ExitCodeInterpreter, ExitCodePolicy, OutputParseError, OutputParser, ParseContext

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LinterSettings:
    """Configuration captured for one linter when it is created.

    Attributes:
        enabled: Whether both the master switch and the linter's own flag are on.
        invocation: Resolved executable and user arguments.
        cwd: Working directory, or ``None`` to use the document's directory.
        max_problems: Diagnostics kept per run; non-positive values keep all of them.
        severity_overrides: Category to severity label overrides.
    """

    enabled: bool
    invocation: ProductInvocation
    cwd: Path | None = None
    max_problems: int = 100
    severity_overrides: Mapping[str, str] = field(default_factory=dict)


class Linter(ABC):
    """Single-use runtime invoking one external linter against one document.

    Subclasses declare the product they wrap, the arguments that fix the output
    format, the parser for that format, and how exit codes are interpreted.

    Args:
        settings: Configuration captured at creation time.
        runner: Process runner used to spawn the linter.
    """

    product: ClassVar[Product]
    parser: ClassVar[OutputParser]
    exit_codes: ClassVar[ExitCodeInterpreter] = ExitCodePolicy()
    output_args: ClassVar[tuple[str, ...]] = ()

    def __init__(self, settings: LinterSettings, runner: ProcessRunner) -> None:
        self._settings = settings
        self._runner = runner
        self._state = LinterState.IDLE

    @property
    def name(self) -> str:
        """Return the linter's tool name."""

        return self.product.value

    @property
    def settings(self) -> LinterSettings:
        """Return the captured settings."""

        return self._settings

    @property
    def enabled(self) -> bool:
        """Return ``True`` when the linter will spawn its tool."""

        return self._settings.enabled

    @property
    def state(self) -> LinterState:
        """Return the current lifecycle state."""

        return self._state

    def build_args(self, document: TextDocument) -> tuple[str, ...]:
        """Return the arguments passed after the executable for ``document``."""

        return (*self._settings.invocation.args, *self.output_args, str(document.path))

    def build_request(self, document: TextDocument) -> ProcessRequest:
        """Return the process request that lints ``document``."""

        return ProcessRequest(
            executable=self._settings.invocation.executable,
            args=self.build_args(document),
            cwd=self.working_directory(document),
        )

    def working_directory(self, document: TextDocument) -> Path:
        """Return the directory the linter runs in."""

        return self._settings.cwd or document.path.parent

    async def lint(self, document: TextDocument, token: CancellationToken = NEVER_CANCELLED) -> list[Diagnostic]:
        """Lint ``document`` and return its diagnostics in emission order.

        Args:
            document: Document to lint; its path is passed to the tool.
            token: Cancellation token; cancelling yields an empty result.

        Returns:
            list[Diagnostic]: Diagnostics, empty when disabled or cancelled.

        Raises:
            LintExecutionError: If the tool cannot be spawned, crashes, or its
                output cannot be parsed.
            RuntimeError: If the linter has already been run.
        """

        if self._state is not LinterState.IDLE:
            raise RuntimeError(f"{self.name} linter instances are single-use (state: {self._state.value})")
        if not self._settings.enabled:
            LOGGER.debug("%s is disabled for %s", self.name, document.path)
            self._state = LinterState.COMPLETED
            return []
        if token.is_cancellation_requested:
            self._state = LinterState.CANCELLED
            return []

        request = self.build_request(document)
        self._state = LinterState.RUNNING
        LOGGER.debug("running %s in %s", shlex.join(request.command), request.cwd)
        dispose = token.on_cancelled(lambda: LOGGER.debug("cancelling %s for %s", self.name, document.path))
        try:
            result = await self._spawn(request, token)
        finally:
            dispose()
        if result.cancelled:
            self._state = LinterState.CANCELLED
            return []
        return self._complete(document, request, result)

    async def _spawn(self, request: ProcessRequest, token: CancellationToken) -> ProcessResult:
        try:
            return await self._runner.run(request, token)
        except FileNotFoundError as exc:
            self._state = LinterState.FAILED
            raise LintExecutionError(self.name, f"executable not found: {exc}", command=request.command) from exc
        except OSError as exc:
            self._state = LinterState.FAILED
            raise LintExecutionError(self.name, f"failed to start: {exc}", command=request.command) from exc

    def _complete(self, document: TextDocument, request: ProcessRequest, result: ProcessResult) -> list[Diagnostic]:
        context = ParseContext(
            tool=self.name,
            document=document.path,
            cwd=request.cwd or document.path.parent,
            severity_overrides=self._settings.severity_overrides,
        )
        try:
            diagnostics = self.parser.parse(result.stdout, result.stderr, context=context)
        except OutputParseError as exc:
            self._state = LinterState.FAILED
            raise LintExecutionError(
                self.name,
                f"could not parse output: {exc}",
                command=request.command,
                returncode=result.returncode,
                stderr=result.stderr,
            ) from exc
        returncode = -1 if result.returncode is None else result.returncode
        if self.exit_codes.is_failure(returncode, diagnostics):
            self._state = LinterState.FAILED
            raise LintExecutionError(
                self.name,
                _failure_message(self.name, returncode, result),
                command=request.command,
                returncode=returncode,
                stderr=result.stderr,
            )
        self._state = LinterState.COMPLETED
        return _truncate(diagnostics, self._settings.max_problems)


def _truncate(diagnostics: Sequence[Diagnostic], limit: int) -> list[Diagnostic]:
    if limit > 0:
        return list(diagnostics[:limit])
    return list(diagnostics)


def _failure_message(tool: str, returncode: int, result: ProcessResult) -> str:
    for stream in (result.stderr, result.stdout):
        for raw_line in reversed(stream.splitlines()):
            hint = raw_line.strip()
            if hint:
                return f"{tool} failed (exit {returncode}): {shorten(hint, width=160, placeholder='…')}"
    return f"{tool} failed (exit {returncode})"


__all__ = ["Linter", "LinterSettings"]
