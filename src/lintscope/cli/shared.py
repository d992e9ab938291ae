# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared utilities for CLI commands (logging, errors, option parsing)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import typer
from rich.console import Console

from ..config.models import ConfigurationTarget
from ..errors import WorkspaceConfigError
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..services import LintscopeServices

EXIT_OK: Final[int] = 0
EXIT_DIAGNOSTICS: Final[int] = 1
EXIT_USAGE: Final[int] = 2


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = EXIT_USAGE) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around the project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout unstyled."""

        typer.echo(message)


def build_cli_logger(*, emoji: bool = True, no_color: bool = False) -> CLILogger:
    """Return a :class:`CLILogger` bound to a dedicated Rich console."""

    return CLILogger(console=Console(no_color=no_color, highlight=False), use_emoji=emoji)


def open_services(root: Path | None, user_dir: Path | None) -> LintscopeServices:
    """Return services for the workspace at ``root`` (default: current directory).

    Raises:
        CLIError: If the workspace file is invalid.
    """

    try:
        return LintscopeServices.open(root or Path.cwd(), user_dir=user_dir)
    except WorkspaceConfigError as exc:
        raise CLIError(str(exc), exit_code=EXIT_USAGE) from exc


def parse_target(label: str) -> ConfigurationTarget:
    """Return the configuration target named by ``label``.

    Raises:
        typer.BadParameter: If ``label`` names no target.
    """

    try:
        return ConfigurationTarget.from_label(label)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def parse_value(raw: str) -> Any:
    """Return ``raw`` decoded as JSON, or the raw string when it is not JSON."""

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def resolve_resource(resource: Path | None) -> Path | None:
    """Return ``resource`` as an absolute path."""

    if resource is None:
        return None
    return resource.expanduser().resolve()


ROOT_OPTION_HELP: Final[str] = "Workspace root (defaults to the current directory)."
USER_DIR_OPTION_HELP: Final[str] = "Directory holding global settings (overrides LINTSCOPE_USER_DIR)."


__all__ = [
    "EXIT_DIAGNOSTICS",
    "EXIT_OK",
    "EXIT_USAGE",
    "ROOT_OPTION_HELP",
    "USER_DIR_OPTION_HELP",
    "CLIError",
    "CLILogger",
    "build_cli_logger",
    "open_services",
    "parse_target",
    "parse_value",
    "resolve_resource",
]
