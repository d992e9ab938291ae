# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the settings, product, and linting layers."""

from __future__ import annotations

from collections.abc import Sequence


class LintscopeError(Exception):
    """Base exception for every failure raised by lintscope."""


class UnknownSettingKeyError(LintscopeError, KeyError):
    """Raised when a caller reads or writes a key the schema does not declare."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown setting '{key}'")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidSettingValueError(LintscopeError, ValueError):
    """Raised when a value does not match the declared type of a setting."""


class SettingScopeError(LintscopeError):
    """Raised when a setting is written to a target its schema forbids."""


class SettingsPersistenceError(LintscopeError):
    """Error reading or writing a persisted settings document."""


class WorkspaceConfigError(LintscopeError):
    """Raised when the workspace layout file is malformed."""


class ProductNotConfiguredError(LintscopeError):
    """Raised when a product cannot be resolved into a runnable command."""

    def __init__(self, product: str, reason: str) -> None:
        super().__init__(f"Product '{product}' is not configured: {reason}")
        self.product = product
        self.reason = reason


class LintExecutionError(LintscopeError):
    """Raised when a linter cannot be spawned or its output cannot be parsed."""

    def __init__(
        self,
        tool: str,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(f"{tool}: {message}")
        self.tool = tool
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "InvalidSettingValueError",
    "LintExecutionError",
    "LintscopeError",
    "ProductNotConfiguredError",
    "SettingScopeError",
    "SettingsPersistenceError",
    "UnknownSettingKeyError",
    "WorkspaceConfigError",
]
