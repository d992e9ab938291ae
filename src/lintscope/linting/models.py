# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic and linter state models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..products.models import Product


class Severity(str, Enum):
    """Severity levels normalising the vocabularies of the supported linters."""

    ERROR = "Error"
    WARNING = "Warning"
    INFORMATION = "Information"
    HINT = "Hint"


class LinterState(str, Enum):
    """Lifecycle of a single linter invocation."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class Diagnostic(BaseModel):
    """Standardise lint diagnostics returned by tools into a common schema.

    Lines are 1-based and columns 0-based regardless of the producing tool.
    """

    model_config = ConfigDict(frozen=True)

    file: str | None = None
    line: int = 1
    column: int = 0
    end_line: int | None = None
    end_column: int | None = None
    severity: Severity
    message: str
    tool: str
    code: str | None = None
    category: str | None = None

    @field_validator("file", mode="before")
    @classmethod
    def _normalize_file(cls, value: str | Path | None) -> str | None:
        """Return ``value`` as a string path, keeping ``None`` untouched."""

        if value is None:
            return None
        return str(value)

    @field_validator("line", mode="before")
    @classmethod
    def _clamp_line(cls, value: object) -> object:
        if isinstance(value, int) and value < 1:
            return 1
        return value

    @field_validator("column", mode="before")
    @classmethod
    def _clamp_column(cls, value: object) -> object:
        if isinstance(value, int) and value < 0:
            return 0
        return value


class LinterInfo(BaseModel):
    """Describe one supported linter and the settings that drive it."""

    model_config = ConfigDict(frozen=True)

    product: Product
    name: str
    enabled_setting: str
    path_setting: str
    args_setting: str
    default_args: tuple[str, ...] = Field(default_factory=tuple)


__all__ = ["Diagnostic", "LinterInfo", "LinterState", "Severity"]
