# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Linter runtime, output parsers, and the linter manager."""

from __future__ import annotations

from .base import Linter, LinterSettings
from .linters import LINTER_CLASSES
from .manager import LinterManager
from .models import Diagnostic, LinterInfo, LinterState, Severity

__all__ = [
    "LINTER_CLASSES",
    "Diagnostic",
    "Linter",
    "LinterInfo",
    "LinterManager",
    "LinterSettings",
    "LinterState",
    "Severity",
]
