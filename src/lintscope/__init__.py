# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered settings resolution and cancellable linter execution."""

from __future__ import annotations

import logging
from importlib import metadata

from .cancellation import CancellationToken, CancellationTokenSource
from .config import ConfigurationResolver, ConfigurationTarget
from .errors import (
    InvalidSettingValueError,
    LintExecutionError,
    LintscopeError,
    ProductNotConfiguredError,
    SettingScopeError,
    SettingsPersistenceError,
    UnknownSettingKeyError,
    WorkspaceConfigError,
)
from .linting import Diagnostic, Linter, LinterManager, Severity
from .products import Product, ProductType
from .services import LintscopeServices

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    __version__ = metadata.version("lintscope")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "ConfigurationResolver",
    "ConfigurationTarget",
    "Diagnostic",
    "InvalidSettingValueError",
    "LintExecutionError",
    "Linter",
    "LinterManager",
    "LintscopeError",
    "LintscopeServices",
    "Product",
    "ProductNotConfiguredError",
    "ProductType",
    "SettingScopeError",
    "SettingsPersistenceError",
    "Severity",
    "UnknownSettingKeyError",
    "WorkspaceConfigError",
    "__version__",
]
