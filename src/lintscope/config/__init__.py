# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered settings: schema, scope store, workspace layout, and resolver."""

from __future__ import annotations

from .loader import LintscopeConfig, load_config
from .models import GLOBAL_SCOPE_KEY, ConfigurationTarget, SettingChange, SettingInspection
from .resolver import ConfigurationResolver, ResourceSettings
from .schema import SettingDefinition, SettingsSchema
from .store import InMemorySettingsPersistence, JsonFileSettingsPersistence, ScopeStore, SettingsPersistence
from .workspace import Workspace, WorkspaceFolder

__all__ = [
    "GLOBAL_SCOPE_KEY",
    "ConfigurationResolver",
    "ConfigurationTarget",
    "InMemorySettingsPersistence",
    "JsonFileSettingsPersistence",
    "LintscopeConfig",
    "ResourceSettings",
    "ScopeStore",
    "SettingChange",
    "SettingDefinition",
    "SettingInspection",
    "SettingsPersistence",
    "SettingsSchema",
    "Workspace",
    "WorkspaceFolder",
    "load_config",
]
