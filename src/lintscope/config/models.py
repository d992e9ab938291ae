# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value types shared by the settings store and resolver."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict

GLOBAL_SCOPE_KEY: Final[str] = "*"


class ConfigurationTarget(str, Enum):
    """Scope levels ordered from least to most specific."""

    GLOBAL = "global"
    WORKSPACE = "workspace"
    WORKSPACE_FOLDER = "workspaceFolder"

    @property
    def precedence(self) -> int:
        """Return the override rank of the target (higher wins)."""

        return _PRECEDENCE[self]

    @classmethod
    def from_label(cls, label: str) -> ConfigurationTarget:
        """Return the target matching ``label`` (accepts ``folder`` as a short alias).

        Raises:
            ValueError: If ``label`` names no target.
        """

        normalised = label.strip().lower().replace("-", "").replace("_", "")
        for target in cls:
            if target.value.lower() == normalised:
                return target
        if normalised == "folder":
            return cls.WORKSPACE_FOLDER
        raise ValueError(f"Unknown configuration target '{label}'")


_PRECEDENCE: Final[dict[ConfigurationTarget, int]] = {
    ConfigurationTarget.GLOBAL: 0,
    ConfigurationTarget.WORKSPACE: 1,
    ConfigurationTarget.WORKSPACE_FOLDER: 2,
}

ScopeKey = tuple[ConfigurationTarget, str]


class SettingChange(BaseModel):
    """Notification emitted after a committed settings write."""

    model_config = ConfigDict(frozen=True)

    key: str
    target: ConfigurationTarget
    scope_key: str
    value: Any = None
    resource: Path | None = None

    @property
    def cleared(self) -> bool:
        """Return ``True`` when the write removed the setting."""

        return self.value is None


class SettingInspection(BaseModel):
    """Per-scope breakdown of a setting for one resource."""

    model_config = ConfigDict(frozen=True)

    key: str
    default_value: Any = None
    global_value: Any = None
    workspace_value: Any = None
    workspace_folder_value: Any = None

    def value_at(self, target: ConfigurationTarget) -> Any:
        """Return the value recorded at ``target`` (``None`` when unset)."""

        return {
            ConfigurationTarget.GLOBAL: self.global_value,
            ConfigurationTarget.WORKSPACE: self.workspace_value,
            ConfigurationTarget.WORKSPACE_FOLDER: self.workspace_folder_value,
        }[target]

    @property
    def effective_target(self) -> ConfigurationTarget | None:
        """Return the most specific target holding a value, or ``None`` for the default."""

        for target in sorted(ConfigurationTarget, key=lambda item: item.precedence, reverse=True):
            if self.value_at(target) is not None:
                return target
        return None

    @property
    def effective_value(self) -> Any:
        """Return the value a resolver would report for this inspection."""

        target = self.effective_target
        return self.default_value if target is None else self.value_at(target)


__all__ = [
    "GLOBAL_SCOPE_KEY",
    "ConfigurationTarget",
    "ScopeKey",
    "SettingChange",
    "SettingInspection",
]
