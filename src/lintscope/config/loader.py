# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load the workspace layout and settings file locations."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import WorkspaceConfigError
from .models import ConfigurationTarget
from .store import ScopeLocator
from .workspace import Workspace, WorkspaceFolder

WORKSPACE_FILE_NAME: Final[str] = "lintscope-workspace.toml"
USER_DIR_ENV: Final[str] = "LINTSCOPE_USER_DIR"
SETTINGS_DIR_NAME: Final[str] = ".lintscope"
USER_SETTINGS_FILE: Final[str] = "settings.json"
WORKSPACE_SETTINGS_FILE: Final[str] = "workspace.json"
FOLDER_SETTINGS_FILE: Final[str] = "settings.json"


def default_user_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return the directory holding global settings.

    ``LINTSCOPE_USER_DIR`` takes precedence, then ``XDG_CONFIG_HOME``, then
    ``~/.config``.
    """

    environ = os.environ if env is None else env
    if override := environ.get(USER_DIR_ENV):
        return Path(override).expanduser()
    if xdg := environ.get("XDG_CONFIG_HOME"):
        return Path(xdg).expanduser() / "lintscope"
    return Path.home() / ".config" / "lintscope"


class FolderEntry(BaseModel):
    """Folder declaration inside the workspace file."""

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str = ""


class LintscopeConfig(BaseModel):
    """Resolved layout describing where each scope's settings live."""

    model_config = ConfigDict(frozen=True)

    workspace_root: Path
    user_dir: Path
    folders: tuple[FolderEntry, ...] = Field(default_factory=tuple)
    settings_dir_name: str = SETTINGS_DIR_NAME

    @field_validator("folders", mode="before")
    @classmethod
    def _coerce_folders(cls, value: Any) -> tuple[Any, ...]:
        if value is None:
            return ()
        if isinstance(value, (str, Path, Mapping)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("folders must be an array of paths or tables")
        return tuple({"path": item} if isinstance(item, (str, Path)) else item for item in value)

    def build_workspace(self) -> Workspace:
        """Return a :class:`Workspace` with folders resolved against the root."""

        folders = [
            WorkspaceFolder(
                path=entry.path if entry.path.is_absolute() else self.workspace_root / entry.path,
                name=entry.name,
            )
            for entry in self.folders
        ]
        return Workspace(self.workspace_root, folders)

    def locator(self) -> ScopeLocator:
        """Return a function mapping ``(target, scope_key)`` to a settings file."""

        user_dir = self.user_dir
        dir_name = self.settings_dir_name

        def _locate(target: ConfigurationTarget, scope_key: str) -> Path:
            if target is ConfigurationTarget.GLOBAL:
                return user_dir / USER_SETTINGS_FILE
            if target is ConfigurationTarget.WORKSPACE:
                return Path(scope_key) / dir_name / WORKSPACE_SETTINGS_FILE
            return Path(scope_key) / dir_name / FOLDER_SETTINGS_FILE

        return _locate


def load_config(
    root: Path,
    *,
    user_dir: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> LintscopeConfig:
    """Load ``lintscope-workspace.toml`` from ``root`` when present.

    Args:
        root: Workspace root directory.
        user_dir: Optional explicit global settings directory.
        env: Environment used to resolve the default user directory.

    Returns:
        LintscopeConfig: Layout for the workspace; a missing workspace file
        yields a single-folder workspace rooted at ``root``.

    Raises:
        WorkspaceConfigError: If the workspace file is not valid TOML or has an invalid shape.
    """

    workspace_root = root.expanduser().resolve()
    document: dict[str, Any] = {}
    workspace_file = workspace_root / WORKSPACE_FILE_NAME
    if workspace_file.exists():
        try:
            with workspace_file.open("rb") as handle:
                document = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise WorkspaceConfigError(f"Failed to read {workspace_file}: {exc}") from exc

    resolved_user_dir = user_dir
    if resolved_user_dir is None and isinstance(document.get("user_dir"), str):
        resolved_user_dir = Path(document["user_dir"]).expanduser()
        if not resolved_user_dir.is_absolute():
            resolved_user_dir = workspace_root / resolved_user_dir
    if resolved_user_dir is None:
        resolved_user_dir = default_user_dir(env)

    try:
        return LintscopeConfig(
            workspace_root=workspace_root,
            user_dir=resolved_user_dir,
            folders=document.get("folders"),
            settings_dir_name=document.get("settings_dir_name", SETTINGS_DIR_NAME),
        )
    except ValidationError as exc:
        raise WorkspaceConfigError(f"Invalid workspace file {workspace_file}: {exc}") from exc


__all__ = [
    "FOLDER_SETTINGS_FILE",
    "SETTINGS_DIR_NAME",
    "USER_DIR_ENV",
    "USER_SETTINGS_FILE",
    "WORKSPACE_FILE_NAME",
    "WORKSPACE_SETTINGS_FILE",
    "FolderEntry",
    "LintscopeConfig",
    "default_user_dir",
    "load_config",
]
