# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Workspace layout: the workspace root and the folders it contains."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


def _absolute(path: Path | str) -> Path:
    return Path(path).expanduser().resolve()


class WorkspaceFolder(BaseModel):
    """A root folder of a (possibly multi-root) workspace."""

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str = ""

    @field_validator("path", mode="before")
    @classmethod
    def _resolve_path(cls, value: Path | str) -> Path:
        return _absolute(value)

    def contains(self, resource: Path) -> bool:
        """Return ``True`` when ``resource`` is this folder or lives beneath it."""

        return resource == self.path or self.path in resource.parents

    @property
    def scope_key(self) -> str:
        """Return the scoping key used for folder-level settings."""

        return self.path.as_posix()


class Workspace:
    """Mutable set of workspace folders anchored at a workspace root."""

    def __init__(self, root: Path | str, folders: Iterable[WorkspaceFolder | Path | str] = ()) -> None:
        self._root = _absolute(root)
        self._folders: list[WorkspaceFolder] = []
        for folder in folders:
            self.add_folder(folder)
        if not self._folders:
            self.add_folder(self._root)

    @property
    def root(self) -> Path:
        """Return the workspace root directory."""

        return self._root

    @property
    def scope_key(self) -> str:
        """Return the scoping key used for workspace-level settings."""

        return self._root.as_posix()

    @property
    def folders(self) -> tuple[WorkspaceFolder, ...]:
        """Return the workspace folders in insertion order."""

        return tuple(self._folders)

    def add_folder(self, folder: WorkspaceFolder | Path | str) -> WorkspaceFolder:
        """Add ``folder`` to the workspace, returning the existing entry when already present."""

        entry = folder if isinstance(folder, WorkspaceFolder) else WorkspaceFolder(path=folder)
        if not entry.name:
            entry = entry.model_copy(update={"name": entry.path.name})
        for existing in self._folders:
            if existing.path == entry.path:
                return existing
        self._folders.append(entry)
        return entry

    def remove_folder(self, folder: WorkspaceFolder | Path | str) -> WorkspaceFolder | None:
        """Remove ``folder`` from the workspace, returning the removed entry."""

        path = folder.path if isinstance(folder, WorkspaceFolder) else _absolute(folder)
        for existing in self._folders:
            if existing.path == path:
                self._folders.remove(existing)
                return existing
        return None

    def folder_for(self, resource: Path | str | None) -> WorkspaceFolder | None:
        """Return the most specific folder containing ``resource``.

        Nested folders are allowed; the deepest match wins.
        """

        if resource is None:
            return None
        candidate = _absolute(resource)
        matches = [folder for folder in self._folders if folder.contains(candidate)]
        if not matches:
            return None
        return max(matches, key=lambda folder: len(folder.path.parts))


__all__ = ["Workspace", "WorkspaceFolder"]
