# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scope-addressable settings storage and its persistence backends."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ..errors import SettingsPersistenceError
from .models import ConfigurationTarget, ScopeKey

LOGGER = logging.getLogger(__name__)

ScopeDocument = dict[str, Any]
ScopeLocator = Callable[[ConfigurationTarget, str], Path]


@runtime_checkable
class SettingsPersistence(Protocol):
    """Durable storage for one settings document per scope."""

    def read(self, target: ConfigurationTarget, scope_key: str) -> ScopeDocument:
        """Return the document stored for ``(target, scope_key)`` (empty when absent)."""

        raise NotImplementedError

    def write(self, target: ConfigurationTarget, scope_key: str, values: Mapping[str, Any]) -> None:
        """Atomically replace the document stored for ``(target, scope_key)``."""

        raise NotImplementedError


class InMemorySettingsPersistence:
    """Keep scope documents in process memory."""

    def __init__(self) -> None:
        self._documents: dict[ScopeKey, ScopeDocument] = {}

    def read(self, target: ConfigurationTarget, scope_key: str) -> ScopeDocument:
        return copy.deepcopy(self._documents.get((target, scope_key), {}))

    def write(self, target: ConfigurationTarget, scope_key: str, values: Mapping[str, Any]) -> None:
        self._documents[(target, scope_key)] = copy.deepcopy(dict(values))


class JsonFileSettingsPersistence:
    """Store each scope document as a JSON file located by ``locator``."""

    def __init__(self, locator: ScopeLocator) -> None:
        self._locator = locator

    def path_for(self, target: ConfigurationTarget, scope_key: str) -> Path:
        """Return the file backing ``(target, scope_key)``."""

        return self._locator(target, scope_key)

    def read(self, target: ConfigurationTarget, scope_key: str) -> ScopeDocument:
        """Load the JSON document for the scope.

        Raises:
            SettingsPersistenceError: If the file exists but is unreadable or not a JSON object.
        """

        path = self.path_for(target, scope_key)
        if not path.exists():
            return {}
        try:
            with path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsPersistenceError(f"Failed to read settings from {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsPersistenceError(f"Settings at {path} must be a JSON object")
        return data

    def write(self, target: ConfigurationTarget, scope_key: str, values: Mapping[str, Any]) -> None:
        """Write the JSON document through a temporary file and ``os.replace``.

        Raises:
            SettingsPersistenceError: If the file cannot be written.
        """

        path = self.path_for(target, scope_key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(dict(values), handle, indent=4, sort_keys=True)
                    handle.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise SettingsPersistenceError(f"Failed to write settings to {path}: {exc}") from exc


class ScopeStore:
    """Cache of scope documents backed by a :class:`SettingsPersistence`.

    Reads are served from the cache (loading a document on first access).
    Writes are read-modify-write cycles of a single scope document performed
    under a per-scope :class:`asyncio.Lock`, so concurrent writers to the same
    scope serialise and writers to different scopes proceed independently.
    The cache is only updated after the persistence layer accepted the write.
    """

    def __init__(self, persistence: SettingsPersistence) -> None:
        self._persistence = persistence
        self._documents: dict[ScopeKey, ScopeDocument] = {}
        self._locks: dict[ScopeKey, asyncio.Lock] = {}
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def persistence(self) -> SettingsPersistence:
        """Return the persistence backend."""

        return self._persistence

    def values(self, target: ConfigurationTarget, scope_key: str) -> Mapping[str, Any]:
        """Return a read-only copy of the document stored for the scope."""

        return copy.deepcopy(self._document(target, scope_key))

    def get(self, target: ConfigurationTarget, scope_key: str, key: str) -> Any:
        """Return the value of ``key`` at the scope, or ``None`` when unset."""

        document = self._document(target, scope_key)
        if key not in document:
            return None
        return copy.deepcopy(document[key])

    async def set(self, target: ConfigurationTarget, scope_key: str, key: str, value: Any) -> bool:
        """Write ``value`` for ``key`` at the scope; ``None`` removes the key.

        Args:
            target: Configuration target addressed by the write.
            scope_key: Scoping key of the target (folder path, workspace root, ...).
            key: Setting name.
            value: New value, or ``None`` to clear the setting.

        Returns:
            bool: ``True`` when the stored document changed.

        Raises:
            SettingsPersistenceError: If the persistence layer rejects the write.
        """

        scope: ScopeKey = (target, scope_key)
        async with self._lock_for(scope):
            if scope not in self._documents:
                self._documents[scope] = await asyncio.to_thread(self._persistence.read, target, scope_key)
            current = self._documents[scope]
            if value is None:
                if key not in current:
                    return False
                updated = {name: entry for name, entry in current.items() if name != key}
            else:
                if key in current and current[key] == value:
                    return False
                updated = {**current, key: copy.deepcopy(value)}
            await asyncio.to_thread(self._persistence.write, target, scope_key, updated)
            self._documents[scope] = updated
            LOGGER.debug("stored %s=%r in %s scope %s", key, value, target.value, scope_key)
            return True

    def discard(self, target: ConfigurationTarget, scope_key: str) -> None:
        """Forget the cached document for the scope (its owner left the workspace)."""

        self._documents.pop((target, scope_key), None)
        self._locks.pop((target, scope_key), None)

    def reload(self) -> None:
        """Drop every cached document so the next read hits persistence."""

        self._documents.clear()

    def _document(self, target: ConfigurationTarget, scope_key: str) -> ScopeDocument:
        scope: ScopeKey = (target, scope_key)
        document = self._documents.get(scope)
        if document is None:
            document = self._persistence.read(target, scope_key)
            self._documents[scope] = document
        return document

    def _lock_for(self, scope: ScopeKey) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock_loop is not loop:
            self._locks.clear()
            self._lock_loop = loop
        lock = self._locks.get(scope)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[scope] = lock
        return lock


__all__ = [
    "InMemorySettingsPersistence",
    "JsonFileSettingsPersistence",
    "ScopeDocument",
    "ScopeLocator",
    "ScopeStore",
    "SettingsPersistence",
]
