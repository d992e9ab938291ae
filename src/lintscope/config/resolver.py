# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve effective settings across the global, workspace, and folder scopes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

from .models import GLOBAL_SCOPE_KEY, ConfigurationTarget, SettingChange, SettingInspection
from .schema import SettingsSchema
from .store import ScopeStore
from .workspace import Workspace

LOGGER = logging.getLogger(__name__)

ChangeListener = Callable[[SettingChange], None]


class ConfigurationResolver:
    """Compute effective setting values and write them at explicit scopes.

    Resolution order (highest to lowest priority):

    1. Workspace folder containing the resource
    2. Workspace
    3. Global
    4. Schema default

    Args:
        schema: Declarations of every known setting.
        store: Scope store holding raw values.
        workspace: Workspace layout used to map resources to folders.
    """

    def __init__(self, schema: SettingsSchema, store: ScopeStore, workspace: Workspace) -> None:
        self._schema = schema
        self._store = store
        self._workspace = workspace
        self._listeners: list[ChangeListener] = []

    @property
    def schema(self) -> SettingsSchema:
        """Return the schema used for validation and defaults."""

        return self._schema

    @property
    def workspace(self) -> Workspace:
        """Return the workspace layout."""

        return self._workspace

    # ===== Reads =====

    def get(self, key: str, resource: Path | None = None) -> Any:
        """Return the effective value of ``key`` for ``resource``.

        Args:
            key: Setting name.
            resource: File or folder selecting the folder scope; ``None``
                consults only the workspace and global scopes.

        Returns:
            Any: First value defined from the most specific scope, else the schema default.

        Raises:
            UnknownSettingKeyError: If ``key`` is not declared in the schema.
        """

        definition = self._schema.require(key)
        for target, scope_key in self._scope_chain(resource):
            value = self._store.get(target, scope_key, key)
            if value is not None:
                return value
        return definition.default_value()

    def inspect(self, key: str, resource: Path | None = None) -> SettingInspection:
        """Return the default and per-scope values of ``key`` for ``resource``.

        Raises:
            UnknownSettingKeyError: If ``key`` is not declared in the schema.
        """

        definition = self._schema.require(key)
        values: dict[ConfigurationTarget, Any] = {}
        for target, scope_key in self._scope_chain(resource):
            values[target] = self._store.get(target, scope_key, key)
        return SettingInspection(
            key=key,
            default_value=definition.default_value(),
            global_value=values.get(ConfigurationTarget.GLOBAL),
            workspace_value=values.get(ConfigurationTarget.WORKSPACE),
            workspace_folder_value=values.get(ConfigurationTarget.WORKSPACE_FOLDER),
        )

    def effective_settings(self, resource: Path | None = None) -> ResourceSettings:
        """Return a mapping view of every setting resolved for ``resource``."""

        return ResourceSettings(self, resource)

    # ===== Writes =====

    async def update(
        self,
        key: str,
        value: Any,
        resource: Path | None = None,
        target: ConfigurationTarget = ConfigurationTarget.WORKSPACE_FOLDER,
    ) -> ConfigurationTarget:
        """Write ``value`` for ``key`` at ``target``.

        ``None`` clears the setting at ``target``; clearing an unset value is a
        no-op. The call returns after the value is persisted and visible to
        :meth:`get`.

        Args:
            key: Setting name.
            value: New value, or ``None`` to clear.
            resource: Resource selecting the workspace folder for folder writes.
            target: Configuration target to write.

        Returns:
            ConfigurationTarget: The target written. A folder write for a
            resource outside every folder lands in the workspace scope.

        Raises:
            UnknownSettingKeyError: If ``key`` is not declared in the schema.
            InvalidSettingValueError: If ``value`` does not match the declared type.
            SettingScopeError: If the schema forbids writes at ``target``.
            SettingsPersistenceError: If the write cannot be persisted.
        """

        definition = self._schema.require(key)
        if value is not None:
            value = definition.validate(value)
        target = self._effective_target(target, resource)
        definition.check_target(target)
        scope_key = self.scope_key_for(target, resource)
        changed = await self._store.set(target, scope_key, key, value)
        if changed:
            LOGGER.info("Updated %s in %s scope (%s)", key, target.value, scope_key)
            self._notify(SettingChange(key=key, target=target, scope_key=scope_key, value=value, resource=resource))
        return target

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Subscribe ``listener`` to committed writes; returns an unsubscribe function."""

        self._listeners.append(listener)

        def _dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _dispose

    # ===== Scope helpers =====

    def scope_key_for(self, target: ConfigurationTarget, resource: Path | None) -> str:
        """Return the scoping key that ``resource`` maps to at ``target``."""

        if target is ConfigurationTarget.GLOBAL:
            return GLOBAL_SCOPE_KEY
        if target is ConfigurationTarget.WORKSPACE:
            return self._workspace.scope_key
        folder = self._workspace.folder_for(resource)
        if folder is None:
            return self._workspace.scope_key
        return folder.scope_key

    def remove_folder(self, folder: Path) -> None:
        """Remove ``folder`` from the workspace and forget its folder-scope settings."""

        removed = self._workspace.remove_folder(folder)
        if removed is not None:
            self._store.discard(ConfigurationTarget.WORKSPACE_FOLDER, removed.scope_key)

    def _effective_target(self, target: ConfigurationTarget, resource: Path | None) -> ConfigurationTarget:
        if target is ConfigurationTarget.WORKSPACE_FOLDER and self._workspace.folder_for(resource) is None:
            LOGGER.debug("no workspace folder contains %s, writing to workspace scope", resource)
            return ConfigurationTarget.WORKSPACE
        return target

    def _scope_chain(self, resource: Path | None) -> Iterator[tuple[ConfigurationTarget, str]]:
        folder = self._workspace.folder_for(resource)
        if folder is not None:
            yield ConfigurationTarget.WORKSPACE_FOLDER, folder.scope_key
        yield ConfigurationTarget.WORKSPACE, self._workspace.scope_key
        yield ConfigurationTarget.GLOBAL, GLOBAL_SCOPE_KEY

    def _notify(self, change: SettingChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:  # noqa: BLE001
                LOGGER.exception("settings listener %r failed", listener)


class ResourceSettings(Mapping[str, Any]):
    """Read-only mapping of every known setting resolved for one resource."""

    def __init__(self, resolver: ConfigurationResolver, resource: Path | None) -> None:
        self._resolver = resolver
        self._resource = resource

    @property
    def resource(self) -> Path | None:
        """Return the resource the view resolves settings for."""

        return self._resource

    def __getitem__(self, key: str) -> Any:
        return self._resolver.get(key, self._resource)

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolver.schema)

    def __len__(self) -> int:
        return len(self._resolver.schema)


__all__ = ["ChangeListener", "ConfigurationResolver", "ResourceSettings"]
