# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Composition root wiring settings, products, linters, and propagation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .cancellation import NEVER_CANCELLED, CancellationToken
from .config.defaults import build_default_schema
from .config.loader import LintscopeConfig, load_config
from .config.models import ConfigurationTarget, SettingInspection
from .config.resolver import ConfigurationResolver
from .config.schema import SettingsSchema
from .config.store import InMemorySettingsPersistence, JsonFileSettingsPersistence, ScopeStore, SettingsPersistence
from .config.workspace import Workspace
from .documents import DocumentProvider, FileSystemDocumentProvider, TextDocument
from .interpreter import InterpreterPathPropagator, PropagationResult
from .linting.base import Linter
from .linting.manager import LinterManager
from .linting.models import Diagnostic
from .process import AsyncProcessRunner, ProcessRunner
from .products.models import Product
from .products.registry import ProductRegistry, register_default_path_services


class LintscopeServices:
    """Bundle of collaborating services exposed to callers.

    Build instances with :meth:`open` (settings on disk), :meth:`from_config`
    (explicit layout), or :meth:`in_memory` (no persistence, used by tests and
    embedders).
    """

    def __init__(
        self,
        resolver: ConfigurationResolver,
        *,
        runner: ProcessRunner | None = None,
        documents: DocumentProvider | None = None,
    ) -> None:
        self._resolver = resolver
        self._documents = documents or FileSystemDocumentProvider()
        self._registry = register_default_path_services(ProductRegistry(resolver))
        self._linters = LinterManager(resolver, self._registry, runner or AsyncProcessRunner())
        self._propagator = InterpreterPathPropagator(resolver)

    # ===== Construction =====

    @classmethod
    def from_config(
        cls,
        config: LintscopeConfig,
        *,
        persistence: SettingsPersistence | None = None,
        schema: SettingsSchema | None = None,
        runner: ProcessRunner | None = None,
        documents: DocumentProvider | None = None,
    ) -> LintscopeServices:
        """Return services for the layout described by ``config``."""

        store = ScopeStore(persistence or JsonFileSettingsPersistence(config.locator()))
        resolver = ConfigurationResolver(schema or build_default_schema(), store, config.build_workspace())
        return cls(resolver, runner=runner, documents=documents)

    @classmethod
    def open(
        cls,
        root: Path,
        *,
        user_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
        runner: ProcessRunner | None = None,
    ) -> LintscopeServices:
        """Load the workspace at ``root`` and return services persisting to JSON files.

        Raises:
            WorkspaceConfigError: If the workspace file is invalid.
        """

        return cls.from_config(load_config(root, user_dir=user_dir, env=env), runner=runner)

    @classmethod
    def in_memory(
        cls,
        root: Path,
        folders: Iterable[Path] = (),
        *,
        runner: ProcessRunner | None = None,
        documents: DocumentProvider | None = None,
    ) -> LintscopeServices:
        """Return services whose settings live only in memory."""

        store = ScopeStore(InMemorySettingsPersistence())
        resolver = ConfigurationResolver(build_default_schema(), store, Workspace(root, folders))
        return cls(resolver, runner=runner, documents=documents)

    # ===== Accessors =====

    @property
    def resolver(self) -> ConfigurationResolver:
        return self._resolver

    @property
    def registry(self) -> ProductRegistry:
        return self._registry

    @property
    def linters(self) -> LinterManager:
        return self._linters

    @property
    def propagator(self) -> InterpreterPathPropagator:
        return self._propagator

    @property
    def workspace(self) -> Workspace:
        return self._resolver.workspace

    # ===== Produced API =====

    def resolve_setting(self, key: str, resource: Path | None = None) -> Any:
        """Return the effective value of ``key`` for ``resource``."""

        return self._resolver.get(key, resource)

    def inspect_setting(self, key: str, resource: Path | None = None) -> SettingInspection:
        """Return the default and per-scope values of ``key`` for ``resource``."""

        return self._resolver.inspect(key, resource)

    async def update_setting(
        self,
        key: str,
        value: Any,
        resource: Path | None = None,
        target: ConfigurationTarget = ConfigurationTarget.WORKSPACE_FOLDER,
    ) -> ConfigurationTarget:
        """Write ``value`` for ``key`` at ``target``; ``None`` clears it.

        Returns the target actually written, which is the workspace when no
        folder contains ``resource``.
        """

        return await self._resolver.update(key, value, resource, target)

    def create_linter(self, product: Product, resource: Path | None = None) -> Linter:
        """Return a fresh linter for ``product`` configured for ``resource``."""

        return self._linters.create_linter(product, resource)

    async def lint(
        self,
        document: TextDocument | Path,
        token: CancellationToken = NEVER_CANCELLED,
        products: Iterable[Product] | None = None,
    ) -> list[Diagnostic]:
        """Lint ``document`` (a document or a path opened through the document provider)."""

        if isinstance(document, Path):
            document = self._documents.open(document)
        return await self._linters.lint_document(document, token, products)

    async def propagate_interpreter_path(
        self,
        new_path: str | None,
        resource: Path | None = None,
        targets: Iterable[ConfigurationTarget] = (ConfigurationTarget.WORKSPACE,),
    ) -> list[PropagationResult]:
        """Write ``new_path`` to each of ``targets`` independently."""

        return await self._propagator.propagate(new_path, resource, targets)


__all__ = ["LintscopeServices"]
