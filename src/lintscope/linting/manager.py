# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Factory and coordinator for linters bound to resolved settings."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from ..cancellation import NEVER_CANCELLED, CancellationToken
from ..config.defaults import (
    LINTING_CWD_KEY,
    LINTING_ENABLED_KEY,
    MAX_PROBLEMS_KEY,
    SEVERITY_OVERRIDES_KEY,
    args_setting,
    enabled_setting,
    path_setting,
)
from ..config.models import ConfigurationTarget
from ..config.resolver import ConfigurationResolver
from ..documents import TextDocument
from ..errors import ProductNotConfiguredError
from ..process import ProcessRunner
from ..products.models import Product
from ..products.registry import ProductRegistry
from .base import Linter, LinterSettings
from .linters import LINTER_CLASSES
from .models import Diagnostic, LinterInfo

LOGGER = logging.getLogger(__name__)


class LinterManager:
    """Build linters from current settings and run the active ones.

    Linters are never cached: every :meth:`create_linter` call captures the
    settings in effect at that moment.

    Args:
        resolver: Configuration resolver supplying enable flags and options.
        registry: Product registry resolving executables and arguments.
        runner: Process runner handed to every linter.
        linter_classes: Mapping from product to linter implementation.
    """

    def __init__(
        self,
        resolver: ConfigurationResolver,
        registry: ProductRegistry,
        runner: ProcessRunner,
        *,
        linter_classes: Mapping[Product, type[Linter]] | None = None,
    ) -> None:
        self._resolver = resolver
        self._registry = registry
        self._runner = runner
        self._linter_classes = dict(LINTER_CLASSES if linter_classes is None else linter_classes)

    # ===== Catalogue =====

    def get_all_linter_infos(self) -> list[LinterInfo]:
        """Return descriptions of every supported linter in declaration order."""

        return [self.linter_info(product) for product in self._linter_classes]

    def linter_info(self, product: Product) -> LinterInfo:
        """Return the description of ``product``.

        Raises:
            ProductNotConfiguredError: If ``product`` is not a supported linter.
        """

        linter_class = self._linter_class(product)
        return LinterInfo(
            product=product,
            name=product.value,
            enabled_setting=enabled_setting(product),
            path_setting=path_setting(product),
            args_setting=args_setting(product),
            default_args=linter_class.output_args,
        )

    # ===== Enablement =====

    def is_lint_enabled(self, resource: Path | None = None) -> bool:
        """Return the master linting switch for ``resource``."""

        return bool(self._resolver.get(LINTING_ENABLED_KEY, resource))

    async def enable_linting(
        self,
        enabled: bool,
        resource: Path | None = None,
        target: ConfigurationTarget = ConfigurationTarget.WORKSPACE,
    ) -> None:
        """Set the master linting switch at ``target``."""

        await self._resolver.update(LINTING_ENABLED_KEY, enabled, resource, target)

    def get_active_linters(self, resource: Path | None = None) -> list[LinterInfo]:
        """Return the linters enabled for ``resource`` in declaration order."""

        return [
            self.linter_info(product)
            for product in self._linter_classes
            if self._resolver.get(enabled_setting(product), resource)
        ]

    async def set_active_linters(
        self,
        products: Iterable[Product],
        resource: Path | None = None,
        target: ConfigurationTarget = ConfigurationTarget.WORKSPACE,
    ) -> None:
        """Enable exactly ``products`` at ``target`` and disable every other linter there.

        Raises:
            ProductNotConfiguredError: If any product is not a supported linter;
                nothing is written in that case.
        """

        wanted = set(products)
        for product in wanted:
            self._linter_class(product)
        for product in self._linter_classes:
            await self._resolver.update(enabled_setting(product), product in wanted, resource, target)

    # ===== Linters =====

    def create_linter(self, product: Product, resource: Path | None = None) -> Linter:
        """Return a fresh linter for ``product`` configured for ``resource``.

        Nothing is executed; the linter captures the invocation, enable flags,
        working directory, problem limit, and severity overrides.

        Raises:
            ProductNotConfiguredError: If ``product`` is not a supported linter
                or its executable cannot be resolved.
        """

        linter_class = self._linter_class(product)
        invocation = self._registry.resolve(product, resource)
        settings = self._resolver.effective_settings(resource)
        enabled = bool(settings[LINTING_ENABLED_KEY]) and bool(settings[enabled_setting(product)])
        captured = LinterSettings(
            enabled=enabled,
            invocation=invocation,
            cwd=self._working_directory(settings[LINTING_CWD_KEY], resource),
            max_problems=int(settings[MAX_PROBLEMS_KEY]),
            severity_overrides=dict(settings[SEVERITY_OVERRIDES_KEY]),
        )
        return linter_class(captured, self._runner)

    async def lint_document(
        self,
        document: TextDocument,
        token: CancellationToken = NEVER_CANCELLED,
        products: Iterable[Product] | None = None,
    ) -> list[Diagnostic]:
        """Run linters against ``document`` concurrently.

        Args:
            document: Document to lint.
            token: Cancellation token shared by every linter.
            products: Linters to run, each at most once; defaults to the active linters.

        Returns:
            list[Diagnostic]: Diagnostics concatenated in linter order.

        Raises:
            LintExecutionError: The first failure in linter order, after every
                linter has finished.
        """

        resource = document.path
        if not self.is_lint_enabled(resource):
            LOGGER.debug("linting disabled for %s", resource)
            return []
        if products is None:
            selected = [info.product for info in self.get_active_linters(resource)]
        else:
            selected = list(dict.fromkeys(products))
        linters = [self.create_linter(product, resource) for product in selected]
        outcomes = await asyncio.gather(*(linter.lint(document, token) for linter in linters), return_exceptions=True)
        diagnostics: list[Diagnostic] = []
        errors: list[BaseException] = []
        for linter, outcome in zip(linters, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                LOGGER.warning("%s failed on %s: %s", linter.name, resource, outcome)
                errors.append(outcome)
                continue
            diagnostics.extend(outcome)
        if errors:
            raise errors[0]
        return diagnostics

    def _linter_class(self, product: Product) -> type[Linter]:
        linter_class = self._linter_classes.get(product)
        if linter_class is None:
            raise ProductNotConfiguredError(product.value, "not a supported linter")
        return linter_class

    def _working_directory(self, configured: str | None, resource: Path | None) -> Path | None:
        workspace = self._resolver.workspace
        if configured:
            candidate = Path(configured).expanduser()
            return candidate if candidate.is_absolute() else (workspace.root / candidate).resolve()
        folder = workspace.folder_for(resource)
        return folder.path if folder is not None else None


__all__ = ["LinterManager"]
