# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Propagate a selected interpreter path to one or more configuration scopes."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Final

from .config.defaults import INTERPRETER_PATH_KEY
from .config.models import ConfigurationTarget
from .config.resolver import ConfigurationResolver
from .errors import SettingScopeError

LOGGER = logging.getLogger(__name__)


class InterpreterPathUpdater(ABC):
    """Write the interpreter path at one configuration target."""

    target: ClassVar[ConfigurationTarget]

    def __init__(self, resolver: ConfigurationResolver) -> None:
        self._resolver = resolver

    def resource_for(self, resource: Path | None) -> Path | None:
        """Return the resource used to address this updater's scope."""

        return resource

    async def update(self, path: str | None, resource: Path | None) -> None:
        """Write ``path`` (or clear it when ``None``) at :attr:`target`."""

        scoped = self.resource_for(resource)
        await self._resolver.update(INTERPRETER_PATH_KEY, path, scoped, self.target)
        if path is None:
            LOGGER.info("Cleared interpreter path in %s scope", self.target.value)
        else:
            LOGGER.info("Set interpreter path to %s in %s scope", path, self.target.value)


class GlobalInterpreterPathUpdater(InterpreterPathUpdater):
    target = ConfigurationTarget.GLOBAL

    def resource_for(self, resource: Path | None) -> Path | None:
        return None


class WorkspaceInterpreterPathUpdater(InterpreterPathUpdater):
    target = ConfigurationTarget.WORKSPACE


class WorkspaceFolderInterpreterPathUpdater(InterpreterPathUpdater):
    """Write the folder scope; the resource must lie inside a workspace folder."""

    target = ConfigurationTarget.WORKSPACE_FOLDER

    def resource_for(self, resource: Path | None) -> Path | None:
        if self._resolver.workspace.folder_for(resource) is None:
            raise SettingScopeError(f"no workspace folder contains {resource}")
        return resource


_UPDATERS: Final[dict[ConfigurationTarget, type[InterpreterPathUpdater]]] = {
    updater.target: updater
    for updater in (
        GlobalInterpreterPathUpdater,
        WorkspaceInterpreterPathUpdater,
        WorkspaceFolderInterpreterPathUpdater,
    )
}


class InterpreterPathUpdaterFactory:
    """Build the updater responsible for a configuration target."""

    def __init__(self, resolver: ConfigurationResolver) -> None:
        self._resolver = resolver

    def create(self, target: ConfigurationTarget) -> InterpreterPathUpdater:
        """Return a new updater for ``target``."""

        return _UPDATERS[target](self._resolver)


@dataclass(frozen=True, slots=True)
class PropagationResult:
    """Outcome of writing the interpreter path at one target."""

    target: ConfigurationTarget
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        """Return ``True`` when the write was persisted."""

        return self.error is None


class InterpreterPathPropagator:
    """Write an interpreter path to several scopes concurrently.

    Each target is written independently: a failure at one target neither
    prevents nor rolls back the writes at the others.
    """

    def __init__(self, resolver: ConfigurationResolver, factory: InterpreterPathUpdaterFactory | None = None) -> None:
        self._factory = factory or InterpreterPathUpdaterFactory(resolver)

    async def propagate(
        self,
        new_path: str | None,
        resource: Path | None = None,
        targets: Iterable[ConfigurationTarget] = (ConfigurationTarget.WORKSPACE,),
    ) -> list[PropagationResult]:
        """Write ``new_path`` at every target in ``targets``.

        Args:
            new_path: Interpreter path, or ``None`` to clear it.
            resource: Resource addressing workspace-folder writes.
            targets: Targets to write; duplicates are written once.

        Returns:
            list[PropagationResult]: One result per distinct target, in order.
        """

        ordered = list(dict.fromkeys(targets))
        updaters = [self._factory.create(target) for target in ordered]
        outcomes = await asyncio.gather(
            *(updater.update(new_path, resource) for updater in updaters),
            return_exceptions=True,
        )
        results: list[PropagationResult] = []
        for target, outcome in zip(ordered, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                LOGGER.warning("Failed to update interpreter path in %s scope: %s", target.value, outcome)
                results.append(PropagationResult(target=target, error=outcome))
            else:
                results.append(PropagationResult(target=target))
        return results


__all__ = [
    "GlobalInterpreterPathUpdater",
    "InterpreterPathPropagator",
    "InterpreterPathUpdater",
    "InterpreterPathUpdaterFactory",
    "PropagationResult",
    "WorkspaceFolderInterpreterPathUpdater",
    "WorkspaceInterpreterPathUpdater",
]
