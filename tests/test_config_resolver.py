# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered settings resolution and scoped writes."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from lintscope.config import ConfigurationTarget, SettingChange
from lintscope.config.defaults import LANGUAGE_SERVER_KEY, enabled_setting
from lintscope.errors import InvalidSettingValueError, SettingScopeError, UnknownSettingKeyError
from lintscope.products import Product
from lintscope.services import LintscopeServices

if TYPE_CHECKING:
    from conftest import WorkspaceDirs

FLAKE8_ENABLED = enabled_setting(Product.FLAKE8)
GLOBAL = ConfigurationTarget.GLOBAL
WORKSPACE = ConfigurationTarget.WORKSPACE
FOLDER = ConfigurationTarget.WORKSPACE_FOLDER


def test_folder_value_wins_over_workspace_and_global(
    services: LintscopeServices,
    workspace_dirs: WorkspaceDirs,
) -> None:
    resolver = services.resolver
    file_a = workspace_dirs.folder_a / "mod.py"
    file_b = workspace_dirs.folder_b / "mod.py"

    async def scenario() -> None:
        await resolver.update(FLAKE8_ENABLED, False, None, GLOBAL)
        await resolver.update(FLAKE8_ENABLED, False, None, WORKSPACE)
        await resolver.update(FLAKE8_ENABLED, True, file_a, FOLDER)

    asyncio.run(scenario())

    assert resolver.get(FLAKE8_ENABLED, file_a) is True
    assert resolver.get(FLAKE8_ENABLED, file_b) is False
    assert resolver.get(FLAKE8_ENABLED, None) is False


def test_global_true_workspace_false_resolves_false(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resolver = services.resolver

    async def scenario() -> None:
        await resolver.update(FLAKE8_ENABLED, True, None, GLOBAL)
        await resolver.update(FLAKE8_ENABLED, False, None, WORKSPACE)

    asyncio.run(scenario())

    assert resolver.get(FLAKE8_ENABLED, workspace_dirs.folder_a / "mod.py") is False
    assert resolver.get(FLAKE8_ENABLED) is False


def test_unset_everywhere_returns_schema_default(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resolver = services.resolver

    assert resolver.get(FLAKE8_ENABLED, workspace_dirs.folder_a / "mod.py") is False
    assert resolver.get(enabled_setting(Product.PYLINT)) is True
    assert resolver.get("linting.maxNumberOfProblems") == 100


def test_clearing_falls_through_to_next_scope(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resolver = services.resolver
    resource = workspace_dirs.folder_a / "mod.py"

    async def scenario() -> None:
        await resolver.update("linting.maxNumberOfProblems", 10, None, WORKSPACE)
        await resolver.update("linting.maxNumberOfProblems", 5, resource, FOLDER)
        assert resolver.get("linting.maxNumberOfProblems", resource) == 5
        await resolver.update("linting.maxNumberOfProblems", None, resource, FOLDER)

    asyncio.run(scenario())

    assert resolver.get("linting.maxNumberOfProblems", resource) == 10


def test_update_round_trips_exact_value(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resolver = services.resolver
    resource = workspace_dirs.folder_b / "pkg" / "mod.py"
    args = ["--disable=C0114", "--max-line-length=120"]

    asyncio.run(resolver.update("linting.pylintArgs", args, resource, FOLDER))

    value = resolver.get("linting.pylintArgs", resource)
    assert value == args
    value.append("--mutated")
    assert resolver.get("linting.pylintArgs", resource) == args


def test_repeated_update_is_idempotent(services: LintscopeServices) -> None:
    resolver = services.resolver
    changes: list[SettingChange] = []
    resolver.on_did_change(changes.append)

    async def scenario() -> None:
        await resolver.update(FLAKE8_ENABLED, True, None, WORKSPACE)
        await resolver.update(FLAKE8_ENABLED, True, None, WORKSPACE)

    asyncio.run(scenario())

    assert resolver.get(FLAKE8_ENABLED) is True
    assert len(changes) == 1
    assert changes[0].target is WORKSPACE
    assert changes[0].value is True


def test_clearing_absent_setting_is_noop(services: LintscopeServices) -> None:
    resolver = services.resolver
    changes: list[SettingChange] = []
    dispose = resolver.on_did_change(changes.append)

    asyncio.run(resolver.update(FLAKE8_ENABLED, None, None, GLOBAL))

    assert changes == []
    dispose()
    asyncio.run(resolver.update(FLAKE8_ENABLED, True, None, GLOBAL))
    assert changes == []


def test_unknown_key_raises(services: LintscopeServices) -> None:
    with pytest.raises(UnknownSettingKeyError) as excinfo:
        services.resolver.get("linting.doesNotExist")
    assert isinstance(excinfo.value, KeyError)
    assert "linting.doesNotExist" in str(excinfo.value)

    with pytest.raises(UnknownSettingKeyError):
        asyncio.run(services.resolver.update("linting.doesNotExist", True, None, GLOBAL))


def test_invalid_value_is_rejected_without_coercion(services: LintscopeServices) -> None:
    with pytest.raises(InvalidSettingValueError):
        asyncio.run(services.resolver.update(FLAKE8_ENABLED, "yes", None, GLOBAL))
    with pytest.raises(InvalidSettingValueError):
        asyncio.run(services.resolver.update("linting.maxNumberOfProblems", True, None, GLOBAL))
    with pytest.raises(InvalidSettingValueError):
        asyncio.run(services.resolver.update(LANGUAGE_SERVER_KEY, "Emacs", None, GLOBAL))

    assert services.resolver.get(FLAKE8_ENABLED) is False


def test_window_scoped_setting_rejects_folder_target(
    services: LintscopeServices,
    workspace_dirs: WorkspaceDirs,
) -> None:
    resource = workspace_dirs.folder_a / "mod.py"

    with pytest.raises(SettingScopeError):
        asyncio.run(services.resolver.update(LANGUAGE_SERVER_KEY, "Jedi", resource, FOLDER))

    asyncio.run(services.resolver.update(LANGUAGE_SERVER_KEY, "Jedi", resource, WORKSPACE))
    assert services.resolver.get(LANGUAGE_SERVER_KEY, resource) == "Jedi"


def test_folder_write_outside_folders_falls_back_to_workspace(
    services: LintscopeServices,
    workspace_dirs: WorkspaceDirs,
) -> None:
    resolver = services.resolver
    outside = workspace_dirs.outside / "script.py"

    written = asyncio.run(resolver.update(FLAKE8_ENABLED, True, outside, FOLDER))
    inside = asyncio.run(resolver.update(FLAKE8_ENABLED, False, workspace_dirs.folder_a / "m.py", FOLDER))

    assert written is WORKSPACE
    assert inside is FOLDER
    inspection = resolver.inspect(FLAKE8_ENABLED, workspace_dirs.folder_b / "x.py")
    assert inspection.workspace_value is True
    assert inspection.workspace_folder_value is None


def test_inspect_reports_each_scope(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resolver = services.resolver
    resource = workspace_dirs.folder_a / "mod.py"

    async def scenario() -> None:
        await resolver.update("linting.maxNumberOfProblems", 50, None, GLOBAL)
        await resolver.update("linting.maxNumberOfProblems", 20, resource, FOLDER)

    asyncio.run(scenario())

    inspection = resolver.inspect("linting.maxNumberOfProblems", resource)
    assert inspection.default_value == 100
    assert inspection.global_value == 50
    assert inspection.workspace_value is None
    assert inspection.workspace_folder_value == 20
    assert inspection.effective_target is FOLDER
    assert inspection.effective_value == 20


def test_removing_folder_forgets_its_settings(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resolver = services.resolver
    resource = workspace_dirs.folder_a / "mod.py"

    asyncio.run(resolver.update(FLAKE8_ENABLED, True, resource, FOLDER))
    resolver.remove_folder(workspace_dirs.folder_a)

    assert resolver.workspace.folder_for(resource) is None
    assert resolver.get(FLAKE8_ENABLED, resource) is False


def test_concurrent_updates_to_one_scope_are_all_kept(services: LintscopeServices) -> None:
    resolver = services.resolver
    products = [Product.FLAKE8, Product.MYPY, Product.BANDIT, Product.PROSPECTOR, Product.PYDOCSTYLE]

    async def scenario() -> None:
        await asyncio.gather(
            *(resolver.update(enabled_setting(product), True, None, WORKSPACE) for product in products),
            *(resolver.update("linting.maxNumberOfProblems", limit, None, GLOBAL) for limit in range(1, 6)),
        )

    asyncio.run(scenario())

    for product in products:
        assert resolver.get(enabled_setting(product)) is True
    assert resolver.inspect("linting.maxNumberOfProblems").global_value == 5


def test_failing_listener_does_not_block_others(services: LintscopeServices) -> None:
    received: list[str] = []

    def broken(change: SettingChange) -> None:
        raise RuntimeError("boom")

    services.resolver.on_did_change(broken)
    services.resolver.on_did_change(lambda change: received.append(change.key))

    asyncio.run(services.resolver.update(FLAKE8_ENABLED, True, None, GLOBAL))

    assert received == [FLAKE8_ENABLED]
