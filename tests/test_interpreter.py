# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for interpreter path propagation."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from lintscope.config import ConfigurationTarget
from lintscope.config.defaults import INTERPRETER_PATH_KEY
from lintscope.errors import SettingScopeError
from lintscope.interpreter import (
    GlobalInterpreterPathUpdater,
    InterpreterPathUpdaterFactory,
    WorkspaceFolderInterpreterPathUpdater,
)
from lintscope.products import Product
from lintscope.services import LintscopeServices

if TYPE_CHECKING:
    from conftest import WorkspaceDirs

GLOBAL = ConfigurationTarget.GLOBAL
WORKSPACE = ConfigurationTarget.WORKSPACE
FOLDER = ConfigurationTarget.WORKSPACE_FOLDER


def test_propagate_writes_each_target_independently(services: LintscopeServices) -> None:
    async def scenario() -> None:
        results = await services.propagate_interpreter_path("/venv/bin/python", targets=[GLOBAL, WORKSPACE])
        assert [(result.target, result.succeeded) for result in results] == [(GLOBAL, True), (WORKSPACE, True)]
        await services.propagate_interpreter_path(None, targets=[GLOBAL])

    asyncio.run(scenario())

    inspection = services.inspect_setting(INTERPRETER_PATH_KEY)
    assert inspection.global_value is None
    assert inspection.workspace_value == "/venv/bin/python"
    assert services.resolve_setting(INTERPRETER_PATH_KEY) == "/venv/bin/python"
    assert services.registry.resolve(Product.PYLINT).executable == "/venv/bin/python"


def test_folder_target_needs_a_containing_folder(
    services: LintscopeServices,
    workspace_dirs: WorkspaceDirs,
) -> None:
    outside = workspace_dirs.outside / "script.py"

    results = asyncio.run(
        services.propagate_interpreter_path("/opt/python3", outside, targets=[FOLDER, WORKSPACE, GLOBAL]),
    )

    assert [result.target for result in results] == [FOLDER, WORKSPACE, GLOBAL]
    assert isinstance(results[0].error, SettingScopeError)
    assert results[1].succeeded and results[2].succeeded
    assert services.inspect_setting(INTERPRETER_PATH_KEY).workspace_value == "/opt/python3"


def test_folder_target_writes_folder_scope(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    resource = workspace_dirs.folder_b / "pkg" / "mod.py"

    (result,) = asyncio.run(services.propagate_interpreter_path("/b/python", resource, targets=[FOLDER]))

    assert result.succeeded
    assert services.resolve_setting(INTERPRETER_PATH_KEY, resource) == "/b/python"
    assert services.resolve_setting(INTERPRETER_PATH_KEY, workspace_dirs.folder_a / "mod.py") == "python"


def test_duplicate_targets_are_written_once(services: LintscopeServices) -> None:
    changes = []
    services.resolver.on_did_change(changes.append)

    results = asyncio.run(services.propagate_interpreter_path("/usr/bin/python3", targets=[WORKSPACE, WORKSPACE]))

    assert len(results) == 1
    assert len(changes) == 1


def test_factory_creates_updater_per_target(services: LintscopeServices, workspace_dirs: WorkspaceDirs) -> None:
    factory = InterpreterPathUpdaterFactory(services.resolver)

    global_updater = factory.create(GLOBAL)
    folder_updater = factory.create(FOLDER)

    assert isinstance(global_updater, GlobalInterpreterPathUpdater)
    assert global_updater.resource_for(workspace_dirs.folder_a) is None
    assert isinstance(folder_updater, WorkspaceFolderInterpreterPathUpdater)
    with pytest.raises(SettingScopeError):
        folder_updater.resource_for(None)
