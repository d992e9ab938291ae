# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from lintscope.cancellation import NEVER_CANCELLED, CancellationToken
from lintscope.documents import SourceDocument
from lintscope.process import ProcessRequest, ProcessResult
from lintscope.services import LintscopeServices


@dataclass
class RecordingRunner:
    """Process runner double returning queued results and recording requests."""

    results: list[ProcessResult] = field(default_factory=list)
    requests: list[ProcessRequest] = field(default_factory=list)
    error: BaseException | None = None

    async def run(self, request: ProcessRequest, token: CancellationToken = NEVER_CANCELLED) -> ProcessResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if token.is_cancellation_requested:
            return ProcessResult.cancelled_result()
        if self.results:
            return self.results.pop(0)
        return ProcessResult(returncode=0)


@dataclass(frozen=True)
class WorkspaceDirs:
    root: Path
    folder_a: Path
    folder_b: Path
    outside: Path


@pytest.fixture
def workspace_dirs(tmp_path: Path) -> WorkspaceDirs:
    root = tmp_path / "ws"
    folder_a = root / "a"
    folder_b = root / "b"
    outside = tmp_path / "elsewhere"
    for directory in (folder_a, folder_b, outside):
        directory.mkdir(parents=True)
    return WorkspaceDirs(root=root, folder_a=folder_a, folder_b=folder_b, outside=outside)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def services(workspace_dirs: WorkspaceDirs, runner: RecordingRunner) -> LintscopeServices:
    return LintscopeServices.in_memory(
        workspace_dirs.root,
        [workspace_dirs.folder_a, workspace_dirs.folder_b],
        runner=runner,
    )


@pytest.fixture
def document_a(workspace_dirs: WorkspaceDirs) -> SourceDocument:
    path = workspace_dirs.folder_a / "module.py"
    path.write_text("import os\n", encoding="utf-8")
    return SourceDocument(path=path.resolve(), text="import os\n")


@pytest.fixture
def user_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    directory = tmp_path / "user"
    monkeypatch.setenv("LINTSCOPE_USER_DIR", str(directory))
    yield directory
