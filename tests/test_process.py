# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the asyncio process runner and cancellation tokens."""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path

import pytest

from lintscope.cancellation import NEVER_CANCELLED, CancellationTokenSource
from lintscope.process import AsyncProcessRunner, ProcessRequest, ProcessResult, ProcessRunner


def test_runner_captures_output_and_exit_code(tmp_path: Path) -> None:
    request = ProcessRequest(
        executable=sys.executable,
        args=("-c", "import os, sys; print(os.getcwd()); print('oops', file=sys.stderr); sys.exit(3)"),
        cwd=tmp_path,
    )

    result = asyncio.run(AsyncProcessRunner().run(request))

    assert result.returncode == 3
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()
    assert result.stderr.strip() == "oops"
    assert result.cancelled is False


def test_runner_merges_request_environment() -> None:
    request = ProcessRequest(
        executable=sys.executable,
        args=("-c", "import os; print(os.environ['LINTSCOPE_MARKER'])"),
        env={"LINTSCOPE_MARKER": "visible"},
    )

    result = asyncio.run(AsyncProcessRunner().run(request))

    assert result.stdout.strip() == "visible"


def test_runner_reports_missing_executables(tmp_path: Path) -> None:
    runner = AsyncProcessRunner()

    with pytest.raises(FileNotFoundError):
        asyncio.run(runner.run(ProcessRequest(executable="lintscope-definitely-missing-tool")))
    with pytest.raises(FileNotFoundError):
        asyncio.run(runner.run(ProcessRequest(executable=str(tmp_path / "bin" / "tool"))))


def _write_script(path: Path, body: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    path.chmod(0o755)


@pytest.mark.skipif(sys.platform == "win32", reason="shell scripts require a POSIX shell")
def test_runner_resolves_relative_executable_against_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    workspace = tmp_path / "ws"
    elsewhere = tmp_path / "elsewhere"
    _write_script(workspace / "tools" / "tool", "echo from-workspace")
    _write_script(elsewhere / "tools" / "tool", "echo from-elsewhere")
    monkeypatch.chdir(elsewhere)

    result = asyncio.run(AsyncProcessRunner().run(ProcessRequest(executable="tools/tool", cwd=workspace)))

    assert result.returncode == 0
    assert result.stdout.strip() == "from-workspace"


def test_runner_relative_executable_missing_under_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_script(tmp_path / "tools" / "tool", "echo stray")
    monkeypatch.chdir(tmp_path)
    (tmp_path / "ws").mkdir()

    with pytest.raises(FileNotFoundError, match="tools/tool"):
        asyncio.run(AsyncProcessRunner().run(ProcessRequest(executable="tools/tool", cwd=tmp_path / "ws")))


def test_runner_skips_spawn_when_already_cancelled() -> None:
    source = CancellationTokenSource()
    source.cancel()

    result = asyncio.run(AsyncProcessRunner().run(ProcessRequest(executable="never-spawned"), source.token))

    assert result == ProcessResult.cancelled_result()


def test_runner_terminates_on_cancellation() -> None:
    runner = AsyncProcessRunner(kill_grace_period=1.0)
    source = CancellationTokenSource()
    request = ProcessRequest(executable=sys.executable, args=("-c", "import time; time.sleep(30)"))

    async def scenario() -> ProcessResult:
        asyncio.get_running_loop().call_later(0.2, source.cancel)
        return await runner.run(request, source.token)

    started = time.monotonic()
    result = asyncio.run(scenario())

    assert result.cancelled is True
    assert result.returncode is None
    assert time.monotonic() - started < 10


def test_async_runner_satisfies_protocol() -> None:
    assert isinstance(AsyncProcessRunner(), ProcessRunner)
    assert ProcessRequest(executable="tool", args=("a", "b")).command == ("tool", "a", "b")


def test_token_callbacks_run_once() -> None:
    source = CancellationTokenSource()
    calls: list[str] = []
    source.token.on_cancelled(lambda: calls.append("first"))
    dispose = source.token.on_cancelled(lambda: calls.append("disposed"))
    dispose()

    source.cancel()
    source.cancel()
    source.token.on_cancelled(lambda: calls.append("late"))

    assert source.token.is_cancellation_requested is True
    assert calls == ["first", "late"]


def test_token_isolates_failing_callbacks() -> None:
    source = CancellationTokenSource()
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("boom")

    source.token.on_cancelled(broken)
    source.token.on_cancelled(lambda: calls.append("after"))
    source.cancel()

    assert calls == ["after"]


def test_token_wait_resumes_on_cancel() -> None:
    source = CancellationTokenSource()

    async def scenario() -> bool:
        waiter = asyncio.ensure_future(source.token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()
        source.cancel()
        await asyncio.wait_for(waiter, timeout=5)
        return source.token.is_cancellation_requested

    assert asyncio.run(scenario()) is True


def test_never_cancelled_token() -> None:
    assert NEVER_CANCELLED.is_cancellation_requested is False
