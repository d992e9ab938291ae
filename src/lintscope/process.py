# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous, cancellable wrappers around external process execution."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .cancellation import NEVER_CANCELLED, CancellationToken

LOGGER = logging.getLogger(__name__)

DEFAULT_KILL_GRACE_PERIOD: Final[float] = 2.0


@dataclass(frozen=True, slots=True)
class ProcessRequest:
    """Immutable description of a command to execute."""

    executable: str
    args: tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def command(self) -> tuple[str, ...]:
        """Return the executable followed by its arguments."""

        return (self.executable, *self.args)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of a process execution."""

    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    cancelled: bool = False

    @classmethod
    def cancelled_result(cls) -> ProcessResult:
        """Return the result reported when execution was cancelled."""

        return cls(returncode=None, cancelled=True)


@runtime_checkable
class ProcessRunner(Protocol):
    """Protocol for services that execute external commands."""

    async def run(self, request: ProcessRequest, token: CancellationToken = NEVER_CANCELLED) -> ProcessResult:
        """Execute ``request`` honouring ``token``.

        Args:
            request: Command, working directory, and environment to use.
            token: Cancellation token observed while the process runs.

        Returns:
            ProcessResult: Captured output, or a cancelled result.

        Raises:
            FileNotFoundError: If the executable cannot be located.
            OSError: If the process cannot be spawned.
        """

        raise NotImplementedError


def _normalize_args(args: Sequence[str], cwd: Path | None = None) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head).expanduser()
    if head_path.is_absolute() or len(head_path.parts) > 1:
        # Relative paths name a file under the directory the command runs in.
        if not head_path.is_absolute() and cwd is not None:
            head_path = cwd / head_path
        if not head_path.exists():
            raise FileNotFoundError(f"Executable '{head}' does not exist")
        return [str(head_path.absolute()), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _decode(value: bytes | None) -> str:
    if not value:
        return ""
    return value.decode(errors="replace")


class AsyncProcessRunner:
    """Run commands with :mod:`asyncio` subprocesses and terminate them on cancellation."""

    def __init__(self, *, kill_grace_period: float = DEFAULT_KILL_GRACE_PERIOD) -> None:
        self._kill_grace_period = kill_grace_period

    async def run(self, request: ProcessRequest, token: CancellationToken = NEVER_CANCELLED) -> ProcessResult:
        """Execute ``request`` and capture stdout/stderr.

        Cancellation is checked before spawning and observed while the process
        runs; a cancelled run terminates the process (escalating to ``kill``
        after the grace period) and returns :meth:`ProcessResult.cancelled_result`.

        Args:
            request: Command, working directory, and environment to use.
            token: Cancellation token observed while the process runs.

        Returns:
            ProcessResult: Captured output, or a cancelled result.

        Raises:
            FileNotFoundError: If the executable cannot be located.
            OSError: If the process cannot be spawned.
        """

        if token.is_cancellation_requested:
            return ProcessResult.cancelled_result()

        command = _normalize_args(request.command, request.cwd)
        env = {**os.environ, **request.env} if request.env else None
        LOGGER.debug("spawning command=%s cwd=%s", command, request.cwd)
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(request.cwd) if request.cwd is not None else None,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        communicate = asyncio.ensure_future(process.communicate())
        cancelled = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait({communicate, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            communicate.cancel()
            await self._terminate(process)
            raise
        finally:
            cancelled.cancel()

        if communicate in done:
            stdout, stderr = communicate.result()
            return ProcessResult(returncode=process.returncode, stdout=_decode(stdout), stderr=_decode(stderr))

        LOGGER.debug("cancellation requested, terminating pid=%s", process.pid)
        await self._terminate(process)
        communicate.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await communicate
        return ProcessResult.cancelled_result()

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=self._kill_grace_period)
        except asyncio.TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()


__all__ = [
    "DEFAULT_KILL_GRACE_PERIOD",
    "AsyncProcessRunner",
    "ProcessRequest",
    "ProcessResult",
    "ProcessRunner",
]
