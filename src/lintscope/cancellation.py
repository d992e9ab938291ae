# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cooperative cancellation handles for in-flight tool invocations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

LOGGER = logging.getLogger(__name__)

CancellationCallback = Callable[[], None]


class CancellationToken:
    """Read-only view of a cancellation state with change notification.

    Tokens are handed to long-running operations which poll
    :attr:`is_cancellation_requested` at suspension points or subscribe via
    :meth:`on_cancelled`. Only the owning :class:`CancellationTokenSource` can
    flip the state.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[CancellationCallback] = []

    @property
    def is_cancellation_requested(self) -> bool:
        """Return ``True`` once cancellation has been signalled."""

        return self._cancelled

    def on_cancelled(self, callback: CancellationCallback) -> Callable[[], None]:
        """Register ``callback`` to run when the token is cancelled.

        Callbacks registered after cancellation run immediately.

        Args:
            callback: Zero-argument callable invoked once on cancellation.

        Returns:
            Callable[[], None]: Function removing the subscription.
        """

        if self._cancelled:
            callback()
            return _noop
        self._callbacks.append(callback)

        def _dispose() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _dispose

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""

        if self._cancelled:
            return
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _release() -> None:
            if not future.done():
                future.set_result(None)

        dispose = self.on_cancelled(_release)
        try:
            await future
        finally:
            dispose()

    def _cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:  # noqa: BLE001
                LOGGER.exception("cancellation callback %r failed", callback)


def _noop() -> None:
    return None


class CancellationTokenSource:
    """Owner of a :class:`CancellationToken` that can request cancellation."""

    def __init__(self) -> None:
        self._token = CancellationToken()

    @property
    def token(self) -> CancellationToken:
        """Return the token controlled by this source."""

        return self._token

    def cancel(self) -> None:
        """Signal cancellation to every subscriber; repeated calls are ignored."""

        self._token._cancel()


NEVER_CANCELLED = CancellationToken()
"""Token that is never cancelled, used when callers do not supply one."""


__all__ = ["NEVER_CANCELLED", "CancellationCallback", "CancellationToken", "CancellationTokenSource"]
