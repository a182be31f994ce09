from __future__ import annotations

from typing import Callable, List, Optional

from .errors import CancelledError


class CancellationToken:
    """One-shot cancellation flag shared between a caller and a running pass.

    Callers may poll `is_cancellation_requested` or register callbacks with
    `on_cancellation_requested`; callbacks registered after cancellation run
    immediately.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancellation_requested(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancelledError()


def check_cancelled(token: Optional[CancellationToken]) -> None:
    if token is not None:
        token.raise_if_cancelled()
