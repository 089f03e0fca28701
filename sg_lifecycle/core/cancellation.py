"""
Cooperative cancellation for long-running operations.

A :class:`CancelToken` is handed to every manager operation. Code that
blocks (provider calls, retry sleeps) checks it and raises
:class:`~sg_lifecycle.core.exceptions.OperationCancelledError` once it is
set. Tokens are thread-safe, so a signal handler or another thread can
cancel an operation running elsewhere.
"""

from __future__ import annotations

import threading
from typing import Optional

from sg_lifecycle.core.exceptions import OperationCancelledError


class CancelToken:
    """
    Thread-safe, one-shot cancellation flag.

    Example
    -------
    >>> token = CancelToken()
    >>> token.cancelled
    False
    >>> token.cancel("shutting down")
    >>> token.raise_if_cancelled("DeleteSecurityGroup")
    Traceback (most recent call last):
        ...
    OperationCancelledError: DeleteSecurityGroup cancelled: shutting down
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled by caller") -> None:
        if not self._event.is_set():
            self.reason = reason
        self._event.set()

    def wait(self, seconds: float) -> bool:
        """Block up to ``seconds``; return True if cancelled meanwhile."""
        return self._event.wait(max(seconds, 0.0))

    def raise_if_cancelled(self, operation: str) -> None:
        if self.cancelled:
            raise OperationCancelledError(
                f"{operation} cancelled: {self.reason}",
                details={"operation": operation},
            )

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"
