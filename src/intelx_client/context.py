"""Cancellation and deadline context passed to every API call."""

from __future__ import annotations

import threading
from time import monotonic
from typing import Optional

from .errors import ContextCancelled, DeadlineExceeded


class Context:
    """Thread-safe cancellation token with an optional deadline.

    A context is done once ``cancel()`` has been called or its deadline
    (a ``time.monotonic()`` timestamp) has passed. Calls check the context
    before touching the network and again when the network returns.

    Example:
        ctx = Context.with_timeout(5)
        configs = client.analyzer.get_configs(ctx)
    """

    def __init__(self, deadline: Optional[float] = None):
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """Context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Context whose deadline is ``seconds`` from now."""
        return cls(deadline=monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and monotonic() >= self.deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, ``None`` without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - monotonic())

    def err(self) -> Optional[ContextCancelled]:
        """Exception describing why the context is done, or None."""
        if self.cancelled:
            return ContextCancelled("context cancelled")
        if self.expired:
            return DeadlineExceeded("context deadline exceeded")
        return None

    def raise_if_done(self) -> None:
        error = self.err()
        if error is not None:
            raise error
