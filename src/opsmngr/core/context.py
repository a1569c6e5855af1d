"""Per-call request context: request id, deadline and cancellation."""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import Optional

from .errors import ContextCanceledError, ContextError, DeadlineExceededError


def ensure_request_id(candidate: Optional[str] = None) -> str:
    return candidate or uuid.uuid4().hex


class RequestContext:
    """
    Carries cancellation and an optional deadline for one or more API calls.

    A context is done once cancel() was called or its deadline passed; after
    that err() returns the matching ContextError and stays that way.
    """

    def __init__(
        self,
        *,
        request_id: Optional[str] = None,
        deadline: Optional[float] = None,
    ):
        self.request_id = ensure_request_id(request_id)
        # time.monotonic() based
        self.deadline = deadline
        self._cancelled = False
        self._cancel_event = asyncio.Event()

    @classmethod
    def background(cls, request_id: Optional[str] = None) -> "RequestContext":
        return cls(request_id=request_id)

    @classmethod
    def with_timeout(
        cls, seconds: float, request_id: Optional[str] = None
    ) -> "RequestContext":
        return cls(request_id=request_id, deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled = True
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), None without one."""
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def err(self) -> Optional[ContextError]:
        if self._cancelled:
            return ContextCanceledError()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceededError()
        return None

    def done(self) -> bool:
        return self.err() is not None

    async def wait_cancelled(self) -> None:
        await self._cancel_event.wait()

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"RequestContext(request_id={self.request_id!r}, "
            f"deadline={self.deadline!r}, cancelled={self._cancelled!r})"
        )


__all__ = ["RequestContext", "ensure_request_id"]
