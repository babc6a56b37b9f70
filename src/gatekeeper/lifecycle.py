"""Single-slot backend request lifecycle with an animated progress indicator."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import logging
import time
from uuid import uuid4

LOGGER = logging.getLogger(__name__)


class RequestKind(str, Enum):
    """Backend call flavours."""

    ASK = "ask"
    REMEMBER = "remember"


class LifecycleState(str, Enum):
    """Finite state machine for the outstanding backend call."""

    IDLE = "IDLE"
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PendingRequest:
    """The one backend call allowed in flight."""

    kind: RequestKind
    payload: str
    started_at: float
    request_id: str = field(default_factory=lambda: uuid4().hex)


@dataclass(frozen=True)
class RequestOutcome:
    """Terminal result of a request: an answer when RESOLVED, an error when FAILED."""

    status: LifecycleState
    request: PendingRequest
    answer: str = ""
    error: Exception | None = None


class RequestTracker:
    """Track at most one pending request and drive its indicator frames.

    RESOLVED and FAILED are transient: recording an outcome returns the
    tracker to IDLE in the same call and hands the outcome to the caller.
    """

    SPINNER_FRAMES: tuple[str, ...] = ("∙∙∙", "●∙∙", "∙●∙", "∙∙●")
    LABELS: dict[RequestKind, str] = {
        RequestKind.ASK: "Searching knowledge base...",
        RequestKind.REMEMBER: "Indexing knowledge base...",
    }

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._pending: PendingRequest | None = None
        self._frame_index = 0

    @property
    def pending(self) -> PendingRequest | None:
        return self._pending

    @property
    def state(self) -> LifecycleState:
        return LifecycleState.PENDING if self._pending else LifecycleState.IDLE

    @property
    def frame(self) -> str:
        return self.SPINNER_FRAMES[self._frame_index % len(self.SPINNER_FRAMES)]

    def begin(self, kind: RequestKind, payload: str) -> PendingRequest | None:
        """Move IDLE -> PENDING. Returns ``None`` when a request is already pending."""
        if self._pending is not None:
            LOGGER.debug(
                "request.rejected_busy",
                extra={"event": "request.rejected_busy", "kind": kind.value},
            )
            return None
        self._pending = PendingRequest(
            kind=kind, payload=payload, started_at=self._clock()
        )
        LOGGER.info(
            "request.pending",
            extra={
                "event": "request.pending",
                "kind": kind.value,
                "request_id": self._pending.request_id,
            },
        )
        return self._pending

    def placeholder_text(self) -> str:
        """Return the visible placeholder line for the pending request."""
        if self._pending is None:
            return ""
        return f"{self.frame} {self.LABELS[self._pending.kind]}"

    def tick(self) -> str | None:
        """Advance the indicator; return the new placeholder text while pending."""
        self._frame_index = (self._frame_index + 1) % len(self.SPINNER_FRAMES)
        if self._pending is None:
            return None
        return self.placeholder_text()

    def resolve(self, request: PendingRequest, answer: str) -> RequestOutcome | None:
        return self._finish(
            request, RequestOutcome(LifecycleState.RESOLVED, request, answer=answer)
        )

    def fail(self, request: PendingRequest, error: Exception) -> RequestOutcome | None:
        return self._finish(
            request, RequestOutcome(LifecycleState.FAILED, request, error=error)
        )

    def abandon(self) -> PendingRequest | None:
        """Drop the pending request without recording an outcome."""
        dropped, self._pending = self._pending, None
        if dropped is not None:
            LOGGER.info(
                "request.abandoned",
                extra={"event": "request.abandoned", "request_id": dropped.request_id},
            )
        return dropped

    def _finish(
        self, request: PendingRequest, outcome: RequestOutcome
    ) -> RequestOutcome | None:
        if self._pending is None or self._pending.request_id != request.request_id:
            LOGGER.info(
                "request.stale_completion",
                extra={
                    "event": "request.stale_completion",
                    "request_id": request.request_id,
                },
            )
            return None
        self._pending = None
        LOGGER.info(
            "request.completed",
            extra={
                "event": "request.completed",
                "kind": request.kind.value,
                "status": outcome.status.value,
                "elapsed_seconds": round(self._clock() - request.started_at, 3),
            },
        )
        return outcome
