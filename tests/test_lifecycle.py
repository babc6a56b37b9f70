"""Tests for the single-slot request tracker."""

from __future__ import annotations

import unittest

from gatekeeper.exceptions import TransportError
from gatekeeper.lifecycle import LifecycleState, RequestKind, RequestTracker


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class RequestTrackerTests(unittest.TestCase):
    """Validate IDLE/PENDING transitions, staleness and indicator frames."""

    def test_begin_moves_to_pending(self) -> None:
        tracker = RequestTracker(clock=_Clock())
        request = tracker.begin(RequestKind.ASK, "hello")
        self.assertIsNotNone(request)
        self.assertIs(tracker.state, LifecycleState.PENDING)
        self.assertEqual(request.payload, "hello")  # type: ignore[union-attr]
        self.assertEqual(request.started_at, 100.0)  # type: ignore[union-attr]

    def test_begin_while_pending_is_rejected(self) -> None:
        tracker = RequestTracker()
        first = tracker.begin(RequestKind.ASK, "one")
        self.assertIsNone(tracker.begin(RequestKind.REMEMBER, "two"))
        self.assertIs(tracker.pending, first)

    def test_placeholder_text_uses_kind_label(self) -> None:
        tracker = RequestTracker()
        tracker.begin(RequestKind.ASK, "q")
        self.assertEqual(tracker.placeholder_text(), "∙∙∙ Searching knowledge base...")
        tracker.abandon()
        tracker.begin(RequestKind.REMEMBER, "d")
        self.assertTrue(tracker.placeholder_text().endswith("Indexing knowledge base..."))

    def test_tick_cycles_frames(self) -> None:
        tracker = RequestTracker()
        tracker.begin(RequestKind.ASK, "q")
        frames = [tracker.tick() for _ in range(4)]
        self.assertEqual(
            [text.split(" ", 1)[0] for text in frames],  # type: ignore[union-attr]
            ["●∙∙", "∙●∙", "∙∙●", "∙∙∙"],
        )

    def test_tick_while_idle_returns_none(self) -> None:
        tracker = RequestTracker()
        self.assertIsNone(tracker.tick())

    def test_resolve_returns_to_idle_with_outcome(self) -> None:
        tracker = RequestTracker()
        request = tracker.begin(RequestKind.ASK, "q")
        outcome = tracker.resolve(request, "answer")  # type: ignore[arg-type]
        self.assertIsNotNone(outcome)
        self.assertIs(outcome.status, LifecycleState.RESOLVED)  # type: ignore[union-attr]
        self.assertEqual(outcome.answer, "answer")  # type: ignore[union-attr]
        self.assertIs(tracker.state, LifecycleState.IDLE)

    def test_fail_records_error(self) -> None:
        tracker = RequestTracker()
        request = tracker.begin(RequestKind.REMEMBER, "d")
        error = TransportError("request timed out after 30 seconds", kind="timeout")
        outcome = tracker.fail(request, error)  # type: ignore[arg-type]
        self.assertIs(outcome.status, LifecycleState.FAILED)  # type: ignore[union-attr]
        self.assertIs(outcome.error, error)  # type: ignore[union-attr]
        self.assertIs(tracker.state, LifecycleState.IDLE)

    def test_completion_after_abandon_is_stale(self) -> None:
        tracker = RequestTracker()
        request = tracker.begin(RequestKind.ASK, "q")
        self.assertIs(tracker.abandon(), request)
        self.assertIsNone(tracker.resolve(request, "late"))  # type: ignore[arg-type]
        self.assertIsNone(tracker.fail(request, RuntimeError("late")))  # type: ignore[arg-type]

    def test_completion_for_other_request_is_stale(self) -> None:
        tracker = RequestTracker()
        old = tracker.begin(RequestKind.ASK, "old")
        tracker.abandon()
        current = tracker.begin(RequestKind.ASK, "new")
        self.assertIsNone(tracker.resolve(old, "late"))  # type: ignore[arg-type]
        self.assertIs(tracker.pending, current)


if __name__ == "__main__":
    unittest.main()
