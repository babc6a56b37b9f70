"""Tests for the transcript entry log and its placeholder slot."""

from __future__ import annotations

import unittest

from gatekeeper.transcript import Speaker, Transcript, TranscriptEntry


class TranscriptTests(unittest.TestCase):
    """Validate ordering and the single-trailing-placeholder rule."""

    def test_append_preserves_order(self) -> None:
        transcript = Transcript()
        transcript.append(TranscriptEntry(Speaker.USER, "one"))
        transcript.append(TranscriptEntry(Speaker.BOT, "two"))
        self.assertEqual([entry.text for entry in transcript.entries], ["one", "two"])
        self.assertEqual(len(transcript), 2)
        self.assertIsNone(transcript.placeholder)

    def test_placeholder_stays_last_when_entries_are_appended(self) -> None:
        transcript = Transcript()
        transcript.append(TranscriptEntry(Speaker.USER, "question"))
        transcript.begin_placeholder(Speaker.BOT, "∙∙∙ Searching knowledge base...")
        transcript.append(TranscriptEntry(Speaker.SYSTEM, "help text"))

        entries = transcript.entries
        self.assertEqual(entries[-1].placeholder, True)
        self.assertEqual(entries[-2].text, "help text")
        self.assertEqual(sum(1 for entry in entries if entry.placeholder), 1)

    def test_second_placeholder_is_rejected(self) -> None:
        transcript = Transcript()
        transcript.begin_placeholder(Speaker.BOT, "waiting")
        with self.assertRaises(ValueError):
            transcript.begin_placeholder(Speaker.BOT, "again")

    def test_append_rejects_placeholder_entries(self) -> None:
        transcript = Transcript()
        with self.assertRaises(ValueError):
            transcript.append(TranscriptEntry(Speaker.BOT, "x", placeholder=True))

    def test_update_and_resolve_placeholder(self) -> None:
        transcript = Transcript()
        transcript.append(TranscriptEntry(Speaker.USER, "hello"))
        transcript.begin_placeholder(Speaker.BOT, "∙∙∙")

        self.assertTrue(transcript.update_placeholder("●∙∙"))
        self.assertEqual(transcript.placeholder.text, "●∙∙")  # type: ignore[union-attr]

        self.assertTrue(
            transcript.resolve_placeholder(TranscriptEntry(Speaker.BOT, "hi there"))
        )
        self.assertIsNone(transcript.placeholder)
        self.assertEqual(
            [entry.text for entry in transcript.entries], ["hello", "hi there"]
        )

    def test_placeholder_operations_without_placeholder_are_noops(self) -> None:
        transcript = Transcript()
        transcript.append(TranscriptEntry(Speaker.USER, "hello"))
        self.assertFalse(transcript.update_placeholder("x"))
        self.assertFalse(
            transcript.resolve_placeholder(TranscriptEntry(Speaker.BOT, "late"))
        )
        self.assertEqual(len(transcript), 1)

    def test_resolve_with_placeholder_entry_is_rejected(self) -> None:
        transcript = Transcript()
        transcript.begin_placeholder(Speaker.BOT, "∙∙∙")
        with self.assertRaises(ValueError):
            transcript.resolve_placeholder(
                TranscriptEntry(Speaker.BOT, "x", placeholder=True)
            )

    def test_clear_removes_everything(self) -> None:
        transcript = Transcript()
        transcript.append(TranscriptEntry(Speaker.USER, "hello"))
        transcript.begin_placeholder(Speaker.BOT, "∙∙∙")
        transcript.clear()
        self.assertEqual(transcript.entries, ())
        self.assertIsNone(transcript.placeholder)

    def test_entries_view_is_immutable(self) -> None:
        transcript = Transcript()
        transcript.append(TranscriptEntry(Speaker.USER, "hello"))
        self.assertIsInstance(transcript.entries, tuple)


if __name__ == "__main__":
    unittest.main()
