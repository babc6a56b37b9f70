"""Widget exports for the gatekeeper UI."""

from .entry_box import EntryBox
from .status_line import StatusLine
from .transcript_view import TranscriptView

__all__ = ["EntryBox", "StatusLine", "TranscriptView"]
