"""Side effects requested by session handlers and executed by the UI shell."""

from __future__ import annotations

from dataclasses import dataclass

from .lifecycle import PendingRequest
from .modes import Mode


@dataclass(frozen=True)
class IssueRequest:
    """Run ``request`` against the backend and report back with a completion."""

    request: PendingRequest


@dataclass(frozen=True)
class QuitApp:
    """Exit the interactive loop, abandoning any pending call."""


@dataclass(frozen=True)
class Busy:
    """A submission was swallowed because a request is already pending."""


@dataclass(frozen=True)
class ModeChanged:
    """Move input focus to the widget owned by ``mode``."""

    mode: Mode


@dataclass(frozen=True)
class ClearEntry:
    """Empty the text-entry box after a consumed submission."""


Effect = IssueRequest | QuitApp | Busy | ModeChanged | ClearEntry
