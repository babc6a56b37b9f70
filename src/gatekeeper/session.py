"""Session state and the controller that folds UI events into it.

The controller is the only code that mutates a :class:`Session`. Every
external event (resize, key, timer tick, backend completion) enters through
:meth:`SessionController.handle`, which returns the effects the UI shell has
to carry out. The backend worker never touches the session directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any

from rich.console import RenderableType

from .client import BackendReply
from .commands import CommandRegistry, default_commands
from .config import KeybindsConfig
from .effects import Busy, ClearEntry, Effect, ModeChanged, QuitApp
from .exceptions import BackendError
from .keybinds import KeyAction, Keybinding, build_keybindings, match_keybinding
from .lifecycle import LifecycleState, PendingRequest, RequestTracker
from .modes import Mode, ModeController
from .rendering import Palette, render_banner, render_transcript
from .transcript import Speaker, Transcript, TranscriptEntry

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPress:
    """A key press; ``entry_text`` is the entry box content at press time."""

    key: str
    entry_text: str = ""


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Completion:
    """A finished backend call carrying either a reply or the error raised."""

    request: PendingRequest
    reply: BackendReply | None = None
    error: Exception | None = None


Event = Resize | KeyPress | Tick | Completion


@dataclass(frozen=True)
class ForwardKey:
    """The key matched no binding; hand it to the widget owned by ``mode``."""

    mode: Mode


@dataclass
class Session:
    """Root aggregate for one interactive client session."""

    commands: CommandRegistry
    keybindings: tuple[Keybinding, ...]
    transcript: Transcript = field(default_factory=Transcript)
    modes: ModeController = field(default_factory=ModeController)
    tracker: RequestTracker = field(default_factory=RequestTracker)
    width: int = 80
    height: int = 24
    last_error: Exception | None = None

    @property
    def mode(self) -> Mode:
        return self.modes.mode

    @property
    def pending(self) -> PendingRequest | None:
        return self.tracker.pending

    @property
    def lifecycle_state(self) -> LifecycleState:
        return self.tracker.state

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serialisable view of the session state."""
        pending = self.pending
        return {
            "mode": self.mode.value,
            "lifecycle": self.lifecycle_state.value,
            "pending": (
                {
                    "kind": pending.kind.value,
                    "payload": pending.payload,
                    "started_at": pending.started_at,
                    "request_id": pending.request_id,
                }
                if pending
                else None
            ),
            "last_error": str(self.last_error) if self.last_error else None,
            "width": self.width,
            "height": self.height,
            "entries": [
                {
                    "speaker": entry.speaker.value,
                    "text": entry.text,
                    "placeholder": entry.placeholder,
                }
                for entry in self.transcript.entries
            ],
        }


def new_session(keybinds: KeybindsConfig | None = None) -> Session:
    """Build a session with the built-in commands and keybindings."""
    return Session(
        commands=CommandRegistry(default_commands()),
        keybindings=build_keybindings(keybinds or KeybindsConfig()),
    )


class SessionController:
    """Single entry point folding events into the session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @property
    def follow(self) -> bool:
        """Whether the viewport should stay pinned to the newest entry."""
        return self.session.mode is Mode.INSERT

    def render(self, palette: Palette, *, show_banner: bool = True) -> RenderableType:
        """Return the viewport content derived from the full transcript.

        An empty transcript shows the centred banner when ``show_banner`` is set.
        """
        entries = self.session.transcript.entries
        if not entries and show_banner:
            return render_banner(palette)
        return render_transcript(entries, self.session.width, palette)

    def handle(self, event: Event) -> list[Effect | ForwardKey]:
        """Apply ``event`` and return the effects for the UI shell."""
        if isinstance(event, Resize):
            return self._on_resize(event)
        if isinstance(event, KeyPress):
            return self._on_key(event)
        if isinstance(event, Tick):
            return self._on_tick()
        if isinstance(event, Completion):
            return self._on_completion(event)
        raise TypeError(f"Unsupported event: {event!r}")

    def submit(self, text: str) -> list[Effect | ForwardKey]:
        """Dispatch the entry box content as a command line."""
        if not text.strip():
            return []
        effect = self.session.commands.dispatch(self.session, text)
        if effect is None:
            return [ClearEntry()]
        # A swallowed submission keeps its text so it can be resent later.
        if isinstance(effect, (Busy, QuitApp)):
            return [effect]
        return [ClearEntry(), effect]

    def _on_resize(self, event: Resize) -> list[Effect | ForwardKey]:
        self.session.width = max(1, event.width)
        self.session.height = max(1, event.height)
        LOGGER.debug(
            "session.resize",
            extra={
                "event": "session.resize",
                "width": self.session.width,
                "height": self.session.height,
            },
        )
        return []

    def _on_key(self, event: KeyPress) -> list[Effect | ForwardKey]:
        binding = match_keybinding(
            self.session.keybindings, event.key, self.session.mode
        )
        if binding is None:
            return [ForwardKey(self.session.mode)]
        action = binding.action
        if action is KeyAction.SUBMIT:
            return self.submit(event.entry_text)
        if action is KeyAction.QUIT:
            return [QuitApp()]
        if action is KeyAction.NAVIGATE:
            changed = self.session.modes.escape()
        else:
            changed = self.session.modes.enter_insert()
        return [ModeChanged(self.session.mode)] if changed else []

    def _on_tick(self) -> list[Effect | ForwardKey]:
        text = self.session.tracker.tick()
        if text is not None:
            self.session.transcript.update_placeholder(text)
        return []

    def _on_completion(self, event: Completion) -> list[Effect | ForwardKey]:
        tracker = self.session.tracker
        reply = event.reply
        error = event.error
        if error is None:
            if reply is None:
                error = BackendError("empty reply")
            elif not reply.success:
                error = BackendError(reply.answer)

        if error is None and reply is not None:
            outcome = tracker.resolve(event.request, reply.answer)
            entry = TranscriptEntry(Speaker.BOT, reply.answer, markdown=True)
        else:
            outcome = tracker.fail(event.request, error)
            entry = TranscriptEntry(Speaker.ERROR, f"Error: {error}")

        if outcome is None:
            return []
        if error is not None:
            self.session.last_error = error
        if not self.session.transcript.resolve_placeholder(entry):
            self.session.transcript.append(entry)
        return []
