"""Main Textual application for chatting with the Gatekeeper knowledge base."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import sys

from textual import events
from textual.actions import SkipAction
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message

from .client import BackendReply, KnowledgeBaseClient
from .config import Config, load_config
from .effects import Busy, ClearEntry, Effect, IssueRequest, ModeChanged, QuitApp
from .exceptions import TransportError
from .keybinds import KeyAction
from .lifecycle import LifecycleState, PendingRequest
from .logging_utils import configure_logging
from .modes import Mode
from .rendering import Palette
from .session import (
    Completion,
    Event,
    ForwardKey,
    KeyPress,
    Resize,
    SessionController,
    Tick,
    new_session,
)
from .task_manager import TaskManager
from .widgets import EntryBox, StatusLine, TranscriptView

LOGGER = logging.getLogger(__name__)

BACKEND_TASK_PREFIX = "backend_request"


class RequestCompleted(Message):
    """Posted by the backend task once its call has finished."""

    def __init__(
        self,
        request: PendingRequest,
        reply: BackendReply | None = None,
        error: Exception | None = None,
    ) -> None:
        super().__init__()
        self.request = request
        self.reply = reply
        self.error = error


class GatekeeperApp(App[None]):
    """Chat-style TUI for asking and teaching a personal knowledge base."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #transcript {
        height: 1fr;
    }

    EntryBox {
        margin-top: 1;
    }

    EntryBox Input:disabled {
        opacity: 60%;
    }

    #status_line {
        height: 1;
        background: $surface;
    }
    """

    # Every keybinding is checked before the focused widget sees the key; an
    # action that does not apply raises SkipAction so the key falls through.
    BINDINGS = [
        Binding("enter", "keybind('submit')", "Submit", priority=True, id="gatekeeper.submit"),
        Binding("ctrl+c", "keybind('quit')", "Quit", priority=True, id="gatekeeper.quit"),
        Binding(
            "escape",
            "keybind('navigate')",
            "Normal mode",
            priority=True,
            id="gatekeeper.navigate",
        ),
        Binding("i", "keybind('insert')", "Insert mode", priority=True, id="gatekeeper.insert"),
    ]

    def __init__(
        self,
        config: Config | None = None,
        client: KnowledgeBaseClient | None = None,
    ) -> None:
        self.config = config or load_config()
        configure_logging(self.config.logging)
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )
        self.client = client or KnowledgeBaseClient(
            base_url=self.config.backend.base_url,
            timeout=self.config.backend.timeout,
        )
        self.session = new_session(self.config.keybinds)
        self.controller = SessionController(self.session)
        self.palette = Palette(
            user=self.config.ui.user_color,
            bot=self.config.ui.bot_color,
            text=self.config.ui.text_color,
            error=self.config.ui.error_color,
        )
        self._task_manager = TaskManager()
        self._notice = ""

        self._w_transcript: TranscriptView | None = None
        self._w_entry: EntryBox | None = None
        self._w_status: StatusLine | None = None
        super().__init__()
        self.title = self.config.app.title

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        modes = self.session.modes
        yield TranscriptView(id="transcript")
        yield EntryBox(
            prompt=modes.prompt,
            placeholder=modes.placeholder,
            max_length=self.config.app.max_input_length,
        )
        yield StatusLine(shortcut_hints="/help for commands", id="status_line")

    def on_mount(self) -> None:
        """Apply configured keys, cache widgets and start the indicator timer."""
        keybinds = self.config.keybinds
        self.set_keymap(
            {
                "gatekeeper.submit": keybinds.submit,
                "gatekeeper.quit": keybinds.quit,
                "gatekeeper.navigate": keybinds.navigate,
                "gatekeeper.insert": keybinds.insert,
            }
        )
        self._w_transcript = self.query_one(TranscriptView)
        self._w_entry = self.query_one(EntryBox)
        self._w_status = self.query_one(StatusLine)
        self._w_entry.input.focus()
        self._dispatch(Resize(self.size.width, self.size.height))
        self.set_interval(self.config.ui.spinner_interval_seconds, self._on_tick)

    async def on_unmount(self) -> None:
        """Abandon any in-flight call and release the HTTP client."""
        await self._task_manager.cancel_all()
        await self.client.aclose()

    def on_resize(self, event: events.Resize) -> None:
        self._dispatch(Resize(event.size.width, event.size.height))

    def _on_tick(self) -> None:
        pending = self.session.pending is not None
        self.controller.handle(Tick())
        if pending:
            self._refresh_view()

    def action_keybind(self, action: str) -> None:
        """Route a bound key through the session's keybinding table."""
        key_action = KeyAction(action)
        key = next(
            binding.key
            for binding in self.session.keybindings
            if binding.action is key_action
        )
        entry_text = self._w_entry.value if self._w_entry else ""
        effects = self._dispatch(KeyPress(key, entry_text=entry_text))
        if any(isinstance(effect, ForwardKey) for effect in effects):
            raise SkipAction()

    def on_request_completed(self, message: RequestCompleted) -> None:
        self._dispatch(
            Completion(message.request, reply=message.reply, error=message.error)
        )

    def _dispatch(self, event: Event) -> Sequence[Effect | ForwardKey]:
        self._notice = ""
        effects = self.controller.handle(event)
        for effect in effects:
            self._apply(effect)
        self._refresh_view()
        return effects

    def _apply(self, effect: Effect | ForwardKey) -> None:
        if isinstance(effect, IssueRequest):
            self._task_manager.start(
                f"{BACKEND_TASK_PREFIX}:{effect.request.request_id}",
                self._run_request(effect.request),
            )
        elif isinstance(effect, QuitApp):
            LOGGER.info("app.quit", extra={"event": "app.quit"})
            self.exit()
        elif isinstance(effect, ModeChanged):
            self._apply_mode(effect.mode)
        elif isinstance(effect, ClearEntry):
            if self._w_entry is not None:
                self._w_entry.clear()
        elif isinstance(effect, Busy):
            self._notice = "Busy. Wait for current request to finish."

    def _apply_mode(self, mode: Mode) -> None:
        if self._w_entry is None or self._w_transcript is None:
            return
        modes = self.session.modes
        self._w_entry.set_prompt(modes.prompt, modes.placeholder)
        if mode is Mode.NAVIGATE:
            self._w_entry.input.disabled = True
            self._w_transcript.focus()
        else:
            self._w_entry.input.disabled = False
            self._w_entry.input.focus()

    async def _run_request(self, request: PendingRequest) -> None:
        """Perform the backend call off the session and report back as a message."""
        try:
            reply = await self.client.send(request)
        except TransportError as exc:
            self.post_message(RequestCompleted(request, error=exc))
            return
        except Exception as exc:  # noqa: BLE001 - a call must never stay pending.
            LOGGER.exception(
                "backend.request.unexpected_error",
                extra={"event": "backend.request.unexpected_error"},
            )
            self.post_message(
                RequestCompleted(request, error=TransportError(str(exc), kind="decode"))
            )
            return
        self.post_message(RequestCompleted(request, reply=reply))

    def _refresh_view(self) -> None:
        if self._w_transcript is None:
            return
        self._w_transcript.show(
            self.controller.render(self.palette, show_banner=self.config.ui.show_banner),
            follow=self.controller.follow,
        )
        if self._w_status is not None:
            self._w_status.set_status(
                mode=self.session.mode,
                state=self.session.lifecycle_state,
                notice=self._notice,
            )
        self.sub_title = (
            "waiting for backend"
            if self.session.lifecycle_state is LifecycleState.PENDING
            else ""
        )
