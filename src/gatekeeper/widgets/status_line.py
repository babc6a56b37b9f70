"""Status line showing the input mode, lifecycle state and shortcut hints."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.widgets import Label, Static

from ..lifecycle import LifecycleState
from ..modes import Mode

_MODE_LABELS: dict[Mode, str] = {
    Mode.INSERT: "-- INSERT --",
    Mode.NAVIGATE: "-- NORMAL --",
}


class StatusLine(Static):
    """Render mode (left), request state (middle) and hints (right)."""

    DEFAULT_CSS = """
    StatusLine {
        layout: horizontal;
        height: 1;
        padding: 0 1;
    }
    StatusLine #status_mode {
        width: auto;
        margin-right: 2;
        text-style: bold;
    }
    StatusLine #status_state {
        width: 1fr;
        color: $text-muted;
    }
    StatusLine #status_hints {
        width: auto;
        text-align: right;
        color: $text-muted;
    }
    """

    def __init__(self, shortcut_hints: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._shortcut_hints = shortcut_hints
        self._mode_label: Label | None = None
        self._state_label: Label | None = None

    def compose(self) -> ComposeResult:
        yield Label(_MODE_LABELS[Mode.INSERT], id="status_mode")
        yield Label("", id="status_state")
        yield Label(self._shortcut_hints, id="status_hints")

    def on_mount(self) -> None:
        self._mode_label = self.query_one("#status_mode", Label)
        self._state_label = self.query_one("#status_state", Label)

    def set_status(self, *, mode: Mode, state: LifecycleState, notice: str = "") -> None:
        """Update the mode and state segments."""
        if self._mode_label is None or self._state_label is None:
            return
        self._mode_label.update(_MODE_LABELS[mode])
        text = "waiting for backend" if state is LifecycleState.PENDING else "ready"
        if notice:
            text = f"{text}  |  {notice}"
        self._state_label.update(text)
