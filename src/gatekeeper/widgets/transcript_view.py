"""Scrollable transcript viewport with vim-style navigation keys."""

from __future__ import annotations

from typing import Any

from rich.console import RenderableType
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Static


class TranscriptView(VerticalScroll):
    """Host the rendered transcript; focused only in navigate mode."""

    BINDINGS = [
        Binding("j", "scroll_down", "Down", show=False),
        Binding("k", "scroll_up", "Up", show=False),
        Binding("ctrl+d", "page_down", "Page down", show=False),
        Binding("ctrl+u", "page_up", "Page up", show=False),
        Binding("g", "scroll_home", "Top", show=False),
        Binding("G", "scroll_end", "Bottom", show=False),
    ]

    DEFAULT_CSS = """
    TranscriptView {
        height: 1fr;
        padding: 0 1;
    }
    TranscriptView > #transcript_body {
        height: auto;
        width: 100%;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._body: Static | None = None

    def compose(self) -> ComposeResult:
        self._body = Static("", id="transcript_body")
        yield self._body

    @property
    def at_bottom(self) -> bool:
        return self.scroll_y >= self.max_scroll_y

    def show(self, renderable: RenderableType, *, follow: bool) -> None:
        """Replace the viewport content, pinning to the bottom when asked.

        Also pins when the user was already at the bottom, so reading the tail
        in navigate mode keeps following new entries.
        """
        if self._body is None:
            return
        pin = follow or self.at_bottom
        self._body.update(renderable)
        if pin:
            self.call_after_refresh(self.scroll_end, animate=False)
