"""Best-effort markdown rendering for bot answers."""

from __future__ import annotations

from functools import lru_cache
import io
import logging

from rich.console import Console
from rich.markdown import Markdown

from .exceptions import RenderError

LOGGER = logging.getLogger(__name__)

_MIN_WIDTH = 20
# Room for the viewport gutter and scrollbar.
_WIDTH_MARGIN = 4


def _render(text: str, width: int) -> str:
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )
    try:
        console.print(Markdown(text, code_theme="monokai"))
    except Exception as exc:  # noqa: BLE001 - rich may fail on any malformed input.
        raise RenderError(str(exc)) from exc
    return buffer.getvalue()


@lru_cache(maxsize=256)
def render_markdown(text: str, width: int) -> str:
    """Return ``text`` rendered to ANSI at ``width`` columns, or ``text`` verbatim.

    Rendering never raises; any failure falls back to the raw input.
    """
    target_width = max(_MIN_WIDTH, width - _WIDTH_MARGIN)
    try:
        rendered = _render(text, target_width)
    except RenderError as exc:
        LOGGER.debug(
            "markdown.render_failed",
            extra={"event": "markdown.render_failed", "reason": str(exc)},
        )
        return text
    return rendered.strip("\n")
