"""Turn transcript entries into a single Rich renderable for the viewport."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rich.align import Align
from rich.console import RenderableType
from rich.text import Text

from .markdown import render_markdown
from .transcript import Speaker, TranscriptEntry

BANNER = """
 ██████╗  █████╗ ████████╗███████╗██╗  ██╗███████╗███████╗██████╗ ███████╗██████╗
██╔════╝ ██╔══██╗╚══██╔══╝██╔════╝██║ ██╔╝██╔════╝██╔════╝██╔══██╗██╔════╝██╔══██╗
██║  ███╗███████║   ██║   █████╗  █████╔╝ █████╗  █████╗  ██████╔╝█████╗  ██████╔╝
██║   ██║██╔══██║   ██║   ██╔══╝  ██╔═██╗ ██╔══╝  ██╔══╝  ██╔═══╝ ██╔══╝  ██╔══██╗
╚██████╔╝██║  ██║   ██║   ███████╗██║  ██╗███████╗███████╗██║     ███████╗██║  ██║
 ╚═════╝ ╚═╝  ╚═╝   ╚═╝   ╚══════╝╚═╝  ╚═╝╚══════╝╚══════╝╚═╝     ╚══════╝╚═╝  ╚═╝
""".strip("\n")


@dataclass(frozen=True)
class Palette:
    """Colours used for speaker labels and body text."""

    user: str = "#7daea3"
    bot: str = "#da7757"
    text: str = "#e0e0e0"
    error: str = "#ea6962"


_LABELS: dict[Speaker, str] = {
    Speaker.USER: "You: ",
    Speaker.BOT: "Bot: ",
    Speaker.SYSTEM: "Bot: ",
    Speaker.ERROR: "Error: ",
}


def _label_style(speaker: Speaker, palette: Palette) -> str:
    if speaker is Speaker.USER:
        return f"bold {palette.user}"
    if speaker is Speaker.ERROR:
        return f"bold {palette.error}"
    return f"bold {palette.bot}"


def render_entry(entry: TranscriptEntry, width: int, palette: Palette) -> Text:
    """Render one entry as a labelled block."""
    line = Text(_LABELS[entry.speaker], style=_label_style(entry.speaker, palette))
    if entry.markdown:
        line.append("\n")
        line.append_text(Text.from_ansi(render_markdown(entry.text, width)))
        return line
    body = entry.text
    # Error entries already carry their "Error:" label in the text.
    if entry.speaker is Speaker.ERROR and body.startswith("Error: "):
        body = body[len("Error: ") :]
    line.append(body, style=palette.text)
    return line


def render_transcript(
    entries: Iterable[TranscriptEntry], width: int, palette: Palette
) -> Text:
    """Join all entries, in order, into one wrapped block of text."""
    return Text("\n").join(render_entry(entry, width, palette) for entry in entries)


def render_banner(palette: Palette) -> RenderableType:
    return Align.center(Text(BANNER, style=palette.bot), vertical="middle")
