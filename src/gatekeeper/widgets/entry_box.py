"""Single-line entry row with a mode prompt."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Input, Label


class EntryBox(Horizontal):
    """Prompt label plus the text input that receives keys in insert mode."""

    DEFAULT_CSS = """
    EntryBox {
        height: auto;
        border: round #7daea3;
        padding: 0 1;
    }
    EntryBox > #entry_prompt {
        width: auto;
        color: #7daea3;
        padding: 0 0;
    }
    EntryBox > #entry_input {
        width: 1fr;
        border: none;
        height: 1;
        padding: 0;
    }
    """

    def __init__(
        self,
        prompt: str = "> ",
        placeholder: str = "",
        max_length: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._prompt = prompt
        self._placeholder = placeholder
        self._max_length = max_length

    def compose(self) -> ComposeResult:
        yield Label(self._prompt, id="entry_prompt")
        yield Input(
            placeholder=self._placeholder,
            max_length=self._max_length,
            id="entry_input",
        )

    @property
    def input(self) -> Input:
        return self.query_one("#entry_input", Input)

    @property
    def value(self) -> str:
        return self.input.value

    def clear(self) -> None:
        self.input.value = ""

    def set_prompt(self, prompt: str, placeholder: str) -> None:
        """Show the prompt and placeholder for the current mode."""
        self.query_one("#entry_prompt", Label).update(prompt)
        self.input.placeholder = placeholder
