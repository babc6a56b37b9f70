"""Ordered keybinding table mapping trigger keys to tagged actions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from .config import KeybindsConfig
from .modes import Mode

_ALL_MODES = frozenset(Mode)


class KeyAction(str, Enum):
    """Actions a keybinding can trigger."""

    SUBMIT = "submit"
    QUIT = "quit"
    NAVIGATE = "navigate"
    INSERT = "insert"


@dataclass(frozen=True)
class Keybinding:
    """A trigger key, its help text, and the action it fires.

    ``modes`` limits the binding to the listed input modes; outside them the
    key falls through to the focused widget.
    """

    key: str
    description: str
    action: KeyAction
    modes: frozenset[Mode] = _ALL_MODES


def build_keybindings(config: KeybindsConfig) -> tuple[Keybinding, ...]:
    """Return the keybinding table in evaluation order."""
    bindings = (
        Keybinding(config.submit, "submit whatever is in the input field", KeyAction.SUBMIT),
        Keybinding(config.quit, "quit the application", KeyAction.QUIT),
        Keybinding(
            config.navigate, "enter normal mode from insert mode", KeyAction.NAVIGATE
        ),
        Keybinding(
            config.insert,
            "enter insert mode from normal mode",
            KeyAction.INSERT,
            modes=frozenset({Mode.NAVIGATE}),
        ),
    )
    _ensure_unique(bindings)
    return bindings


def _ensure_unique(bindings: Iterable[Keybinding]) -> None:
    seen: set[str] = set()
    for binding in bindings:
        if binding.key in seen:
            raise ValueError(f"Duplicate keybinding: {binding.key}")
        seen.add(binding.key)


def match_keybinding(
    bindings: Sequence[Keybinding], key: str, mode: Mode
) -> Keybinding | None:
    """Return the first binding for ``key`` active in ``mode``."""
    for binding in bindings:
        if binding.key == key and mode in binding.modes:
            return binding
    return None
