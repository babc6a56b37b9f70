"""Insert/navigate input mode switch."""

from __future__ import annotations

from enum import Enum
import logging

LOGGER = logging.getLogger(__name__)


class Mode(str, Enum):
    """Which sub-widget receives raw key input."""

    INSERT = "INSERT"
    NAVIGATE = "NAVIGATE"


_PROMPTS: dict[Mode, tuple[str, str]] = {
    Mode.INSERT: ("> ", "/help for more info"),
    Mode.NAVIGATE: ("normal ", "press i to enter insert mode"),
}


class ModeController:
    """Two-state mode machine; transitions are no-ops at the boundary."""

    def __init__(self, initial: Mode = Mode.INSERT) -> None:
        self._mode = initial

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def prompt(self) -> str:
        return _PROMPTS[self._mode][0]

    @property
    def placeholder(self) -> str:
        return _PROMPTS[self._mode][1]

    def escape(self) -> bool:
        """Switch Insert -> Navigate. Return True when the mode changed."""
        return self._transition(Mode.INSERT, Mode.NAVIGATE)

    def enter_insert(self) -> bool:
        """Switch Navigate -> Insert. Return True when the mode changed."""
        return self._transition(Mode.NAVIGATE, Mode.INSERT)

    def _transition(self, expected: Mode, new_mode: Mode) -> bool:
        if self._mode != expected:
            return False
        self._mode = new_mode
        LOGGER.debug(
            "mode.transition",
            extra={
                "event": "mode.transition",
                "from_mode": expected.value,
                "to_mode": new_mode.value,
            },
        )
        return True
