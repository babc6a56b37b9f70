"""Slash command parsing, registration and dispatch.

Lines starting with ``/`` name a command; everything else is an implicit
``/ask``. Handlers receive the session and the argument string and return at
most one effect for the UI shell to run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
import logging
import re
from typing import TYPE_CHECKING

from .effects import Busy, Effect, IssueRequest, QuitApp
from .exceptions import ParseError
from .lifecycle import RequestKind
from .transcript import Speaker, TranscriptEntry

if TYPE_CHECKING:
    from .session import Session

LOGGER = logging.getLogger(__name__)

COMMAND_PREFIX = "/"
DEFAULT_COMMAND = "ask"

_WHITESPACE_RE = re.compile(r"\s+")

CommandHandler = Callable[["Session", str], Effect | None]


@dataclass(frozen=True)
class Command:
    """A named slash command with help text."""

    name: str
    help: str
    handler: CommandHandler
    usage: str = ""


@dataclass(frozen=True)
class ParsedCommand:
    """Result of splitting a raw input line."""

    name: str
    args: str


def parse_command_line(raw_line: str, prefix: str = COMMAND_PREFIX) -> ParsedCommand:
    """Split ``raw_line`` into a command name and argument string.

    Non-prefixed lines become the default command with the whole line as
    argument. Raises ParseError when the prefix is not followed by a name.
    """
    line = raw_line.strip()
    if not line.startswith(prefix):
        return ParsedCommand(DEFAULT_COMMAND, line)

    parts = _WHITESPACE_RE.split(line[len(prefix) :], maxsplit=1)
    name = parts[0]
    if not name:
        raise ParseError("prefix should be followed by a command")
    args = parts[1] if len(parts) > 1 else ""
    return ParsedCommand(name, args)


class CommandRegistry:
    """Exact-match, case-sensitive command table."""

    def __init__(self, commands: list[Command] | None = None) -> None:
        self._commands: dict[str, Command] = {}
        for command in commands or []:
            self.register(command)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def register(self, command: Command) -> None:
        """Register a command.

        Raises:
            ValueError: when a command with the same name already exists
        """
        name = command.name.lstrip(COMMAND_PREFIX)
        if name in self._commands:
            raise ValueError(f"Command already registered: {COMMAND_PREFIX}{name}")
        self._commands[name] = command
        LOGGER.debug("Registered command: %s%s", COMMAND_PREFIX, name)

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def dispatch(self, session: Session, raw_line: str) -> Effect | None:
        """Resolve ``raw_line`` and run its handler against ``session``.

        Parse failures are rendered into the transcript as error entries and
        never change the pending request.

        Returns:
            The handler's effect, or ``None`` when there is nothing to run
        """
        try:
            parsed = parse_command_line(raw_line)
            command = self.get(parsed.name)
            if command is None:
                raise ParseError(f"unknown command: {parsed.name}")
            return command.handler(session, parsed.args)
        except ParseError as exc:
            LOGGER.info(
                "command.parse_error",
                extra={"event": "command.parse_error", "reason": str(exc)},
            )
            session.transcript.append(
                TranscriptEntry(
                    Speaker.ERROR,
                    f"Error: {exc}\nType {COMMAND_PREFIX}help to list commands.",
                )
            )
            return None


def _request_command(kind: RequestKind, echo: Callable[[str], str]) -> CommandHandler:
    def handler(session: Session, args: str) -> Effect | None:
        if not args.strip():
            raise ParseError(f"{kind.value} requires an argument")
        request = session.tracker.begin(kind, args)
        if request is None:
            return Busy()
        session.transcript.append(TranscriptEntry(Speaker.USER, echo(args)))
        session.transcript.begin_placeholder(
            Speaker.BOT, session.tracker.placeholder_text()
        )
        return IssueRequest(request)

    return handler


def _clear(session: Session, _args: str) -> Effect | None:
    session.tracker.abandon()
    session.transcript.clear()
    return None


def _quit(_session: Session, _args: str) -> Effect | None:
    return QuitApp()


def _help(session: Session, _args: str) -> Effect | None:
    session.transcript.append(TranscriptEntry(Speaker.SYSTEM, build_help_text(session)))
    return None


def build_help_text(session: Session) -> str:
    """Summarise commands, keybindings and modes."""
    lines = [
        "=================GATEKEEPER=====================",
        "A RAG for your own personal knowledge base",
        "",
        "Commands:",
    ]
    for command in session.commands:
        label = f"{COMMAND_PREFIX}{command.name} {command.usage}".rstrip()
        lines.append(f"  {label:<20} {command.help}")
    lines += ["", "Keybinds:"]
    for binding in session.keybindings:
        lines.append(f"  {binding.key:<20} {binding.description}")
    lines += [
        "",
        "Modes:",
        f"  {'insert':<20} type queries and commands for the knowledge base",
        f"  {'normal':<20} scroll the transcript with j/k, ctrl+d/ctrl+u, g/G",
    ]
    return "\n".join(lines)


def default_commands() -> list[Command]:
    """Return the built-in command set in help order."""
    return [
        Command(
            "ask",
            "Ask the knowledge base a question. This is the default command.",
            _request_command(RequestKind.ASK, lambda query: query),
            usage="[query]",
        ),
        Command(
            "remember",
            "Give the knowledge base context to remember.",
            _request_command(RequestKind.REMEMBER, lambda data: f"remember {data}"),
            usage="[data]",
        ),
        Command("clear", "Clear the screen.", _clear),
        Command("quit", "Exit the application.", _quit),
        Command("help", "Print this help message.", _help),
    ]
