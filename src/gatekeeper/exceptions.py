"""Domain exception hierarchy for the Gatekeeper terminal client."""

from __future__ import annotations


class GatekeeperError(RuntimeError):
    """Base class for all domain-level client errors."""


class ParseError(GatekeeperError):
    """Raised when a slash-command line cannot be resolved."""


class TransportError(GatekeeperError):
    """Raised when a backend call fails before a well-formed reply arrives.

    ``kind`` is one of ``connect``, ``timeout``, ``decode`` or ``http``.
    """

    def __init__(self, message: str, kind: str = "connect") -> None:
        super().__init__(message)
        self.kind = kind


class BackendError(GatekeeperError):
    """Raised when the backend answers with ``success: false``."""

    def __init__(self, answer: str) -> None:
        super().__init__(answer)
        self.answer = answer


class RenderError(GatekeeperError):
    """Raised internally when markdown rendering fails."""


class ConfigValidationError(GatekeeperError):
    """Raised when configuration cannot be validated safely."""
