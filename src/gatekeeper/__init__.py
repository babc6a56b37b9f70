"""Top-level package for gatekeeper-tui."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import GatekeeperApp
    from .client import BackendReply, KnowledgeBaseClient
    from .config import Config, ensure_config_dir, load_config
    from .exceptions import (
        BackendError,
        ConfigValidationError,
        GatekeeperError,
        ParseError,
        TransportError,
    )
    from .session import Session, SessionController, new_session

__all__ = [
    "BackendError",
    "BackendReply",
    "Config",
    "ConfigValidationError",
    "GatekeeperApp",
    "GatekeeperError",
    "KnowledgeBaseClient",
    "ParseError",
    "Session",
    "SessionController",
    "TransportError",
    "ensure_config_dir",
    "load_config",
    "new_session",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so the core can be used without loading Textual."""
    if name == "GatekeeperApp":
        from .app import GatekeeperApp

        return GatekeeperApp
    if name in {"BackendReply", "KnowledgeBaseClient"}:
        from .client import BackendReply, KnowledgeBaseClient

        return {"BackendReply": BackendReply, "KnowledgeBaseClient": KnowledgeBaseClient}[
            name
        ]
    if name in {"Config", "ensure_config_dir", "load_config"}:
        from .config import Config, ensure_config_dir, load_config

        return {
            "Config": Config,
            "ensure_config_dir": ensure_config_dir,
            "load_config": load_config,
        }[name]
    if name in {
        "BackendError",
        "ConfigValidationError",
        "GatekeeperError",
        "ParseError",
        "TransportError",
    }:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"Session", "SessionController", "new_session"}:
        from .session import Session, SessionController, new_session

        return {
            "Session": Session,
            "SessionController": SessionController,
            "new_session": new_session,
        }[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
