"""CLI entrypoint for the Gatekeeper TUI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from .app import GatekeeperApp
from .backend import BackendProcess, BackendSupervisor, PortProbe
from .config import ensure_config_dir, load_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gatekeeper-tui",
        description="Gatekeeper - terminal chat client for a personal knowledge base",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Read configuration from this TOML file",
    )
    parser.add_argument(
        "--no-spawn",
        action="store_true",
        help="Do not start the backend even when it is not reachable",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, start the backend if needed, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("gatekeeper-tui")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"gatekeeper-tui {version}")
        return

    ensure_config_dir()
    config = load_config(config_path=args.config)
    backend = config.backend
    supervisor = BackendSupervisor(
        PortProbe(backend.host, backend.port, timeout=backend.probe_timeout),
        BackendProcess(backend.command, backend.process_name),
    )
    if backend.spawn_on_start and not args.no_spawn:
        supervisor.ensure_running()

    try:
        app = GatekeeperApp(config=config)
        app.run()
    finally:
        supervisor.shutdown()


if __name__ == "__main__":
    main()
