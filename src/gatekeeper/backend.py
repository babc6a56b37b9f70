"""Backend availability probe and background process handle.

The TUI core never imports this module; ``__main__`` wires a supervisor
around the app so tests can run the session without any real process.
"""

from __future__ import annotations

import logging
import shutil
import socket
import subprocess
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class AvailabilityProbe(Protocol):
    def is_available(self) -> bool: ...


class BackendLifecycle(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


class PortProbe:
    """Report whether something accepts TCP connections on host:port."""

    def __init__(self, host: str, port: int, timeout: float = 2.0) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    def is_available(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError:
            return False


class BackendProcess:
    """Spawn the backend in the background and terminate it by name."""

    def __init__(self, command: list[str], process_name: str) -> None:
        self.command = list(command)
        self.process_name = process_name
        self._process: subprocess.Popen[bytes] | None = None

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self) -> None:
        if self.running:
            return
        self._process = subprocess.Popen(
            self.command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        LOGGER.info(
            "backend.spawned",
            extra={
                "event": "backend.spawned",
                "command": self.command,
                "pid": self._process.pid,
            },
        )

    def stop(self) -> None:
        pkill_bin = shutil.which("pkill")
        if pkill_bin is not None:
            result = subprocess.run(
                [pkill_bin, "-x", self.process_name],
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=5,
            )
            LOGGER.info(
                "backend.stopped",
                extra={
                    "event": "backend.stopped",
                    "process_name": self.process_name,
                    "returncode": result.returncode,
                },
            )
        if self.running and self._process is not None:
            self._process.terminate()
            try:
                self._process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._process.kill()
        self._process = None


class BackendSupervisor:
    """Start the backend only when nobody is serving, and stop only what we started."""

    def __init__(self, probe: AvailabilityProbe, process: BackendLifecycle) -> None:
        self.probe = probe
        self.process = process
        self.started = False

    def ensure_running(self) -> bool:
        """Spawn the backend when the probe fails. Returns True if spawned."""
        if self.probe.is_available():
            LOGGER.info("backend.already_running", extra={"event": "backend.already_running"})
            return False
        try:
            self.process.start()
        except OSError as exc:
            LOGGER.warning(
                "backend.spawn_failed",
                extra={"event": "backend.spawn_failed", "reason": str(exc)},
            )
            return False
        self.started = True
        return True

    def shutdown(self) -> None:
        if not self.started:
            return
        try:
            self.process.stop()
        except (OSError, subprocess.SubprocessError) as exc:
            LOGGER.warning(
                "backend.stop_failed",
                extra={"event": "backend.stop_failed", "reason": str(exc)},
            )
        self.started = False
