"""Tests for CLI entrypoint wiring."""

from __future__ import annotations

import contextlib
import io
from pathlib import Path
import unittest
from unittest.mock import patch

from gatekeeper.__main__ import main
from gatekeeper.config import BackendConfig, Config


class MainEntrypointTests(unittest.TestCase):
    """Validate top-level main() behavior."""

    def _patched(self, config: Config):
        stack = contextlib.ExitStack()
        mocks = {
            "ensure": stack.enter_context(
                patch("gatekeeper.__main__.ensure_config_dir")
            ),
            "load": stack.enter_context(
                patch("gatekeeper.__main__.load_config", return_value=config)
            ),
            "app": stack.enter_context(patch("gatekeeper.__main__.GatekeeperApp")),
            "supervisor": stack.enter_context(
                patch("gatekeeper.__main__.BackendSupervisor")
            ),
        }
        return stack, mocks

    def test_main_ensures_config_spawns_backend_and_runs_app(self) -> None:
        config = Config()
        stack, mocks = self._patched(config)
        with stack:
            main([])
        mocks["ensure"].assert_called_once()
        mocks["load"].assert_called_once_with(config_path=None)
        mocks["app"].assert_called_once_with(config=config)
        mocks["app"].return_value.run.assert_called_once()
        supervisor = mocks["supervisor"].return_value
        supervisor.ensure_running.assert_called_once()
        supervisor.shutdown.assert_called_once()

    def test_no_spawn_flag_skips_backend_start(self) -> None:
        stack, mocks = self._patched(Config())
        with stack:
            main(["--no-spawn", "--config", "/tmp/gatekeeper.toml"])
        mocks["load"].assert_called_once_with(config_path=Path("/tmp/gatekeeper.toml"))
        supervisor = mocks["supervisor"].return_value
        supervisor.ensure_running.assert_not_called()
        supervisor.shutdown.assert_called_once()

    def test_spawn_disabled_in_config(self) -> None:
        config = Config(backend=BackendConfig(spawn_on_start=False))
        stack, mocks = self._patched(config)
        with stack:
            main([])
        mocks["supervisor"].return_value.ensure_running.assert_not_called()

    def test_backend_is_shut_down_when_app_crashes(self) -> None:
        stack, mocks = self._patched(Config())
        with stack:
            mocks["app"].return_value.run.side_effect = RuntimeError("boom")
            with self.assertRaises(RuntimeError):
                main([])
        mocks["supervisor"].return_value.shutdown.assert_called_once()

    def test_version_flag_prints_and_exits(self) -> None:
        buffer = io.StringIO()
        with patch("gatekeeper.__main__.GatekeeperApp") as app_cls_mock, contextlib.redirect_stdout(
            buffer
        ):
            main(["--version"])
        self.assertTrue(buffer.getvalue().startswith("gatekeeper-tui "))
        app_cls_mock.assert_not_called()


if __name__ == "__main__":
    unittest.main()
