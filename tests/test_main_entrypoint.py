"""Tests for CLI entrypoint wiring."""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from apex_chat.__main__ import main


class MainEntrypointTests(unittest.TestCase):
    """Validate top-level main() behavior."""

    def test_main_ensures_config_and_runs_app(self) -> None:
        with patch("apex_chat.__main__.ensure_config_dir") as ensure_mock, patch(
            "apex_chat.__main__.ApexChatApp"
        ) as app_cls_mock:
            app_instance = app_cls_mock.return_value
            main([])
            ensure_mock.assert_called_once()
            app_cls_mock.assert_called_once()
            app_instance.run.assert_called_once()

    def test_version_flag_does_not_start_app(self) -> None:
        buffer = io.StringIO()
        with patch("apex_chat.__main__.ApexChatApp") as app_cls_mock, redirect_stdout(
            buffer
        ):
            main(["--version"])
        app_cls_mock.assert_not_called()
        self.assertTrue(buffer.getvalue().startswith("apex-chat "))


if __name__ == "__main__":
    unittest.main()
