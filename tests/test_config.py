"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from apex_chat.config import DEFAULT_CONFIG, load_config, resolve_api_key


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config = load_config(config_path=Path(temp_dir) / "config.toml")
            self.assertEqual(config, DEFAULT_CONFIG)
            self.assertEqual(
                config["api"]["endpoint"], "https://api.deepseek.com/chat/completions"
            )
            self.assertEqual(config["api"]["api_key_env"], "DEEPSEEK_API_KEY")
            self.assertIsNone(config["api"]["timeout_seconds"])
            self.assertEqual(config["defaults"]["model"], "deepseek-chat")
            self.assertEqual(config["attachments"]["max_bytes"], 0)

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[defaults]
model = "deepseek-reasoner"
markdown_output = true

[api]
timeout_seconds = 30
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["defaults"]["model"], "deepseek-reasoner")
            self.assertTrue(config["defaults"]["markdown_output"])
            self.assertFalse(config["defaults"]["deep_search"])
            self.assertEqual(config["api"]["timeout_seconds"], 30)
            self.assertEqual(config["app"]["title"], DEFAULT_CONFIG["app"]["title"])

    def test_invalid_values_fallback_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[api]
endpoint = "ftp://example.com"

[defaults]
model = "gpt-4"
                """.strip(),
                encoding="utf-8",
            )
            with self.assertLogs("apex_chat.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_unparsable_toml_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text("[api\nendpoint=", encoding="utf-8")
            with self.assertLogs("apex_chat.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)


class ResolveApiKeyTests(unittest.TestCase):
    def test_environment_variable_is_used(self) -> None:
        api = dict(DEFAULT_CONFIG["api"])
        self.assertEqual(resolve_api_key(api, {"DEEPSEEK_API_KEY": " sk-env "}), "sk-env")

    def test_explicit_key_wins(self) -> None:
        api = {**DEFAULT_CONFIG["api"], "api_key": "sk-file"}
        self.assertEqual(resolve_api_key(api, {"DEEPSEEK_API_KEY": "sk-env"}), "sk-file")

    def test_custom_variable_name_and_absence(self) -> None:
        api = {**DEFAULT_CONFIG["api"], "api_key_env": "APEX_KEY"}
        self.assertEqual(resolve_api_key(api, {"APEX_KEY": "k"}), "k")
        self.assertEqual(resolve_api_key(api, {}), "")


if __name__ == "__main__":
    unittest.main()
