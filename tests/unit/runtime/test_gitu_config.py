"""Tests for config loading and value sanitization."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from gitu.runtime import config


class ConfigLoadingTests(unittest.TestCase):
    def _write(self, tmp: str, payload) -> Path:
        path = Path(tmp) / "config.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_missing_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            loaded = config.load_gitu_config(Path(tmp) / "absent.json")

        self.assertEqual(loaded, config.GituConfig())

    def test_valid_values_are_loaded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, {"style": "native", "no_color": True, "poll_timeout_ms": 250, "debug": True})
            loaded = config.load_gitu_config(path)

        self.assertEqual(loaded, config.GituConfig(style="native", no_color=True, poll_timeout_ms=250, debug=True))

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, {"style": "  ", "no_color": "yes", "poll_timeout_ms": True, "debug": 1})
            loaded = config.load_gitu_config(path)

        self.assertEqual(loaded, config.GituConfig())

    def test_poll_timeout_out_of_range(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            for value in (0, 5, 5000, 12.5):
                with self.subTest(value=value):
                    path = self._write(tmp, {"poll_timeout_ms": value})
                    self.assertEqual(config.load_gitu_config(path).poll_timeout_ms, config.DEFAULT_POLL_TIMEOUT_MS)

    def test_malformed_or_non_object_json_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(config.load_config(path), {})

            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(config.load_config(path), {})

    def test_env_var_overrides_default_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, {"style": "vim"})
            with mock.patch.dict(os.environ, {config.CONFIG_ENV_VAR: str(path)}):
                self.assertEqual(config.config_path(), path)
                self.assertEqual(config.load_gitu_config().style, "vim")

    def test_blank_env_var_uses_default_path(self) -> None:
        with mock.patch.dict(os.environ, {config.CONFIG_ENV_VAR: "  "}):
            self.assertEqual(config.config_path(), config.DEFAULT_CONFIG_PATH)


if __name__ == "__main__":
    unittest.main()
