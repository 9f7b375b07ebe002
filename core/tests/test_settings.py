"""Tests for configuration loading helpers."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.settings import (
    CONFIG_PATH_ENV,
    STRICT_ENV,
    ConfigValidationError,
    get_section,
    load_config_payload,
    resolve_config_path,
    resolve_strict_config_validation,
)


class TestSettings(unittest.TestCase):
    def _write_config(self, content: str, suffix: str = ".yml") -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
        handle.write(content)
        handle.flush()
        handle.close()
        return handle.name

    def test_load_non_strict_missing_returns_empty(self) -> None:
        payload = load_config_payload("/definitely/missing.yml", strict=False)
        self.assertEqual(payload, {})

    def test_load_strict_missing_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            load_config_payload("/definitely/missing.yml", strict=True)

    def test_load_yaml_and_json(self) -> None:
        yaml_path = self._write_config("markup:\n  encoding: utf-8\n")
        json_path = self._write_config('{"markup": {"encoding": "utf-8"}}', suffix=".json")
        try:
            self.assertEqual(load_config_payload(yaml_path), {"markup": {"encoding": "utf-8"}})
            self.assertEqual(load_config_payload(json_path), {"markup": {"encoding": "utf-8"}})
        finally:
            Path(yaml_path).unlink(missing_ok=True)
            Path(json_path).unlink(missing_ok=True)

    def test_invalid_yaml_strict_raises(self) -> None:
        path = self._write_config("markup: [unclosed\n")
        try:
            self.assertEqual(load_config_payload(path, strict=False), {})
            with self.assertRaises(ConfigValidationError):
                load_config_payload(path, strict=True)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_empty_and_non_mapping_payloads(self) -> None:
        empty = self._write_config("")
        listing = self._write_config("- a\n- b\n")
        try:
            self.assertEqual(load_config_payload(empty), {})
            self.assertEqual(load_config_payload(listing), {})
            with self.assertRaises(ConfigValidationError):
                load_config_payload(listing, strict=True)
        finally:
            Path(empty).unlink(missing_ok=True)
            Path(listing).unlink(missing_ok=True)

    def test_get_section(self) -> None:
        payload = {"markup": {"encoding": "utf-8"}, "broken": ["x"]}
        self.assertEqual(get_section(payload, "markup"), {"encoding": "utf-8"})
        self.assertEqual(get_section(payload, "absent"), {})
        self.assertEqual(get_section(payload, "broken"), {})
        with self.assertRaises(ConfigValidationError):
            get_section(payload, "broken", strict=True)

    def test_env_resolution(self) -> None:
        with patch.dict(os.environ, {CONFIG_PATH_ENV: "/etc/markup.yml", STRICT_ENV: "yes"}):
            self.assertEqual(resolve_config_path(), "/etc/markup.yml")
            self.assertEqual(resolve_config_path("local.yml"), "local.yml")
            self.assertTrue(resolve_strict_config_validation())
        with patch.dict(os.environ, {CONFIG_PATH_ENV: "  ", STRICT_ENV: "off"}):
            self.assertIsNone(resolve_config_path())
            self.assertFalse(resolve_strict_config_validation(default=True))


if __name__ == "__main__":
    unittest.main()
