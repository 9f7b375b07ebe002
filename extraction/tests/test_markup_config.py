"""Tests for markup pattern configuration."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.settings import CONFIG_PATH_ENV, ConfigValidationError
from extraction.config import (
    DEFAULT_MARKUP,
    build_markup_patterns,
    load_markup_config,
    markup_from_payload,
)
from extraction.extractor import extract_lines


class TestDefaultMarkup(unittest.TestCase):
    def test_definition_start_captures_type_and_target(self) -> None:
        match = DEFAULT_MARKUP.definition_start.match('<div algorithm="validate the descriptor">')
        self.assertEqual(match.groups(), ("algorithm", "validate the descriptor"))

        match = DEFAULT_MARKUP.definition_start.match("<div enum-value=low-power>")
        self.assertEqual(match.groups(), ("enum-value", "low-power"))

    def test_definition_markers_anchor_at_column_zero(self) -> None:
        self.assertIsNone(DEFAULT_MARKUP.definition_start.match('  <div algorithm="x">'))
        self.assertIsNone(DEFAULT_MARKUP.definition_end.match("    </div>"))
        self.assertIsNotNone(DEFAULT_MARKUP.definition_end.match("</div>  "))

    def test_idl_markers(self) -> None:
        for line in ("<pre class=idl>", '<pre class="idl">', "<xmp class=idl>", "<script type=idl>"):
            self.assertIsNotNone(DEFAULT_MARKUP.idl_start.match(line), line)
        self.assertIsNone(DEFAULT_MARKUP.idl_start.match("<pre class=idlish>"))
        self.assertIsNone(DEFAULT_MARKUP.idl_start.match("<pre class=metadata>"))
        for line in ("</pre>", "</xmp>", "</script>"):
            self.assertIsNotNone(DEFAULT_MARKUP.idl_end.match(line), line)


class TestBuildMarkupPatterns(unittest.TestCase):
    def test_custom_definition_types(self) -> None:
        markup = build_markup_patterns(definition_types=("term",))
        result = extract_lines(["<div term=widget>", "A widget.", "</div>"], markup=markup)
        self.assertEqual(result.definitions["widget"][0].type, "term")

    def test_definition_start_needs_two_groups(self) -> None:
        with self.assertRaises(ConfigValidationError):
            build_markup_patterns(definition_start=r"^<dfn (\w+)>$")

    def test_invalid_regex(self) -> None:
        with self.assertRaises(ConfigValidationError):
            build_markup_patterns(idl_start="<pre(")

    def test_empty_include_marker(self) -> None:
        with self.assertRaises(ConfigValidationError):
            build_markup_patterns(include_start="")


class TestMarkupFromConfig(unittest.TestCase):
    def _write_config(self, text: str, suffix: str = ".yml") -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
        handle.write(text)
        handle.flush()
        handle.close()
        return handle.name

    def test_load_yaml_overrides(self) -> None:
        path = self._write_config(
            """
markup:
  definition_types: [algorithm, term]
  idl_start: '^<webidl>$'
  idl_end: '^</webidl>$'
"""
        )
        try:
            markup = load_markup_config(path, strict=True)
            self.assertIsNotNone(markup.idl_start.match("<webidl>"))
            self.assertIsNone(markup.idl_start.match("<pre class=idl>"))
            self.assertIsNotNone(markup.definition_start.match("<div term=x>"))
            self.assertEqual(markup.include_start, DEFAULT_MARKUP.include_start)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_env_config_path(self) -> None:
        path = self._write_config('{"markup": {"encoding": "latin-1"}}', suffix=".json")
        try:
            with patch.dict(os.environ, {CONFIG_PATH_ENV: path}):
                markup = load_markup_config(strict=True)
            self.assertEqual(markup.encoding, "latin-1")
        finally:
            Path(path).unlink(missing_ok=True)

    def test_no_config_uses_defaults(self) -> None:
        with patch.dict(os.environ, {CONFIG_PATH_ENV: ""}):
            self.assertIs(load_markup_config(), DEFAULT_MARKUP)

    def test_invalid_pattern_strict_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            markup_from_payload({"markup": {"definition_end": "("}}, strict=True)

    def test_invalid_pattern_non_strict_falls_back(self) -> None:
        markup = markup_from_payload({"markup": {"definition_end": "("}}, strict=False)
        self.assertIs(markup, DEFAULT_MARKUP)

    def test_wrong_value_type(self) -> None:
        with self.assertRaises(ConfigValidationError):
            markup_from_payload({"markup": {"definition_types": "algorithm"}}, strict=True)
        with self.assertRaises(ConfigValidationError):
            markup_from_payload({"markup": {"idl_end": 5}}, strict=True)

    def test_missing_section_uses_defaults(self) -> None:
        self.assertIs(markup_from_payload({}), DEFAULT_MARKUP)


if __name__ == "__main__":
    unittest.main()
