"""Tests for run and document-inclusion logging context."""

import logging
import unittest

from core.structured_logging import (
    LOG_FORMAT,
    _LogContextFilter,
    current_document,
    document_scope,
    get_run_id,
    include_trail,
    set_run_id,
)


def _record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


class TestStructuredLogging(unittest.TestCase):
    def test_set_run_id_generates_when_missing(self) -> None:
        generated = set_run_id()
        self.assertTrue(generated)
        self.assertEqual(get_run_id(), generated)
        self.assertEqual(set_run_id("run-42"), "run-42")
        self.assertEqual(get_run_id(), "run-42")

    def test_nested_scopes_build_include_trail(self) -> None:
        self.assertEqual(current_document(), "-")
        with document_scope("/specs/webgpu/index.bs") as name:
            self.assertEqual(name, "index.bs")
            with document_scope("/specs/webgpu/sections/devices.bs"):
                self.assertEqual(current_document(), "devices.bs")
                self.assertEqual(include_trail(), ("index.bs", "devices.bs"))
            self.assertEqual(include_trail(), ("index.bs",))
        self.assertEqual(include_trail(), ())
        self.assertEqual(current_document(), "-")

    def test_filter_outside_any_document(self) -> None:
        record = _record()
        self.assertTrue(_LogContextFilter().filter(record))
        self.assertEqual(record.document, "-")
        self.assertEqual(record.include_trail, "-")
        self.assertEqual(record.include_depth, 0)

    def test_filter_tags_innermost_document(self) -> None:
        set_run_id("run-7")
        record = _record()
        with document_scope("index.bs"), document_scope("queue.bs"):
            _LogContextFilter().filter(record)

        self.assertEqual(record.run_id, "run-7")
        self.assertEqual(record.document, "queue.bs")
        self.assertEqual(record.include_trail, "index.bs > queue.bs")
        self.assertEqual(record.include_depth, 1)
        self.assertIn("document=index.bs > queue.bs", logging.Formatter(LOG_FORMAT).format(record))


if __name__ == "__main__":
    unittest.main()
