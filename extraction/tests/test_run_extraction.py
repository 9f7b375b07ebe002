"""End-to-end tests for the run_extraction command-line entry point."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.settings import CONFIG_PATH_ENV
from run_extraction import main, parse_args

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestRunExtraction(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.out_dir = Path(self._tmpdir.name)
        self._env = patch.dict(os.environ, {CONFIG_PATH_ENV: ""})
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._tmpdir.cleanup()

    def _argv(self, document, run_id):
        return [
            "--document", str(document),
            "--output-file", str(self.out_dir / "result.json"),
            "--report-dir", str(self.out_dir / "reports"),
            "--run-id", run_id,
            "--log-level", "WARNING",
        ]

    def test_parse_args_defaults(self):
        args = parse_args(["--document", "index.bs"])
        self.assertEqual(args.output_file, "output/extraction.json")
        self.assertIsNone(args.config)
        self.assertIsNone(args.run_id)

    def test_successful_run_writes_result_and_report(self):
        main(self._argv(FIXTURES_DIR / "index.bs", "ok-run"))

        result = json.loads((self.out_dir / "result.json").read_text(encoding="utf-8"))
        self.assertEqual(result["exposed"], ["GPUBuffer", "GPUDevice"])
        self.assertIn("create a buffer", result["definitions"])

        report = json.loads(
            (self.out_dir / "reports" / "extraction-ok-run.json").read_text(encoding="utf-8")
        )
        self.assertEqual(report["status"], "success")
        self.assertEqual(report["run_id"], "ok-run")
        self.assertEqual(report["stats"]["idl_blocks"], 4)

    def test_failure_exits_and_reports(self):
        with self.assertRaises(SystemExit) as ctx:
            main(self._argv(FIXTURES_DIR / "missing.bs", "bad-run"))
        self.assertEqual(ctx.exception.code, 1)

        report = json.loads(
            (self.out_dir / "reports" / "extraction-bad-run.json").read_text(encoding="utf-8")
        )
        self.assertEqual(report["status"], "failed")
        self.assertFalse((self.out_dir / "result.json").exists())


if __name__ == "__main__":
    unittest.main()
