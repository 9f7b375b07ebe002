#!/usr/bin/env python3
"""
Command-line entry point for definition and IDL block extraction.

Resolves inclusions starting at a root Bikeshed document, extracts every
definition block and IDL block, and writes the aggregated result as JSON
together with a run report.

Usage:
    python run_extraction.py --document spec/index.bs
    python run_extraction.py --document spec/index.bs --output-file out/index.json
    python run_extraction.py --document spec/index.bs --config markup.yml --log-level DEBUG
"""

import argparse
import logging
import sys
import time

from core.run_artifacts import write_extraction_output, write_run_report
from core.settings import ConfigValidationError
from core.structured_logging import configure_structured_logging, set_run_id

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Bikeshed Definition & IDL Block Extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_extraction.py --document spec/index.bs\n"
            "  python run_extraction.py --document spec/index.bs --config markup.yml\n"
        ),
    )

    parser.add_argument(
        "--document",
        required=True,
        help="Path to the root document to extract from.",
    )
    parser.add_argument(
        "--output-file",
        default="output/extraction.json",
        help="Path for the JSON extraction result. Default: output/extraction.json",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML/JSON file with markup overrides. Defaults to $SPEC_EXTRACT_CONFIG.",
    )
    parser.add_argument(
        "--report-dir",
        default="output/run_reports",
        help="Directory for run reports. Default: output/run_reports",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Run correlation ID. Generated when omitted.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity. Default: INFO",
    )

    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict:
    """Run one extraction and write its outputs.

    Returns:
        The run report payload.
    """
    from extraction.config import load_markup_config
    from extraction.extractor import extract_file_with_stats

    markup = load_markup_config(args.config)

    t0 = time.time()
    result, stats = extract_file_with_stats(args.document, markup=markup)
    elapsed = time.time() - t0

    write_extraction_output(result.to_dict(), args.output_file)
    logger.info("Wrote extraction result to %s", args.output_file)

    return {
        "status": "success",
        "document": args.document,
        "output_file": args.output_file,
        "elapsed_seconds": round(elapsed, 3),
        "definition_targets": len(result.definitions),
        "declaration_names": len(result.declarations),
        "exposed": sorted(result.exposed),
        "stats": stats.to_dict(),
    }


def main(argv=None) -> None:
    """Main entry point for extraction."""
    args = parse_args(argv)
    configure_structured_logging(getattr(logging, args.log_level))
    run_id = set_run_id(args.run_id)

    logger.info("Starting extraction of %s", args.document)

    try:
        report = run(args)
    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        write_run_report({"status": "failed", "error": str(e)}, run_id, args.report_dir)
        sys.exit(1)
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        write_run_report({"status": "failed", "error": str(e)}, run_id, args.report_dir)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Extraction failed: {e}", exc_info=True)
        write_run_report({"status": "failed", "error": str(e)}, run_id, args.report_dir)
        sys.exit(1)

    report_path = write_run_report(report, run_id, args.report_dir)
    logger.info("Run report written to %s", report_path)


if __name__ == "__main__":
    main()
