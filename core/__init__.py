"""Core shared utilities: logging context, configuration, run artifacts."""

from core.structured_logging import (
    configure_structured_logging,
    document_scope,
    current_document,
    include_trail,
    get_run_id,
    set_run_id,
)
from core.settings import (
    ConfigValidationError,
    get_section,
    load_config_payload,
    resolve_config_path,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_extraction_output, write_run_report

__all__ = [
    "configure_structured_logging",
    "document_scope",
    "current_document",
    "include_trail",
    "get_run_id",
    "set_run_id",
    "ConfigValidationError",
    "get_section",
    "load_config_payload",
    "resolve_config_path",
    "resolve_strict_config_validation",
    "write_extraction_output",
    "write_run_report",
]
