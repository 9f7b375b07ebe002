"""
Layer 1: Extraction Engine

Inclusion-resolving scanner for Bikeshed-style specification documents.
Extracts definition blocks and WebIDL blocks, converting the latter into
TypeScript declarations.
"""

from extraction.models import DefinitionRecord, ExtractionResult, SourceLine
from extraction.errors import (
    DocumentStructureError,
    IncludeCycleError,
    IncludeDirectiveError,
    UnterminatedBlockError,
)
from extraction.config import (
    DEFAULT_MARKUP,
    MarkupPatterns,
    build_markup_patterns,
    load_markup_config,
)
from extraction.line_source import iter_document_lines, iter_source_lines
from extraction.extractor import (
    BlockExtractor,
    ExtractionStats,
    extract_file,
    extract_file_with_stats,
    extract_lines,
    is_exposed,
)

__all__ = [
    # Data models
    "DefinitionRecord",
    "ExtractionResult",
    "SourceLine",
    # Errors
    "DocumentStructureError",
    "IncludeCycleError",
    "IncludeDirectiveError",
    "UnterminatedBlockError",
    # Configuration
    "DEFAULT_MARKUP",
    "MarkupPatterns",
    "build_markup_patterns",
    "load_markup_config",
    # Line source
    "iter_document_lines",
    "iter_source_lines",
    # Block extraction
    "BlockExtractor",
    "ExtractionStats",
    "extract_file",
    "extract_file_with_stats",
    "extract_lines",
    "is_exposed",
]
