"""
Block extractor for Bikeshed-style specification documents.

Runs two independent state machines over the flattened line stream of a
document tree: one for definition blocks and one for IDL blocks. Closed
definition blocks are grouped by target name; closed IDL blocks are parsed,
converted to declarations, and grouped by declared name.
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from extraction.config import DEFAULT_MARKUP, EXPOSED_ATTRIBUTE, MarkupPatterns
from extraction.errors import UnterminatedBlockError
from extraction.line_source import PathLike, iter_source_lines
from extraction.models import DefinitionRecord, ExtractionResult, SourceLine
from idl.converter import ConvertOptions, convert_idl
from idl.declarations import Declaration
from idl.models import Definition
from idl.parser import IdlSyntaxError, parse_idl

logger = logging.getLogger(__name__)


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.lines_scanned = 0
        self.definition_blocks = 0
        self.idl_blocks = 0
        self.declarations = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "lines_scanned": self.lines_scanned,
            "definition_blocks": self.definition_blocks,
            "idl_blocks": self.idl_blocks,
            "declarations": self.declarations,
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ExtractionStats(lines={self.lines_scanned}, "
            f"definitions={self.definition_blocks}, idl_blocks={self.idl_blocks}, "
            f"declarations={self.declarations})"
        )


def is_exposed(node: Definition) -> bool:
    """Check whether an IDL definition carries an ``Exposed`` extended attribute.

    Only the attribute's presence matters; its value (the realms) is not
    inspected.
    """
    for attr in node.ext_attrs:
        if attr.name == EXPOSED_ATTRIBUTE:
            return True
    return False


class BlockExtractor:
    """Single-pass extractor fed one logical line at a time.

    Example:
        >>> extractor = BlockExtractor()
        >>> for line in lines:
        ...     extractor.feed(line)
        >>> result = extractor.finish()
    """

    def __init__(
        self,
        markup: Optional[MarkupPatterns] = None,
        convert_options: Optional[ConvertOptions] = None,
    ):
        self.markup = markup if markup is not None else DEFAULT_MARKUP
        self.convert_options = convert_options if convert_options is not None else ConvertOptions()
        self.dfn_recording: Optional[DefinitionRecord] = None
        self.idl_recording: Optional[List[str]] = None
        self.idl_start: Optional[SourceLine] = None
        self.definitions: Dict[str, List[DefinitionRecord]] = {}
        self.declarations: Dict[str, List[Declaration]] = {}
        self.exposed: Set[str] = set()
        self.stats = ExtractionStats()

    def feed(self, line: Union[str, SourceLine]) -> None:
        """Process the next logical line."""
        source = line if isinstance(line, SourceLine) else SourceLine(line)
        text = source.text
        self.stats.lines_scanned += 1

        # Definition blocks
        if self.dfn_recording is None:
            match = self.markup.definition_start.match(text)
            if match:
                self.dfn_recording = DefinitionRecord(
                    target=match.group(2),
                    type=match.group(1),
                    source_path=source.path,
                    start_line=source.line_number,
                )
                return

        if self.dfn_recording is not None:
            if self.markup.definition_end.match(text):
                self._close_definition()
            else:
                self.dfn_recording.lines.append(text)
            return

        # IDL blocks
        if self.idl_recording is None:
            if self.markup.idl_start.match(text):
                self.idl_recording = []
                self.idl_start = source
            return

        if self.markup.idl_end.match(text):
            self._close_idl()
        else:
            self.idl_recording.append(text)

    def _close_definition(self) -> None:
        record = self.dfn_recording
        self.definitions.setdefault(record.target, []).append(record)
        self.dfn_recording = None
        self.stats.definition_blocks += 1
        logger.debug(
            "Closed %s definition for %r (%d lines)",
            record.type,
            record.target,
            len(record.lines),
        )

    def _close_idl(self) -> None:
        idl_text = "\n".join(self.idl_recording)
        start = self.idl_start
        self.idl_recording = None
        self.idl_start = None

        try:
            idl_nodes = parse_idl(idl_text)
        except IdlSyntaxError as e:
            logger.debug("Malformed IDL block starting at %s: %s", start.location(), e)
            raise

        for node in idl_nodes:
            if is_exposed(node):
                self.exposed.add(node.name)

        for declaration in convert_idl(idl_nodes, self.convert_options):
            if not declaration.name:
                continue
            declaration.idl = [
                node for node in idl_nodes if (node.name or node.target) == declaration.name
            ]
            self.declarations.setdefault(declaration.name, []).append(declaration)
            self.stats.declarations += 1

        self.stats.idl_blocks += 1
        logger.debug("Closed IDL block from %s (%d definitions)", start.location(), len(idl_nodes))

    def finish(self) -> ExtractionResult:
        """End the stream and return the aggregated result.

        Raises:
            UnterminatedBlockError: If a definition or IDL block is still open.
        """
        if self.dfn_recording is not None:
            raise UnterminatedBlockError(
                f"{self.dfn_recording.type} definition",
                path=self.dfn_recording.source_path,
                line_number=self.dfn_recording.start_line,
            )
        if self.idl_recording is not None:
            raise UnterminatedBlockError(
                "IDL",
                path=self.idl_start.path,
                line_number=self.idl_start.line_number,
            )

        return ExtractionResult(
            definitions={name: list(records) for name, records in self.definitions.items()},
            declarations={name: list(decls) for name, decls in self.declarations.items()},
            exposed=frozenset(self.exposed),
        )


def extract_lines(
    lines: Iterable[Union[str, SourceLine]],
    markup: Optional[MarkupPatterns] = None,
    convert_options: Optional[ConvertOptions] = None,
) -> ExtractionResult:
    """Extract blocks from an already-flattened line sequence.

    Args:
        lines: Logical lines, as plain strings or ``SourceLine`` objects.
        markup: Marker patterns; defaults to ``DEFAULT_MARKUP``.
        convert_options: IDL conversion settings.

    Returns:
        The aggregated ``ExtractionResult``.

    Raises:
        UnterminatedBlockError: If the input ends inside a block.
        IdlSyntaxError: If an IDL block does not parse.
    """
    extractor = BlockExtractor(markup=markup, convert_options=convert_options)
    for line in lines:
        extractor.feed(line)
    return extractor.finish()


def extract_file_with_stats(
    file_path: PathLike,
    markup: Optional[MarkupPatterns] = None,
    convert_options: Optional[ConvertOptions] = None,
) -> Tuple[ExtractionResult, ExtractionStats]:
    """Extract all blocks from a root document and the documents it includes.

    Args:
        file_path: Path to the root document.
        markup: Marker patterns; defaults to ``DEFAULT_MARKUP``.
        convert_options: IDL conversion settings.

    Returns:
        A tuple of (result, stats).

    Raises:
        FileNotFoundError: If the root or an included document is missing.
        DocumentStructureError: On a malformed directive, include cycle or
            unterminated block.
        IdlSyntaxError: If an IDL block does not parse.
    """
    file_path = os.path.realpath(os.fspath(file_path))
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Document not found: {file_path}")

    logger.info("Extracting blocks from %s", file_path)

    extractor = BlockExtractor(markup=markup, convert_options=convert_options)
    source_lines = iter_source_lines(file_path, extractor.markup)
    try:
        for source_line in source_lines:
            extractor.feed(source_line)
        result = extractor.finish()
    except Exception as e:
        logger.error("Error extracting blocks from %s: %s", file_path, e)
        raise
    finally:
        source_lines.close()

    if not result.definitions and not result.declarations:
        logger.warning("No definition or IDL blocks found in %s", file_path)

    logger.info("Extraction complete: %s", extractor.stats)
    return result, extractor.stats


def extract_file(
    file_path: PathLike,
    markup: Optional[MarkupPatterns] = None,
    convert_options: Optional[ConvertOptions] = None,
) -> ExtractionResult:
    """Extract all blocks from a root document; see ``extract_file_with_stats``.

    Example:
        >>> result = extract_file("spec/index.bs")
        >>> sorted(result.exposed)
        ['GPUAdapter', 'GPUDevice']
    """
    result, _stats = extract_file_with_stats(file_path, markup, convert_options)
    return result
