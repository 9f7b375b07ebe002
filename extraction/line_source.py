"""
Inclusion-resolving line source.

Streams the lines of a document with every ``<pre class=include>``
directive replaced, in place, by the lines of the referenced document.
Inclusion is recursive and depth-first; paths resolve relative to the
directory of the document containing the directive. Documents are
identified by their real path, so a cycle through a symlink is still a
cycle. Each document is read inside a ``document_scope``: log records
emitted while its lines are streamed name that document.
"""

import enum
import logging
import os
from typing import Iterator, Optional, Tuple, Union

from core.structured_logging import document_scope
from extraction.config import DEFAULT_MARKUP, MarkupPatterns
from extraction.errors import IncludeCycleError, IncludeDirectiveError
from extraction.models import SourceLine

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class IncludeState(enum.Enum):
    """Progress through a three-line inclusion directive."""

    NORMAL = "normal"
    AWAITING_PATH = "awaiting-include-path"
    AWAITING_TERMINATOR = "awaiting-include-terminator"


def _open_document(path: str, encoding: str):
    try:
        return open(path, "r", encoding=encoding)
    except OSError as e:
        logger.error(f"Cannot open document {path}: {e}")
        raise


def iter_source_lines(
    file_path: PathLike,
    markup: Optional[MarkupPatterns] = None,
    _open_stack: Tuple[str, ...] = (),
) -> Iterator[SourceLine]:
    """Yield the logical lines of a document tree with their provenance.

    Args:
        file_path: Path to the document.
        markup: Marker patterns; defaults to ``DEFAULT_MARKUP``.

    Yields:
        ``SourceLine`` objects in flattened order. Directive lines
        themselves are never yielded.

    Raises:
        FileNotFoundError: If the document or an included document is missing.
        IncludeDirectiveError: If a directive is malformed or truncated.
        IncludeCycleError: If a document includes itself, even transitively.
    """
    if markup is None:
        markup = DEFAULT_MARKUP

    path = os.path.realpath(os.fspath(file_path))
    if path in _open_stack:
        raise IncludeCycleError(chain=_open_stack + (path,))
    open_stack = _open_stack + (path,)

    with document_scope(path):
        logger.debug("Reading document %s (include depth %d)", path, len(_open_stack))
        yield from _scan_document(path, markup, open_stack)


def _scan_document(
    path: str,
    markup: MarkupPatterns,
    open_stack: Tuple[str, ...],
) -> Iterator[SourceLine]:
    state = IncludeState.NORMAL
    line_number = 0
    with _open_document(path, markup.encoding) as handle:
        for line_number, raw_line in enumerate(handle, start=1):
            line = raw_line.rstrip("\n")

            if state is IncludeState.NORMAL:
                if line == markup.include_start:
                    state = IncludeState.AWAITING_PATH
                else:
                    yield SourceLine(line, path, line_number)

            elif state is IncludeState.AWAITING_PATH:
                relative = line[len(markup.include_path_prefix):].strip()
                if not line.startswith(markup.include_path_prefix) or not relative:
                    raise IncludeDirectiveError(
                        f"Expected '{markup.include_path_prefix}<path>' after "
                        f"'{markup.include_start}', got {line!r}",
                        path=path,
                        line_number=line_number,
                    )
                include_path = os.path.join(os.path.dirname(path), relative)
                logger.debug("Including %s from line %d", relative, line_number)
                try:
                    yield from iter_source_lines(include_path, markup, open_stack)
                except IncludeCycleError as e:
                    if e.path is None:
                        raise IncludeCycleError(e.chain, path=path, line_number=line_number) from None
                    raise
                state = IncludeState.AWAITING_TERMINATOR

            else:
                if line != markup.include_end:
                    raise IncludeDirectiveError(
                        f"Expected '{markup.include_end}' to close include directive, got {line!r}",
                        path=path,
                        line_number=line_number,
                    )
                state = IncludeState.NORMAL

    if state is not IncludeState.NORMAL:
        raise IncludeDirectiveError(
            f"Document ended inside an include directive ({state.value})",
            path=path,
            line_number=line_number,
        )


def iter_document_lines(
    file_path: PathLike,
    markup: Optional[MarkupPatterns] = None,
) -> Iterator[str]:
    """Yield the flattened text lines of a document tree.

    Example:
        >>> list(iter_document_lines("a.bs"))  # a.bs includes b.bs
        ['x', 'm', 'n', 'y']
    """
    for source_line in iter_source_lines(file_path, markup):
        yield source_line.text
