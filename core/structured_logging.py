"""Structured logging with run and document-inclusion context.

Every record that reaches a configured handler is tagged with:

* ``run_id``: the correlation ID of the extraction run;
* ``document``: the document whose lines are currently being read;
* ``include_trail``: the chain of documents that led there, root first,
  e.g. ``index.bs > devices.bs > queue.bs``;
* ``include_depth``: how deep that document sits below the root.

The document context is a stack: the line source enters a
``document_scope`` for every document it opens, so nested inclusion
produces nested scopes.
"""

from __future__ import annotations

import contextvars
import logging
import os
import uuid
from contextlib import contextmanager
from typing import Iterator, Tuple

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | document=%(include_trail)s | "
    "%(name)s | %(message)s"
)

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)
_INCLUDE_STACK_VAR: contextvars.ContextVar[Tuple[str, ...]] = contextvars.ContextVar(
    "include_stack", default=()
)


class _LogContextFilter(logging.Filter):
    """Attach run and document context to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        stack = _INCLUDE_STACK_VAR.get()
        record.run_id = _RUN_ID_VAR.get()
        record.document = stack[-1] if stack else "-"
        record.include_trail = " > ".join(stack) if stack else "-"
        record.include_depth = max(len(stack) - 1, 0)
        return True


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Send root logging through ``LOG_FORMAT`` with the context filter installed."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(logging.StreamHandler())
    root_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in root_logger.handlers:
        handler.setFormatter(formatter)
        if not any(isinstance(f, _LogContextFilter) for f in handler.filters):
            handler.addFilter(_LogContextFilter())


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate run correlation ID."""
    value = run_id or str(uuid.uuid4())
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    """Get current run correlation ID."""
    return _RUN_ID_VAR.get()


def current_document() -> str:
    """Name of the innermost document being read, or ``-`` outside any scope."""
    stack = _INCLUDE_STACK_VAR.get()
    return stack[-1] if stack else "-"


def include_trail() -> Tuple[str, ...]:
    """Documents currently open, from the root to the innermost include."""
    return _INCLUDE_STACK_VAR.get()


@contextmanager
def document_scope(path: str | os.PathLike[str]) -> Iterator[str]:
    """Push a document onto the include stack until the block exits.

    Yields:
        The name the document is logged under (its basename).
    """
    name = os.path.basename(os.fspath(path))
    token = _INCLUDE_STACK_VAR.set(_INCLUDE_STACK_VAR.get() + (name,))
    try:
        yield name
    finally:
        _INCLUDE_STACK_VAR.reset(token)
