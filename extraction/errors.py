"""
Exceptions raised for structurally invalid documents.

All of them are fatal: extraction stops and no partial result is returned.
"""

from typing import Optional, Sequence


class DocumentStructureError(ValueError):
    """Base class for structural violations in a document tree.

    Attributes:
        path: Document in which the violation was detected, if known.
        line_number: 1-indexed line of the violation, if known.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        self.path = path
        self.line_number = line_number
        if path is not None and line_number is not None:
            message = f"{path}:{line_number}: {message}"
        elif path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class IncludeDirectiveError(DocumentStructureError):
    """An inclusion directive is malformed or cut off by end of file."""


class IncludeCycleError(DocumentStructureError):
    """A document includes itself, directly or through other documents."""

    def __init__(self, chain: Sequence[str], path: Optional[str] = None, line_number: Optional[int] = None):
        self.chain = list(chain)
        super().__init__(
            "Include cycle detected: " + " -> ".join(self.chain),
            path=path,
            line_number=line_number,
        )


class UnterminatedBlockError(DocumentStructureError):
    """A definition or IDL block is still open at end of input."""

    def __init__(self, block_kind: str, path: Optional[str] = None, line_number: Optional[int] = None):
        self.block_kind = block_kind
        super().__init__(
            f"Unterminated {block_kind} block",
            path=path,
            line_number=line_number,
        )
