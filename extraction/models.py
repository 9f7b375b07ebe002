"""
Data models for extracted definition and IDL blocks.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, NamedTuple, Optional

from idl.declarations import Declaration


class SourceLine(NamedTuple):
    """One logical line of a document tree, with its provenance.

    Attributes:
        text: Line content without the trailing newline.
        path: Absolute path of the document the line physically lives in.
        line_number: 1-indexed line number within that document.
    """

    text: str
    path: Optional[str] = None
    line_number: Optional[int] = None

    def location(self) -> str:
        """Human-readable ``path:line`` for log and error messages."""
        if self.path is None:
            return "<input>" if self.line_number is None else f"<input>:{self.line_number}"
        return f"{self.path}:{self.line_number}"


@dataclass
class DefinitionRecord:
    """A definition block: a target name, its type tag and its body lines.

    Attributes:
        target: The name being defined.
        type: Definition category, e.g. ``algorithm`` or ``method``.
        lines: Raw body lines between the start and end markers, verbatim.
        source_path: Document containing the start marker (not compared).
        start_line: Line number of the start marker (not compared).
    """

    target: str
    type: str
    lines: List[str] = field(default_factory=list)
    source_path: Optional[str] = field(default=None, compare=False)
    start_line: Optional[int] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a dictionary suitable for JSON serialization."""
        return {
            "target": self.target,
            "type": self.type,
            "lines": list(self.lines),
            "source_path": self.source_path,
            "start_line": self.start_line,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Everything extracted from one document tree.

    Attributes:
        definitions: Target name -> definition records in encounter order.
        declarations: Declared name -> declaration nodes in encounter order,
            each carrying its originating IDL syntax nodes.
        exposed: Names of IDL definitions carrying an ``Exposed`` attribute.
    """

    definitions: Dict[str, List[DefinitionRecord]]
    declarations: Dict[str, List[Declaration]]
    exposed: FrozenSet[str]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary suitable for JSON serialization."""
        return {
            "definitions": {
                name: [record.to_dict() for record in records]
                for name, records in self.definitions.items()
            },
            "declarations": {
                name: [declaration.to_dict() for declaration in declarations]
                for name, declarations in self.declarations.items()
            },
            "exposed": sorted(self.exposed),
        }
