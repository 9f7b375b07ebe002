"""
TypeScript declaration nodes produced from WebIDL definitions.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from idl.models import Definition


@dataclass
class Parameter:
    """A function or method parameter."""

    name: str
    type: str
    optional: bool = False
    rest: bool = False


@dataclass
class PropertySignature:
    name: str
    type: str
    optional: bool = False
    readonly: bool = False
    kind: str = field(default="property", init=False)


@dataclass
class MethodSignature:
    name: str
    parameters: List[Parameter]
    return_type: str
    kind: str = field(default="method", init=False)


@dataclass
class ConstructSignature:
    parameters: List[Parameter]
    return_type: str
    kind: str = field(default="construct", init=False)


@dataclass
class IndexSignature:
    parameter: Parameter
    type: str
    readonly: bool = False
    kind: str = field(default="index", init=False)


Signature = Union[PropertySignature, MethodSignature, ConstructSignature, IndexSignature]


@dataclass
class Declaration:
    """A top-level TypeScript declaration.

    Attributes:
        kind: One of ``interface``, ``var``, ``type`` or ``namespace``.
        name: Declared name, or None for anonymous output.
        heritage: Base types named in the ``extends`` clause.
        members: Member signatures for interfaces, vars and namespaces.
        type: Aliased type text for ``type`` declarations.
        idl: The WebIDL syntax nodes this declaration was derived from,
            attached by the block extractor.
    """

    kind: str
    name: Optional[str] = None
    heritage: List[str] = field(default_factory=list)
    members: List[Signature] = field(default_factory=list)
    type: Optional[str] = None
    idl: List[Definition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the declaration to a dictionary suitable for JSON output."""
        return {
            "kind": self.kind,
            "name": self.name,
            "heritage": list(self.heritage),
            "members": [asdict(member) for member in self.members],
            "type": self.type,
            "idl": [node.to_dict() for node in self.idl],
        }
