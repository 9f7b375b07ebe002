"""
Data models for parsed WebIDL fragments.

Field names follow the usual WebIDL AST vocabulary (``type``, ``name``,
``idl_type``, ``ext_attrs``, ``members``) so that syntax nodes from one IDL
block can be inspected uniformly regardless of definition kind.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class ExtendedAttribute:
    """A single ``[Name]`` / ``[Name=rhs]`` / ``[Name(args)]`` annotation.

    Attributes:
        name: Attribute name, e.g. ``Exposed``.
        rhs_type: One of ``identifier``, ``identifier-list``, ``wildcard``,
            ``string``, ``integer``, ``decimal``; None without a right side.
        rhs: Right-hand value. A list of names for ``identifier-list``.
        arguments: Argument list for ``[Name(...)]`` forms, None otherwise.
    """

    name: str
    rhs_type: Optional[str] = None
    rhs: Union[str, List[str], None] = None
    arguments: Optional[List["Argument"]] = None


@dataclass
class IdlType:
    """A WebIDL type expression.

    ``name`` holds the type name for plain types (``long long``,
    ``DOMString``, ``GPUBuffer``). Generic types set ``generic`` (``sequence``,
    ``FrozenArray``, ``ObservableArray``, ``Promise``, ``record``) and carry
    their parameters in ``subtypes``; unions set ``union`` and list their
    members in ``subtypes``.
    """

    name: str = ""
    generic: str = ""
    union: bool = False
    nullable: bool = False
    subtypes: List["IdlType"] = field(default_factory=list)
    ext_attrs: List[ExtendedAttribute] = field(default_factory=list)

    def __str__(self) -> str:
        if self.union:
            text = "(" + " or ".join(str(t) for t in self.subtypes) + ")"
        elif self.generic:
            text = f"{self.generic}<{', '.join(str(t) for t in self.subtypes)}>"
        else:
            text = self.name
        return text + "?" if self.nullable else text


@dataclass
class Argument:
    """An operation, constructor or callback argument."""

    name: str
    idl_type: IdlType
    optional: bool = False
    variadic: bool = False
    default: Optional[str] = None
    ext_attrs: List[ExtendedAttribute] = field(default_factory=list)


@dataclass
class Member:
    """A member of an interface, mixin, namespace or dictionary.

    ``type`` is one of ``const``, ``constructor``, ``attribute``,
    ``operation``, ``iterable``, ``async_iterable``, ``maplike``,
    ``setlike`` or ``field`` (dictionary member). ``special`` holds the
    qualifier keyword (``static``, ``getter``, ``setter``, ``deleter``,
    ``stringifier``, ``inherit``) or an empty string.
    """

    type: str
    name: str = ""
    idl_type: Optional[IdlType] = None
    arguments: List[Argument] = field(default_factory=list)
    special: str = ""
    readonly: bool = False
    required: bool = False
    value: Optional[str] = None
    type_parameters: List[IdlType] = field(default_factory=list)
    ext_attrs: List[ExtendedAttribute] = field(default_factory=list)


@dataclass
class Definition:
    """A top-level WebIDL definition (the syntax node of one IDL block).

    ``type`` is one of ``interface``, ``interface mixin``,
    ``callback interface``, ``namespace``, ``dictionary``, ``enum``,
    ``typedef``, ``callback`` or ``includes``. ``includes`` statements have
    no ``name``; they set ``target`` (the including interface) and
    ``includes`` (the mixin).
    """

    type: str
    name: str = ""
    target: str = ""
    includes: str = ""
    partial: bool = False
    inheritance: Optional[str] = None
    members: List[Member] = field(default_factory=list)
    values: List[str] = field(default_factory=list)
    idl_type: Optional[IdlType] = None
    arguments: List[Argument] = field(default_factory=list)
    ext_attrs: List[ExtendedAttribute] = field(default_factory=list)

    def has_ext_attr(self, name: str) -> bool:
        """Return True if an extended attribute named ``name`` is present."""
        return any(attr.name == name for attr in self.ext_attrs)

    def to_dict(self) -> dict:
        """Summarize the definition for JSON output."""
        summary = {"type": self.type, "name": self.name or None}
        if self.target:
            summary["target"] = self.target
            summary["includes"] = self.includes
        if self.partial:
            summary["partial"] = True
        if self.inheritance:
            summary["inheritance"] = self.inheritance
        if self.ext_attrs:
            summary["ext_attrs"] = [attr.name for attr in self.ext_attrs]
        return summary
