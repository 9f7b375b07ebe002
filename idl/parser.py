"""
Lark parser initialization and WebIDL fragment parsing.

This module turns the raw text of one IDL block into an ordered list of
``Definition`` syntax nodes.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedEOF, UnexpectedInput

from idl.grammar import WEBIDL_GRAMMAR
from idl.models import Argument, Definition, ExtendedAttribute, IdlType, Member

logger = logging.getLogger(__name__)


class IdlSyntaxError(ValueError):
    """Raised when an IDL fragment does not parse.

    Attributes:
        line: 1-indexed line within the fragment, or None if unknown.
        column: 1-indexed column within the fragment, or None if unknown.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


def _identifier(token: Token) -> str:
    """Strip the leading escape underscore from a WebIDL identifier."""
    text = str(token)
    return text[1:] if text.startswith("_") else text


def _unquote(token: Token) -> str:
    return str(token)[1:-1]


class IdlTreeTransformer(Transformer):
    """Build ``idl.models`` dataclasses from the Lark parse tree."""

    def start(self, children):
        return list(children)

    def definition(self, children):
        ext_attrs, node = children
        node.ext_attrs = ext_attrs or []
        return node

    # Definitions

    def interface(self, children):
        partial, name, inheritance, *members = children
        return Definition(
            type="interface",
            name=_identifier(name),
            partial=partial is not None,
            inheritance=inheritance,
            members=members,
        )

    def interface_mixin(self, children):
        partial, name, *members = children
        return Definition(
            type="interface mixin",
            name=_identifier(name),
            partial=partial is not None,
            members=members,
        )

    def callback_interface(self, children):
        name, *members = children
        return Definition(type="callback interface", name=_identifier(name), members=members)

    def callback_function(self, children):
        name, idl_type, arguments = children
        return Definition(
            type="callback",
            name=_identifier(name),
            idl_type=idl_type,
            arguments=arguments or [],
        )

    def namespace(self, children):
        partial, name, *members = children
        return Definition(
            type="namespace",
            name=_identifier(name),
            partial=partial is not None,
            members=members,
        )

    def dictionary(self, children):
        partial, name, inheritance, *members = children
        return Definition(
            type="dictionary",
            name=_identifier(name),
            partial=partial is not None,
            inheritance=inheritance,
            members=members,
        )

    def enum(self, children):
        name, values = children
        return Definition(type="enum", name=_identifier(name), values=values or [])

    def typedef(self, children):
        idl_type, name = children
        return Definition(type="typedef", name=_identifier(name), idl_type=idl_type)

    def includes_statement(self, children):
        target, mixin = children
        return Definition(
            type="includes",
            target=_identifier(target),
            includes=_identifier(mixin),
        )

    def inheritance(self, children):
        return _identifier(children[0])

    def enum_values(self, children):
        return [_unquote(token) for token in children]

    # Members

    def interface_member(self, children):
        ext_attrs, member = children
        member.ext_attrs = ext_attrs or []
        return member

    def const_member(self, children):
        idl_type, name, value = children
        return Member(type="const", name=_identifier(name), idl_type=idl_type, value=value)

    def constructor(self, children):
        return Member(type="constructor", arguments=children[0] or [])

    def attribute(self, children):
        qualifier, readonly, idl_type, name = children
        return Member(
            type="attribute",
            name=name,
            idl_type=idl_type,
            special=qualifier or "",
            readonly=readonly is not None,
        )

    def attribute_qualifier(self, children):
        return str(children[0])

    def operation(self, children):
        special, idl_type, name, arguments = children
        return Member(
            type="operation",
            name=name or "",
            idl_type=idl_type,
            arguments=arguments or [],
            special=special or "",
        )

    def special(self, children):
        return str(children[0])

    def stringifier(self, children):
        return Member(type="operation", special="stringifier")

    def iterable(self, children):
        return Member(type="iterable", type_parameters=[t for t in children if t is not None])

    def async_iterable(self, children):
        first, second, arguments = children
        return Member(
            type="async_iterable",
            type_parameters=[t for t in (first, second) if t is not None],
            arguments=arguments or [],
        )

    def iterable_arguments(self, children):
        return children[0] or []

    def maplike(self, children):
        readonly, key_type, value_type = children
        return Member(
            type="maplike",
            readonly=readonly is not None,
            type_parameters=[key_type, value_type],
        )

    def setlike(self, children):
        readonly, value_type = children
        return Member(type="setlike", readonly=readonly is not None, type_parameters=[value_type])

    def required_field(self, children):
        ext_attrs, _required, idl_type, name = children
        return Member(
            type="field",
            name=name,
            idl_type=idl_type,
            required=True,
            ext_attrs=ext_attrs or [],
        )

    def optional_field(self, children):
        ext_attrs, idl_type, name, default = children
        return Member(
            type="field",
            name=name,
            idl_type=idl_type,
            value=default,
            ext_attrs=ext_attrs or [],
        )

    def operation_name(self, children):
        return _identifier(children[0])

    def attribute_name(self, children):
        return _identifier(children[0])

    def argument_name(self, children):
        return _identifier(children[0])

    # Arguments and values

    def argument_list(self, children):
        return list(children)

    def optional_argument(self, children):
        ext_attrs, _optional, idl_type, name, default = children
        return Argument(
            name=name,
            idl_type=idl_type,
            optional=True,
            default=default,
            ext_attrs=ext_attrs or [],
        )

    def required_argument(self, children):
        ext_attrs, idl_type, ellipsis, name = children
        return Argument(
            name=name,
            idl_type=idl_type,
            variadic=ellipsis is not None,
            ext_attrs=ext_attrs or [],
        )

    def default(self, children):
        return children[0]

    def default_value(self, children):
        return "".join(str(child) for child in children)

    def const_value(self, children):
        return str(children[0])

    # Types

    def type_with_ext_attrs(self, children):
        ext_attrs, idl_type = children
        if ext_attrs:
            idl_type.ext_attrs = ext_attrs
        return idl_type

    def type(self, children):
        idl_type, nullable = children
        idl_type.nullable = nullable is not None
        return idl_type

    def named_type(self, children):
        return IdlType(name=_identifier(children[0]))

    def primitive_type(self, children):
        return IdlType(name=" ".join(str(token) for token in children))

    def generic_type(self, children):
        generic, *subtypes = children
        return IdlType(generic=generic, subtypes=subtypes)

    def generic_name(self, children):
        return str(children[0])

    def union_type(self, children):
        return IdlType(union=True, subtypes=list(children))

    def union_member(self, children):
        ext_attrs, idl_type = children
        if ext_attrs:
            idl_type.ext_attrs = ext_attrs
        return idl_type

    # Extended attributes

    def ext_attr_list(self, children):
        return list(children)

    def ext_attr(self, children):
        name, rhs, arguments = children
        rhs_type, rhs_value = rhs if rhs is not None else (None, None)
        return ExtendedAttribute(
            name=_identifier(name),
            rhs_type=rhs_type,
            rhs=rhs_value,
            arguments=arguments,
        )

    def rhs_identifier(self, children):
        return "identifier", _identifier(children[0])

    def rhs_identifier_list(self, children):
        return "identifier-list", [_identifier(token) for token in children]

    def rhs_wildcard(self, children):
        return "wildcard", "*"

    def rhs_string(self, children):
        return "string", _unquote(children[0])

    def rhs_integer(self, children):
        return "integer", str(children[0])

    def rhs_decimal(self, children):
        return "decimal", str(children[0])

    def ext_attr_args(self, children):
        return children[0] or []


@lru_cache(maxsize=1)
def create_parser() -> Lark:
    """Create (once) the Lark parser for WebIDL fragments.

    Returns:
        A Lark Earley parser built from ``WEBIDL_GRAMMAR``.
    """
    parser = Lark(
        WEBIDL_GRAMMAR,
        parser="earley",
        lexer="basic",
        maybe_placeholders=True,
    )
    logger.debug("Created Lark WebIDL parser")
    return parser


def parse_idl(text: str) -> List[Definition]:
    """Parse one IDL block into its definitions, in source order.

    Args:
        text: The complete IDL source of one block.

    Returns:
        List of ``Definition`` syntax nodes.

    Raises:
        TypeError: If text is not a string.
        IdlSyntaxError: If the text is not valid WebIDL.

    Example:
        >>> [d.name for d in parse_idl("interface Foo {};")]
        ['Foo']
    """
    if not isinstance(text, str):
        raise TypeError(f"IDL source must be str, got {type(text).__name__}")

    try:
        tree = create_parser().parse(text)
    except UnexpectedEOF as exc:
        raise IdlSyntaxError("Unexpected end of IDL fragment") from exc
    except UnexpectedInput as exc:
        context = exc.get_context(text).rstrip()
        raise IdlSyntaxError(
            f"Invalid IDL at line {exc.line}, column {exc.column}:\n{context}",
            line=exc.line,
            column=exc.column,
        ) from exc

    definitions = IdlTreeTransformer().transform(tree)
    logger.debug("Parsed %d IDL definitions", len(definitions))
    return definitions
