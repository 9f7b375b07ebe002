"""
WebIDL to TypeScript declaration conversion.

Maps each parsed ``Definition`` onto one or more ``Declaration`` nodes.
Interfaces that expose a global interface object also get a ``var``
declaration describing that object (prototype, constructors, statics and
constants).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from idl.declarations import (
    ConstructSignature,
    Declaration,
    IndexSignature,
    MethodSignature,
    Parameter,
    PropertySignature,
    Signature,
)
from idl.models import Argument, Definition, IdlType, Member

logger = logging.getLogger(__name__)

NUMERIC_TYPES = {
    "byte",
    "octet",
    "short",
    "unsigned short",
    "long",
    "unsigned long",
    "long long",
    "unsigned long long",
    "float",
    "unrestricted float",
    "double",
    "unrestricted double",
}

STRING_TYPES = {"DOMString", "ByteString", "USVString"}

# Extended attribute that suppresses the global interface object
NO_INTERFACE_OBJECT = "LegacyNoInterfaceObject"


@dataclass
class ConvertOptions:
    """Conversion settings.

    Attributes:
        emit_globals: Emit a ``var`` declaration for every interface that
            has an interface object.
    """

    emit_globals: bool = True


def ts_type(idl_type: IdlType, in_return: bool = False) -> str:
    """Render a WebIDL type as TypeScript type text.

    Args:
        idl_type: The parsed type.
        in_return: Whether the type is in return position, where
            ``undefined`` becomes ``void``.

    Returns:
        TypeScript type text, e.g. ``Promise<void>`` or ``string | null``.
    """
    if idl_type.union:
        text = " | ".join(ts_type(subtype) for subtype in idl_type.subtypes)
    elif idl_type.generic:
        text = _generic_type(idl_type)
    elif idl_type.name in NUMERIC_TYPES:
        text = "number"
    elif idl_type.name in STRING_TYPES:
        text = "string"
    elif idl_type.name == "undefined":
        text = "void" if in_return else "undefined"
    else:
        text = idl_type.name

    if idl_type.nullable:
        text += " | null"
    return text


def _generic_type(idl_type: IdlType) -> str:
    generic = idl_type.generic
    subtypes = idl_type.subtypes
    if generic == "Promise":
        return f"Promise<{ts_type(subtypes[0], in_return=True)}>"
    if generic == "record":
        key, value = (ts_type(subtype) for subtype in subtypes)
        return f"Record<{key}, {value}>"
    element = ts_type(subtypes[0])
    if generic == "FrozenArray":
        return f"ReadonlyArray<{element}>"
    # sequence and ObservableArray
    if " " in element:
        element = f"({element})"
    return f"{element}[]"


def _parameters(arguments: List[Argument]) -> List[Parameter]:
    parameters = []
    for argument in arguments:
        type_text = ts_type(argument.idl_type)
        if argument.variadic:
            type_text = f"({type_text})[]" if " " in type_text else f"{type_text}[]"
        parameters.append(
            Parameter(
                name=argument.name,
                type=type_text,
                optional=argument.optional,
                rest=argument.variadic,
            )
        )
    return parameters


def _iteration_members(member: Member) -> List[Signature]:
    """Expand ``iterable<>`` / ``async iterable<>`` into iterator methods."""
    params = [ts_type(t) for t in member.type_parameters]
    if member.type == "async_iterable":
        item = params[0] if len(params) == 1 else f"[{params[0]}, {params[1]}]"
        return [
            MethodSignature(
                name="[Symbol.asyncIterator]",
                parameters=_parameters(member.arguments),
                return_type=f"AsyncIterableIterator<{item}>",
            )
        ]

    if len(params) == 1:
        key, value = "number", params[0]
    else:
        key, value = params
    return [
        MethodSignature("[Symbol.iterator]", [], f"IterableIterator<{value}>"),
        MethodSignature("entries", [], f"IterableIterator<[{key}, {value}]>"),
        MethodSignature("keys", [], f"IterableIterator<{key}>"),
        MethodSignature("values", [], f"IterableIterator<{value}>"),
        MethodSignature(
            "forEach",
            [Parameter("callbackfn", f"(value: {value}, key: {key}) => void")],
            "void",
        ),
    ]


def _member_signatures(member: Member) -> List[Signature]:
    """Convert an instance-side member; static members and constructors yield nothing."""
    if member.type == "const":
        return [PropertySignature(member.name, ts_type(member.idl_type), readonly=True)]

    if member.type == "attribute":
        if member.special == "static":
            return []
        return [
            PropertySignature(
                member.name,
                ts_type(member.idl_type),
                readonly=member.readonly,
            )
        ]

    if member.type == "operation":
        if member.special == "static":
            return []
        if member.idl_type is None:
            # bare "stringifier;"
            return [MethodSignature("toString", [], "string")]
        parameters = _parameters(member.arguments)
        return_type = ts_type(member.idl_type, in_return=True)
        signatures: List[Signature] = []
        if member.special == "getter" and parameters:
            signatures.append(
                IndexSignature(
                    Parameter(parameters[0].name, parameters[0].type),
                    return_type,
                    readonly=True,
                )
            )
        if member.name:
            signatures.append(MethodSignature(member.name, parameters, return_type))
        return signatures

    if member.type == "field":
        return [
            PropertySignature(
                member.name,
                ts_type(member.idl_type),
                optional=not member.required,
            )
        ]

    if member.type in {"iterable", "async_iterable"}:
        return _iteration_members(member)

    return []


def _collection_heritage(members: List[Member]) -> List[str]:
    heritage = []
    for member in members:
        params = ", ".join(ts_type(t) for t in member.type_parameters)
        if member.type == "maplike":
            base = "ReadonlyMap" if member.readonly else "Map"
            heritage.append(f"{base}<{params}>")
        elif member.type == "setlike":
            base = "ReadonlySet" if member.readonly else "Set"
            heritage.append(f"{base}<{params}>")
    return heritage


def _global_declaration(node: Definition) -> Declaration:
    """Build the ``declare var`` describing an interface object."""
    members: List[Signature] = [PropertySignature("prototype", node.name)]
    for member in node.members:
        if member.type == "constructor":
            members.append(ConstructSignature(_parameters(member.arguments), node.name))
        elif member.type == "const":
            members.append(
                PropertySignature(member.name, ts_type(member.idl_type), readonly=True)
            )
        elif member.special == "static" and member.type == "attribute":
            members.append(
                PropertySignature(
                    member.name,
                    ts_type(member.idl_type),
                    readonly=member.readonly,
                )
            )
        elif member.special == "static" and member.type == "operation":
            members.append(
                MethodSignature(
                    member.name,
                    _parameters(member.arguments),
                    ts_type(member.idl_type, in_return=True),
                )
            )
    return Declaration(kind="var", name=node.name, members=members)


def _has_interface_object(node: Definition) -> bool:
    return (
        node.type == "interface"
        and not node.partial
        and not node.has_ext_attr(NO_INTERFACE_OBJECT)
    )


def convert_definition(node: Definition, options: ConvertOptions) -> List[Declaration]:
    """Convert one WebIDL definition into TypeScript declarations."""
    if node.type in {"interface", "interface mixin", "callback interface", "dictionary"}:
        heritage = [node.inheritance] if node.inheritance else []
        heritage.extend(_collection_heritage(node.members))
        members: List[Signature] = []
        for member in node.members:
            members.extend(_member_signatures(member))
        declarations = [
            Declaration(kind="interface", name=node.name, heritage=heritage, members=members)
        ]
        if options.emit_globals and _has_interface_object(node):
            declarations.append(_global_declaration(node))
        return declarations

    if node.type == "includes":
        return [Declaration(kind="interface", name=node.target, heritage=[node.includes])]

    if node.type == "namespace":
        members = []
        for member in node.members:
            members.extend(_member_signatures(member))
        return [Declaration(kind="namespace", name=node.name, members=members)]

    if node.type == "enum":
        alias = " | ".join(f'"{value}"' for value in node.values) or "never"
        return [Declaration(kind="type", name=node.name, type=alias)]

    if node.type == "typedef":
        return [Declaration(kind="type", name=node.name, type=ts_type(node.idl_type))]

    if node.type == "callback":
        params = ", ".join(
            _format_parameter(parameter) for parameter in _parameters(node.arguments)
        )
        return_type = ts_type(node.idl_type, in_return=True)
        return [Declaration(kind="type", name=node.name, type=f"({params}) => {return_type}")]

    logger.warning("Skipping unsupported IDL definition type: %s", node.type)
    return []


def _format_parameter(parameter: Parameter) -> str:
    prefix = "..." if parameter.rest else ""
    suffix = "?" if parameter.optional else ""
    return f"{prefix}{parameter.name}{suffix}: {parameter.type}"


def convert_idl(
    nodes: List[Definition],
    options: Optional[ConvertOptions] = None,
) -> List[Declaration]:
    """Convert the syntax nodes of one IDL block into declarations.

    Args:
        nodes: Definitions returned by ``parse_idl`` for a single block.
        options: Conversion settings; defaults to ``ConvertOptions()``.

    Returns:
        Declarations in definition order.

    Example:
        >>> decls = convert_idl(parse_idl('enum E { "a" };'))
        >>> decls[0].type
        '"a"'
    """
    if options is None:
        options = ConvertOptions()

    declarations: List[Declaration] = []
    for node in nodes:
        declarations.extend(convert_definition(node, options))
    logger.debug("Converted %d IDL definitions into %d declarations", len(nodes), len(declarations))
    return declarations
