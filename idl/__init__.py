"""
WebIDL collaborators for the block extractor.

Parses IDL fragments with a Lark grammar and converts the resulting
definitions into TypeScript declaration nodes.
"""

from idl.models import Argument, Definition, ExtendedAttribute, IdlType, Member
from idl.parser import IdlSyntaxError, create_parser, parse_idl
from idl.declarations import (
    ConstructSignature,
    Declaration,
    IndexSignature,
    MethodSignature,
    Parameter,
    PropertySignature,
)
from idl.converter import ConvertOptions, convert_definition, convert_idl, ts_type

__all__ = [
    # Syntax nodes
    "Argument",
    "Definition",
    "ExtendedAttribute",
    "IdlType",
    "Member",
    # Parsing
    "IdlSyntaxError",
    "create_parser",
    "parse_idl",
    # Declaration nodes
    "ConstructSignature",
    "Declaration",
    "IndexSignature",
    "MethodSignature",
    "Parameter",
    "PropertySignature",
    # Conversion
    "ConvertOptions",
    "convert_definition",
    "convert_idl",
    "ts_type",
]
