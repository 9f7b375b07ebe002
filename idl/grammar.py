"""
Lark grammar for the WebIDL fragments embedded in specification documents.

The grammar is written for the Earley parser with the basic lexer: keyword
literals that also match ``IDENTIFIER`` are re-typed by the lexer, so
identifiers that collide with keywords only parse where the grammar lists
those keywords explicitly (argument and attribute names).
"""

WEBIDL_GRAMMAR: str = r"""
start: definition*

definition: [ext_attr_list] _definition_body

_definition_body: interface
    | interface_mixin
    | callback_interface
    | callback_function
    | namespace
    | dictionary
    | enum
    | typedef
    | includes_statement

interface: [PARTIAL] "interface" IDENTIFIER [inheritance] "{" interface_member* "}" ";"
interface_mixin: [PARTIAL] "interface" "mixin" IDENTIFIER "{" interface_member* "}" ";"
callback_interface: "callback" "interface" IDENTIFIER "{" interface_member* "}" ";"
callback_function: "callback" IDENTIFIER "=" type "(" [argument_list] ")" ";"
namespace: [PARTIAL] "namespace" IDENTIFIER "{" interface_member* "}" ";"
dictionary: [PARTIAL] "dictionary" IDENTIFIER [inheritance] "{" dictionary_member* "}" ";"
enum: "enum" IDENTIFIER "{" [enum_values] "}" ";"
typedef: "typedef" type_with_ext_attrs IDENTIFIER ";"
includes_statement: IDENTIFIER "includes" IDENTIFIER ";"

inheritance: ":" IDENTIFIER
enum_values: STRING ("," STRING)* ","?

// Members

interface_member: [ext_attr_list] _member_body

_member_body: const_member
    | constructor
    | attribute
    | operation
    | stringifier
    | iterable
    | async_iterable
    | maplike
    | setlike

const_member: "const" type IDENTIFIER "=" const_value ";"
constructor: "constructor" "(" [argument_list] ")" ";"
attribute: [attribute_qualifier] [READONLY] "attribute" type_with_ext_attrs attribute_name ";"
attribute_qualifier: STATIC | STRINGIFIER | INHERIT
operation: [special] type [operation_name] "(" [argument_list] ")" ";"
special: STATIC | GETTER | SETTER | DELETER | STRINGIFIER
stringifier: STRINGIFIER ";"
iterable: "iterable" "<" type_with_ext_attrs ["," type_with_ext_attrs] ">" ";"
async_iterable: ("async" "iterable" | "async_iterable") "<" type_with_ext_attrs ["," type_with_ext_attrs] ">" [iterable_arguments] ";"
iterable_arguments: "(" [argument_list] ")"
maplike: [READONLY] "maplike" "<" type_with_ext_attrs "," type_with_ext_attrs ">" ";"
setlike: [READONLY] "setlike" "<" type_with_ext_attrs ">" ";"

dictionary_member: [ext_attr_list] REQUIRED type_with_ext_attrs argument_name ";" -> required_field
    | [ext_attr_list] type argument_name [default] ";" -> optional_field

!operation_name: IDENTIFIER | "includes"
!attribute_name: IDENTIFIER | "async" | REQUIRED
!argument_name: IDENTIFIER | "async" | "attribute" | "callback" | "const"
    | "constructor" | DELETER | "dictionary" | "enum" | GETTER | "includes"
    | INHERIT | "interface" | "iterable" | "maplike" | "mixin" | "namespace"
    | PARTIAL | READONLY | REQUIRED | "setlike" | SETTER | STATIC
    | STRINGIFIER | "typedef" | "unrestricted"

// Arguments and values

argument_list: argument ("," argument)*

argument: [ext_attr_list] OPTIONAL type_with_ext_attrs argument_name [default] -> optional_argument
    | [ext_attr_list] type [ELLIPSIS] argument_name -> required_argument

default: "=" default_value
!default_value: const_value | STRING | "[" "]" | "{" "}" | "null" | "undefined"
!const_value: "true" | "false" | FLOAT | INTEGER | "-Infinity" | "Infinity" | "NaN"

// Types

type_with_ext_attrs: [ext_attr_list] type

type: _type_body [NULLABLE]

_type_body: primitive_type
    | named_type
    | generic_type
    | union_type

named_type: IDENTIFIER

!primitive_type: "any" | "undefined" | "boolean" | "byte" | "octet" | "bigint"
    | "object" | "symbol" | "DOMString" | "ByteString" | "USVString"
    | "unsigned"? ("short" | "long" | "long" "long")
    | "unrestricted"? ("float" | "double")

generic_type: generic_name "<" type_with_ext_attrs ("," type_with_ext_attrs)* ">"
!generic_name: "sequence" | "FrozenArray" | "ObservableArray" | "Promise" | "record"

union_type: "(" union_member ("or" union_member)+ ")"
union_member: [ext_attr_list] type

// Extended attributes

ext_attr_list: "[" ext_attr ("," ext_attr)* "]"
ext_attr: IDENTIFIER [ext_attr_rhs] [ext_attr_args]

ext_attr_rhs: "=" IDENTIFIER -> rhs_identifier
    | "=" "(" IDENTIFIER ("," IDENTIFIER)* ")" -> rhs_identifier_list
    | "=" "*" -> rhs_wildcard
    | "=" STRING -> rhs_string
    | "=" INTEGER -> rhs_integer
    | "=" FLOAT -> rhs_decimal

ext_attr_args: "(" [argument_list] ")"

// Terminals

PARTIAL: "partial"
READONLY: "readonly"
STATIC: "static"
STRINGIFIER: "stringifier"
INHERIT: "inherit"
GETTER: "getter"
SETTER: "setter"
DELETER: "deleter"
REQUIRED: "required"
OPTIONAL: "optional"
ELLIPSIS: "..."
NULLABLE: "?"

IDENTIFIER: /_?[A-Za-z][0-9A-Z_a-z-]*/
STRING: /"[^"]*"/
FLOAT.2: /-?(([0-9]+\.[0-9]*|[0-9]*\.[0-9]+)([Ee][+-]?[0-9]+)?|[0-9]+[Ee][+-]?[0-9]+)/
INTEGER: /-?([1-9][0-9]*|0[Xx][0-9A-Fa-f]+|0[0-7]*)/
COMMENT: /\/\/[^\n]*|\/\*[\s\S]*?\*\//

%import common.WS
%ignore WS
%ignore COMMENT
"""
