"""
Configuration constants and marker patterns for block extraction.

Defines the markup lines that delimit inclusion directives, definition
blocks and IDL blocks, and how to override them from a config file.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Pattern, Tuple

from core.settings import (
    ConfigValidationError,
    get_section,
    load_config_payload,
    resolve_config_path,
    resolve_strict_config_validation,
)

logger = logging.getLogger(__name__)

# Inclusion directive: three consecutive lines
INCLUDE_START_MARKER: str = "<pre class=include>"
INCLUDE_PATH_PREFIX: str = "path: "
INCLUDE_END_MARKER: str = "</pre>"

# Definition types recognized as the attribute name of a definition <div>
DEFINITION_TYPES: Tuple[str, ...] = (
    "abstract-op",
    "algorithm",
    "argument",
    "attribute",
    "callback",
    "const",
    "constructor",
    "dict-member",
    "dictionary",
    "enum",
    "enum-value",
    "event",
    "interface",
    "method",
    "namespace",
    "typedef",
)

# Definition blocks open and close at column 0 so that indented nested
# <div> elements inside a body never terminate it.
DEFINITION_END_PATTERN: str = r"^</div>\s*$"

IDL_START_PATTERN: str = (
    r"""^<(?:(?:pre|xmp)\s+class=["']?idl["']?|script\s+type=["']?idl["']?)(?:\s[^>]*)?>\s*$"""
)
IDL_END_PATTERN: str = r"^</(?:pre|xmp|script)>\s*$"

# Extended attribute marking an interface as exposed to some realm
EXPOSED_ATTRIBUTE: str = "Exposed"

DEFAULT_ENCODING: str = "utf-8"

# Config file section holding markup overrides
MARKUP_SECTION: str = "markup"


def build_definition_start_pattern(definition_types: Tuple[str, ...]) -> str:
    """Build the definition start regex for the given definition types.

    Group 1 captures the definition type, group 2 the target name.

    Example:
        >>> re.match(build_definition_start_pattern(("algorithm",)),
        ...          '<div algorithm="create a buffer">').groups()
        ('algorithm', 'create a buffer')
    """
    alternatives = "|".join(re.escape(t) for t in definition_types)
    return rf"""^<div\s+({alternatives})=["']?([^"'>]+?)["']?\s*>\s*$"""


@dataclass(frozen=True)
class MarkupPatterns:
    """Compiled marker patterns used by the line source and block extractor."""

    definition_start: Pattern[str]
    definition_end: Pattern[str]
    idl_start: Pattern[str]
    idl_end: Pattern[str]
    include_start: str = INCLUDE_START_MARKER
    include_path_prefix: str = INCLUDE_PATH_PREFIX
    include_end: str = INCLUDE_END_MARKER
    encoding: str = DEFAULT_ENCODING


def _compile(name: str, pattern: str, min_groups: int = 0) -> Pattern[str]:
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise ConfigValidationError(f"markup.{name} is not a valid regex: {exc}") from exc
    if compiled.groups < min_groups:
        raise ConfigValidationError(
            f"markup.{name} must define at least {min_groups} capture groups, "
            f"found {compiled.groups}"
        )
    return compiled


def build_markup_patterns(
    definition_types: Tuple[str, ...] = DEFINITION_TYPES,
    definition_start: Optional[str] = None,
    definition_end: str = DEFINITION_END_PATTERN,
    idl_start: str = IDL_START_PATTERN,
    idl_end: str = IDL_END_PATTERN,
    include_start: str = INCLUDE_START_MARKER,
    include_path_prefix: str = INCLUDE_PATH_PREFIX,
    include_end: str = INCLUDE_END_MARKER,
    encoding: str = DEFAULT_ENCODING,
) -> MarkupPatterns:
    """Compile and validate a set of marker patterns.

    Raises:
        ConfigValidationError: If a pattern does not compile, the definition
            start pattern has fewer than two groups, or a marker is empty.
    """
    if definition_start is None:
        if not definition_types:
            raise ConfigValidationError("markup.definition_types must not be empty")
        definition_start = build_definition_start_pattern(tuple(definition_types))

    for name, marker in (
        ("include_start", include_start),
        ("include_path_prefix", include_path_prefix),
        ("include_end", include_end),
    ):
        if not marker:
            raise ConfigValidationError(f"markup.{name} must not be empty")

    return MarkupPatterns(
        definition_start=_compile("definition_start", definition_start, min_groups=2),
        definition_end=_compile("definition_end", definition_end),
        idl_start=_compile("idl_start", idl_start),
        idl_end=_compile("idl_end", idl_end),
        include_start=include_start,
        include_path_prefix=include_path_prefix,
        include_end=include_end,
        encoding=encoding,
    )


DEFAULT_MARKUP: MarkupPatterns = build_markup_patterns()


def markup_from_payload(payload: Dict[str, Any], strict: bool = False) -> MarkupPatterns:
    """Build marker patterns from the ``markup`` section of a config payload.

    Unknown keys are ignored with a warning. In non-strict mode an invalid
    section falls back to ``DEFAULT_MARKUP``.
    """
    section = get_section(payload, MARKUP_SECTION, strict=strict)
    if not section:
        return DEFAULT_MARKUP

    known = {
        "definition_types",
        "definition_start",
        "definition_end",
        "idl_start",
        "idl_end",
        "include_start",
        "include_path_prefix",
        "include_end",
        "encoding",
    }
    unknown = sorted(set(section) - known)
    if unknown:
        logger.warning("Ignoring unknown markup settings: %s", ", ".join(unknown))

    kwargs: Dict[str, Any] = {key: section[key] for key in known if key in section}
    if "definition_types" in kwargs:
        types = kwargs["definition_types"]
        if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
            msg = "markup.definition_types must be a list of strings"
            if strict:
                raise ConfigValidationError(msg)
            logger.warning("%s; using default markup", msg)
            return DEFAULT_MARKUP
        kwargs["definition_types"] = tuple(types)
    for key, value in kwargs.items():
        if key != "definition_types" and not isinstance(value, str):
            msg = f"markup.{key} must be a string"
            if strict:
                raise ConfigValidationError(msg)
            logger.warning("%s; using default markup", msg)
            return DEFAULT_MARKUP

    try:
        return build_markup_patterns(**kwargs)
    except ConfigValidationError as exc:
        if strict:
            raise
        logger.warning("%s; using default markup", exc)
        return DEFAULT_MARKUP


def load_markup_config(
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> MarkupPatterns:
    """Load marker patterns from a YAML/JSON config file.

    The path defaults to ``SPEC_EXTRACT_CONFIG``; strictness defaults to
    ``STRICT_CONFIG_VALIDATION``. Without a config file the defaults apply.
    """
    if strict is None:
        strict = resolve_strict_config_validation()
    path = resolve_config_path(config_path)
    if path is None:
        return DEFAULT_MARKUP
    logger.info("Loading markup config from %s", path)
    return markup_from_payload(load_config_payload(path, strict=strict), strict=strict)
