"""Typed readers over PyYAML node graphs.

Documents are composed (not constructed) so that scalars keep their raw
text. Every schema field is then read explicitly with the expected type,
which keeps values like ``version: 1.23`` or ``stream: "8"`` as strings
instead of letting implicit YAML typing turn them into numbers.
"""

from __future__ import annotations

import datetime
from typing import Iterator

import yaml
from loguru import logger

from ..core.exceptions import ParseError, ValidationError
from ..core.types import GenericValue

_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_TRUE = {"true", "yes", "on"}
_FALSE = {"false", "no", "off"}


def line_of(node: yaml.Node) -> int:
    """1-based source line of ``node``."""
    return node.start_mark.line + 1


def iter_mapping(node: yaml.Node, what: str) -> Iterator[tuple[str, yaml.Node]]:
    """Yield ``(key, value_node)`` pairs of a mapping node.

    Raises:
        ParseError: If ``node`` is not a mapping, a key is not a scalar, or a
            key is repeated.
    """
    if not isinstance(node, yaml.MappingNode):
        raise ParseError(f"{what} must be a mapping", line_of(node))

    seen: set[str] = set()
    for key_node, value_node in node.value:
        if not isinstance(key_node, yaml.ScalarNode):
            raise ParseError(f"{what} has a non-scalar key", line_of(key_node))
        key = key_node.value
        if key in seen:
            raise ParseError(f"{what} repeats key '{key}'", line_of(key_node))
        seen.add(key)
        yield key, value_node


def unknown_key(key: str, node: yaml.Node, what: str, strict: bool) -> None:
    """Reject (strict) or skip (lenient) an unexpected mapping key.

    Raises:
        ValidationError: In strict mode.
    """
    if strict:
        raise ValidationError(f"Unknown key '{key}' in {what} (line {line_of(node)})")
    logger.debug(f"Skipping unknown key '{key}' in {what} (line {line_of(node)})")


def read_string(node: yaml.Node, what: str) -> str:
    if not isinstance(node, yaml.ScalarNode):
        raise ParseError(f"{what} must be a scalar", line_of(node))
    return node.value


def read_int(
    node: yaml.Node, what: str, minimum: int = _INT64_MIN, maximum: int = _INT64_MAX
) -> int:
    text = read_string(node, what)
    try:
        value = int(text, 10)
    except ValueError:
        raise ParseError(f"{what} must be an integer, got '{text}'", line_of(node))
    if not minimum <= value <= maximum:
        raise ParseError(f"{what} is out of range: {value}", line_of(node))
    return value


def read_uint64(node: yaml.Node, what: str) -> int:
    return read_int(node, what, minimum=0, maximum=_UINT64_MAX)


def read_bool(node: yaml.Node, what: str) -> bool:
    text = read_string(node, what).lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ParseError(f"{what} must be a boolean, got '{text}'", line_of(node))


def read_date(node: yaml.Node, what: str) -> datetime.date:
    text = read_string(node, what)
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        raise ParseError(f"{what} must be a YYYY-MM-DD date, got '{text}'", line_of(node))


def read_string_list(node: yaml.Node, what: str) -> list[str]:
    if not isinstance(node, yaml.SequenceNode):
        raise ParseError(f"{what} must be a sequence", line_of(node))
    return [read_string(item, what) for item in node.value]


def read_string_set(node: yaml.Node, what: str) -> set[str]:
    return set(read_string_list(node, what))


def read_generic(node: yaml.Node) -> GenericValue:
    """Convert an arbitrary subtree with ordinary YAML typing (used for xmd)."""
    try:
        return yaml.constructor.SafeConstructor().construct_document(node)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid xmd content: {e}", line_of(node))
