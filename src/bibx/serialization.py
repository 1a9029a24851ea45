"""Declaration serialization: JSON round-trip for bibx nodes.

Converts declaration nodes to/from JSON-compatible dicts. Useful for:
- Machine-readable CLI output (``bibx --json``)
- Caching parsed bibliographies
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from bibx import parse
    from bibx.serialization import to_json, from_json

    decls = parse("@book{b1, year = 1999}")
    json_str = to_json(decls)
    restored = from_json(json_str)
    assert restored == decls

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

import json
from collections.abc import Iterable
from dataclasses import fields
from typing import Any

from bibx.location import SourceLocation
from bibx.nodes import (
    AbbrevDecl,
    BadDecl,
    CommentGroup,
    Declaration,
    EntryDecl,
    FieldStmt,
    Node,
    PreambleDecl,
)

# Registry of node type names to classes for deserialization
_NODE_TYPES: dict[str, type] = {
    "EntryDecl": EntryDecl,
    "AbbrevDecl": AbbrevDecl,
    "PreambleDecl": PreambleDecl,
    "BadDecl": BadDecl,
    "FieldStmt": FieldStmt,
    "CommentGroup": CommentGroup,
}


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.
    Recursively serializes child nodes and SourceLocation objects.

    Args:
        node: Any bibx node.

    Returns:
        Dict with ``_type`` and all node fields.

    """
    result: dict[str, Any] = {"_type": type(node).__name__}

    for f in fields(node):
        result[f.name] = _serialize_value(getattr(node, f.name))

    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, SourceLocation):
        return {
            "lineno": value.lineno,
            "col_offset": value.col_offset,
            "source_file": value.source_file,
        }
    if isinstance(value, tuple):
        return [_serialize_value(v) for v in value]
    return value


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a node from a dict produced by to_dict.

    Args:
        data: Dict with a ``_type`` discriminator.

    Returns:
        The reconstructed node.

    Raises:
        ValueError: Unknown or missing ``_type``.

    """
    type_name = data.get("_type")
    node_cls = _NODE_TYPES.get(type_name) if isinstance(type_name, str) else None
    if node_cls is None:
        msg = f"Unknown node type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name in data:
            kwargs[f.name] = _deserialize_value(f.name, data[f.name])
    return node_cls(**kwargs)


def _deserialize_value(name: str, value: Any) -> Any:
    if name == "location" and isinstance(value, dict):
        return SourceLocation(
            lineno=value.get("lineno", 0),
            col_offset=value.get("col_offset", 0),
            source_file=value.get("source_file"),
        )
    if isinstance(value, dict) and "_type" in value:
        return from_dict(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(name, v) for v in value)
    return value


def to_json(decls: Iterable[Declaration], *, indent: int | None = None) -> str:
    """Serialize a sequence of declarations to a JSON array.

    Args:
        decls: Declarations in source order.
        indent: Optional indentation for pretty output.

    """
    return json.dumps([to_dict(d) for d in decls], sort_keys=True, indent=indent)


def from_json(text: str) -> tuple[Declaration, ...]:
    """Deserialize a JSON array produced by to_json."""
    data = json.loads(text)
    if not isinstance(data, list):
        msg = "Expected a JSON array of declarations"
        raise ValueError(msg)
    result: list[Declaration] = []
    for item in data:
        node = from_dict(item)
        if not isinstance(node, Declaration):
            msg = f"Expected a declaration, got {type(node).__name__}"
            raise ValueError(msg)
        result.append(node)
    return tuple(result)
