"""Nullable projection of synthesized schema nodes."""

from __future__ import annotations

from typing import Any

from .dsl import NullableMode

NULL_SCHEMA = {"type": "null"}
_COMPOSITE_KEYWORDS = ("$ref", "oneOf", "anyOf")


def project_nullable(node: dict[str, Any], nullable: bool, mode: NullableMode) -> dict[str, Any]:
    """Make ``node`` admit ``null`` when ``nullable`` is set.

    ``TYPE_ARRAY`` rewrites a scalar ``type`` in place to ``[type, "null"]``;
    references and unions cannot carry an array ``type`` and fall back to the
    ``oneOf`` wrap that ``ONE_OF`` always uses.
    """
    if not nullable:
        return node
    if mode is NullableMode.TYPE_ARRAY:
        base_type = node.get("type")
        if isinstance(base_type, str) and not any(key in node for key in _COMPOSITE_KEYWORDS):
            return {
                key: [value, "null"] if key == "type" else value for key, value in node.items()
            }
    return {"oneOf": [node, dict(NULL_SCHEMA)]}
