"""Assemble and render the final schema document."""

from __future__ import annotations

from typing import Any

import ujson as json

from .dsl import SchemaConfig
from .registry import DefinitionRegistry


def assemble_document(
    root: dict[str, Any], registry: DefinitionRegistry, config: SchemaConfig
) -> dict[str, Any]:
    """Place the root node's keywords after ``$schema`` and append ``$defs`` if any."""
    document: dict[str, Any] = {"$schema": config.schema_uri}
    document.update(root)
    if len(registry):
        document["$defs"] = registry.as_dict()
    return document


def render_document(document: dict[str, Any], config: SchemaConfig) -> str:
    """Serialize in insertion order, pretty or compact."""
    return json.dumps(
        document,
        indent=2 if config.pretty_print else 0,
        ensure_ascii=False,
        escape_forward_slashes=False,
    )
