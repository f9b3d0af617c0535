"""Public API for downstream modules."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .document import assemble_document, render_document
from .dsl import SchemaConfig, TypeDescriptor, load_config, load_descriptor, save_descriptor
from .synthesis import SchemaSynthesizer

__all__ = [
    "SchemaConfig",
    "TypeDescriptor",
    "build_schema_document",
    "encode_to_schema",
    "export_schema",
    "load_config",
    "load_descriptor",
    "save_descriptor",
]


def build_schema_document(
    descriptor: TypeDescriptor, config: SchemaConfig | None = None
) -> dict[str, Any]:
    """Synthesize the schema for ``descriptor`` as an ordered dict."""
    config = config or SchemaConfig()
    root, registry = SchemaSynthesizer(config).synthesize(descriptor)
    return assemble_document(root, registry, config)


def encode_to_schema(descriptor: TypeDescriptor, config: SchemaConfig | None = None) -> str:
    """Synthesize and serialize the schema for ``descriptor``."""
    config = config or SchemaConfig()
    return render_document(build_schema_document(descriptor, config), config)


def export_schema(
    descriptor_path: str | Path,
    out_path: str | Path,
    config: SchemaConfig | None = None,
) -> Path:
    """Load a descriptor document and write its schema to ``out_path``."""
    descriptor = load_descriptor(descriptor_path)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(encode_to_schema(descriptor, config))
    return out_path
