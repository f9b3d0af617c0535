"""
shape_schema
============

Synthesize JSON Schema (2020-12) documents from structural type descriptors,
including sealed unions rendered as ``oneOf`` + discriminator or flattened
``anyOf`` variants.
"""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Return the installed package version or '0.0.0' when unavailable."""
    try:
        return version("shape-schema")
    except PackageNotFoundError:
        return "0.0.0"


__all__ = ["get_version"]
