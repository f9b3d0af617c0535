"""Definition registry backing the ``$defs`` block of a schema document."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)

DEFS_PREFIX = "#/$defs/"


def definition_ref(name: str) -> str:
    return f"{DEFS_PREFIX}{name}"


class DefinitionRegistry:
    """Insertion-ordered mapping of unique definition names to schema nodes.

    Names are never removed, so once ``name_2`` is taken a later collision on
    ``name`` probes on to ``name_3``.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, dict[str, Any]] = {}

    def unique_name(self, base: str) -> str:
        """Return ``base`` if free, else the first free ``base_2``, ``base_3``, ..."""
        if base not in self._definitions:
            return base
        counter = 2
        while f"{base}_{counter}" in self._definitions:
            counter += 1
        return f"{base}_{counter}"

    def register(self, base: str, schema: dict[str, Any]) -> str:
        name = self.unique_name(base)
        self._definitions[name] = schema
        logger.debug("registered definition %s", name)
        return name

    def reserve(self, base: str) -> str:
        """Claim a unique name now and fill it later with :meth:`define`."""
        name = self.unique_name(base)
        self._definitions[name] = {}
        logger.debug("reserved definition %s", name)
        return name

    def define(self, name: str, schema: dict[str, Any]) -> None:
        if name not in self._definitions:
            raise KeyError(f"definition {name} was never reserved")
        self._definitions[name] = schema

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __getitem__(self, name: str) -> dict[str, Any]:
        return self._definitions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return dict(self._definitions)
