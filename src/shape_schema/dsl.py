"""Typed descriptor DSL consumed by the schema synthesizer.

A ``TypeDescriptor`` describes the shape of a type: its kind, serial name,
nullability, ordered elements and attached constraint metadata. Descriptors are
normally built by an introspection adapter, but they can also be written by
hand as YAML or JSON documents and loaded with :func:`load_descriptor`.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal

import ujson as json
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .metadata import ConstraintMetadata, Flattened, Transient, has_marker

Kind = Literal[
    "string",
    "char",
    "boolean",
    "byte",
    "short",
    "int",
    "long",
    "float",
    "double",
    "list",
    "map",
    "class",
    "object",
    "enum",
    "sealed",
    "open",
    "contextual",
]

INTEGER_KINDS = frozenset({"byte", "short", "int", "long"})
FLOAT_KINDS = frozenset({"float", "double"})
OBJECT_KINDS = frozenset({"class", "object"})
NAMED_KINDS = OBJECT_KINDS | {"sealed", "enum"}

DEFAULT_SCHEMA_URI = "https://json-schema.org/draft/2020-12/schema"


class ElementDescriptor(BaseModel):
    """One named child of a descriptor (class property, list item, map key/value, enum constant)."""

    name: str
    descriptor: TypeDescriptor
    metadata: list[ConstraintMetadata] = Field(default_factory=list)
    optional: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_markers(self) -> ElementDescriptor:
        if has_marker(self.metadata, Flattened):
            raise ValueError(f"element {self.name}: flattened is a type-level marker")
        return self

    @property
    def transient(self) -> bool:
        return has_marker(self.metadata, Transient)


class TypeDescriptor(BaseModel):
    """Structural description of a type, independent of any value."""

    kind: Kind
    serial_name: str = ""
    nullable: bool = False
    elements: list[ElementDescriptor] = Field(default_factory=list)
    metadata: list[ConstraintMetadata] = Field(default_factory=list)
    variants: list[TypeDescriptor] = Field(default_factory=list)
    rename: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        """Accept ``"int?"`` strings and ``items``/``key``/``value``/``values`` shortcuts."""
        if isinstance(data, str):
            data = {"kind": data.rstrip("?"), "nullable": data.endswith("?")}
        if not isinstance(data, dict):
            return data
        data = dict(data)
        kind = data.get("kind")
        if not data.get("serial_name") and isinstance(kind, str) and kind not in NAMED_KINDS:
            data["serial_name"] = kind
        elements = list(data.get("elements") or [])
        if "items" in data:
            elements.append({"name": "item", "descriptor": data.pop("items")})
        if "key" in data or "value" in data:
            elements.append({"name": "key", "descriptor": data.pop("key", "string")})
            elements.append({"name": "value", "descriptor": data.pop("value", "string")})
        if "values" in data:
            prefix = data.get("serial_name", "")
            elements.extend(
                {"name": value, "descriptor": {"kind": "object", "serial_name": f"{prefix}.{value}"}}
                for value in data.pop("values")
            )
        if elements:
            data["elements"] = elements
        return data

    @model_validator(mode="after")
    def validate_shape(self) -> TypeDescriptor:
        if self.kind in NAMED_KINDS and not self.serial_name:
            raise ValueError(f"{self.kind} descriptors require a serial_name")
        if self.kind == "list" and len(self.elements) != 1:
            raise ValueError(f"{self.serial_name}: list descriptors take exactly one element")
        if self.kind == "map" and len(self.elements) != 2:
            raise ValueError(f"{self.serial_name}: map descriptors take a key and a value element")
        if self.kind == "sealed":
            if not self.variants:
                raise ValueError(f"{self.serial_name}: sealed descriptors require variants")
            for variant in self.variants:
                if variant.kind not in OBJECT_KINDS:
                    raise ValueError(
                        f"{self.serial_name}: variant {variant.serial_name} must be a class or object"
                    )
        elif self.variants:
            raise ValueError(f"{self.serial_name}: only sealed descriptors carry variants")
        if has_marker(self.metadata, Transient):
            raise ValueError(f"{self.serial_name}: transient is an element-level marker")
        return self

    @property
    def elements_count(self) -> int:
        return len(self.elements)

    def element_name(self, index: int) -> str:
        return self.elements[index].name

    def element_descriptor(self, index: int) -> TypeDescriptor:
        return self.elements[index].descriptor

    def element_metadata(self, index: int) -> list[Any]:
        return list(self.elements[index].metadata)

    def is_element_optional(self, index: int) -> bool:
        return self.elements[index].optional

    @property
    def local_name(self) -> str:
        """Last dotted segment of the serial name."""
        return self.serial_name.rsplit(".", 1)[-1]

    @property
    def discriminator_value(self) -> str:
        return self.rename or self.local_name


class NullableMode(str, Enum):
    """How a nullable node is represented."""

    TYPE_ARRAY = "type-array"
    ONE_OF = "one-of"


class SchemaConfig(BaseModel):
    """Options for synthesizing and rendering a schema document."""

    pretty_print: bool = True
    schema_uri: str = DEFAULT_SCHEMA_URI
    include_discriminator_mapping: bool = True
    nullable_mode: NullableMode = NullableMode.TYPE_ARRAY
    class_discriminator: str = Field(default="type", min_length=1)

    model_config = {"frozen": True, "extra": "forbid"}


ElementDescriptor.model_rebuild()
TypeDescriptor.model_rebuild()


def add_element(
    owner: TypeDescriptor,
    name: str,
    descriptor: TypeDescriptor,
    metadata: list[Any] | None = None,
    optional: bool = False,
) -> TypeDescriptor:
    """Append an element after construction.

    Introspection adapters use this to close self-referential types: build the
    owner first, then add the elements that point back at it. Cyclic
    descriptors synthesize fine but cannot be saved with :func:`save_descriptor`.
    """
    if owner.kind not in OBJECT_KINDS:
        raise ValueError(f"{owner.serial_name}: only class and object descriptors grow elements")
    owner.elements.append(
        ElementDescriptor(
            name=name, descriptor=descriptor, metadata=metadata or [], optional=optional
        )
    )
    return owner


def _read_document(path: Path) -> Any:
    text = path.read_text()
    if path.suffix in {".yaml", ".yml"}:
        return yaml.safe_load(text)
    return json.loads(text)


def load_descriptor(path: str | Path) -> TypeDescriptor:
    """Load a descriptor from YAML or JSON."""
    path = Path(path)
    try:
        return TypeDescriptor.model_validate(_read_document(path))
    except (ValidationError, yaml.YAMLError) as exc:
        raise ValueError(f"Invalid descriptor {path}") from exc


def save_descriptor(descriptor: TypeDescriptor, path: str | Path) -> None:
    """Persist a descriptor as YAML or JSON based on file suffix."""
    path = Path(path)
    payload = descriptor.model_dump(mode="json")
    if path.suffix in {".yaml", ".yml"}:
        path.write_text(yaml.safe_dump(payload, sort_keys=False))
    else:
        path.write_text(json.dumps(payload, indent=2))


def load_config(path: str | Path) -> SchemaConfig:
    """Load a ``SchemaConfig`` from YAML or JSON."""
    path = Path(path)
    try:
        return SchemaConfig.model_validate(_read_document(path) or {})
    except (ValidationError, yaml.YAMLError) as exc:
        raise ValueError(f"Invalid config {path}") from exc
