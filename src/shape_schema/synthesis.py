"""Recursive JSON Schema synthesis over type descriptors."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .dsl import FLOAT_KINDS, INTEGER_KINDS, OBJECT_KINDS, SchemaConfig, TypeDescriptor
from .errors import UnsupportedTypeError
from .metadata import (
    ArrayConstraints,
    Description,
    Flattened,
    IntConstraints,
    NumberConstraints,
    ObjectConstraints,
    StringConstraints,
    constraint_keywords,
    has_marker,
)
from .nullable import project_nullable
from .registry import DefinitionRegistry, definition_ref

logger = logging.getLogger(__name__)

Schema = dict[str, Any]


@dataclass
class SynthesisContext:
    """State threaded through one synthesis call."""

    registry: DefinitionRegistry = field(default_factory=DefinitionRegistry)
    in_progress: set[str] = field(default_factory=set)
    """Serial names of class, object and sealed descriptors currently being built."""

    recursive: dict[str, str] = field(default_factory=dict)
    """Serial name -> definition name reserved for a type that refers to itself."""

    def reference(self, descriptor: TypeDescriptor) -> Schema:
        name = self.recursive.get(descriptor.serial_name)
        if name is None:
            name = self.registry.reserve(descriptor.local_name)
            self.recursive[descriptor.serial_name] = name
            logger.debug("recursive reference to %s stored as %s", descriptor.serial_name, name)
        return {"$ref": definition_ref(name)}


class SchemaSynthesizer:
    """Walk a descriptor tree and build its JSON Schema node plus ``$defs``."""

    def __init__(self, config: SchemaConfig | None = None) -> None:
        self.config = config or SchemaConfig()

    def synthesize(self, descriptor: TypeDescriptor) -> tuple[Schema, DefinitionRegistry]:
        context = SynthesisContext()
        root = self.generate(descriptor, (), context)
        return root, context.registry

    def generate(
        self,
        descriptor: TypeDescriptor,
        metadata: Sequence[Any],
        context: SynthesisContext,
    ) -> Schema:
        kind = descriptor.kind
        schema: Schema
        if kind == "string":
            schema = {"type": "string"}
            schema.update(constraint_keywords(metadata, Description, StringConstraints))
        elif kind == "char":
            schema = {"type": "string", "minLength": 1, "maxLength": 1}
        elif kind == "boolean":
            schema = {"type": "boolean"}
        elif kind in INTEGER_KINDS:
            schema = {"type": "integer"}
            schema.update(constraint_keywords(metadata, Description, IntConstraints))
        elif kind in FLOAT_KINDS:
            schema = {"type": "number"}
            schema.update(constraint_keywords(metadata, Description, NumberConstraints))
        elif kind == "list":
            schema = self._array_schema(descriptor, metadata, context)
        elif kind == "map":
            schema = self._map_schema(descriptor, metadata, context)
        elif kind in OBJECT_KINDS:
            schema = self._guarded(descriptor, context, self._class_schema)
        elif kind == "enum":
            schema = {"type": "string", "enum": [element.name for element in descriptor.elements]}
        elif kind == "sealed":
            schema = self._guarded(descriptor, context, self._sealed_schema)
        elif kind == "open":
            schema = {"anyOf": []}
        else:
            raise UnsupportedTypeError(descriptor.serial_name, kind)
        return project_nullable(schema, descriptor.nullable, self.config.nullable_mode)

    def _guarded(
        self,
        descriptor: TypeDescriptor,
        context: SynthesisContext,
        build: Callable[[TypeDescriptor, SynthesisContext], Schema],
    ) -> Schema:
        key = descriptor.serial_name
        if key in context.in_progress:
            return context.reference(descriptor)
        context.in_progress.add(key)
        try:
            schema = build(descriptor, context)
        finally:
            context.in_progress.discard(key)
        name = context.recursive.get(key)
        if name is None:
            return schema
        context.registry.define(name, schema)
        return {"$ref": definition_ref(name)}

    def _array_schema(
        self, descriptor: TypeDescriptor, metadata: Sequence[Any], context: SynthesisContext
    ) -> Schema:
        schema: Schema = {
            "type": "array",
            "items": self.generate(descriptor.element_descriptor(0), (), context),
        }
        schema.update(constraint_keywords(metadata, ArrayConstraints))
        return schema

    def _map_schema(
        self, descriptor: TypeDescriptor, metadata: Sequence[Any], context: SynthesisContext
    ) -> Schema:
        schema: Schema = {"type": "object"}
        if descriptor.element_descriptor(0).kind != "string":
            # Non-string keys cannot be expressed as property names.
            schema["additionalProperties"] = True
        else:
            schema["additionalProperties"] = self.generate(
                descriptor.element_descriptor(1), (), context
            )
        schema.update(constraint_keywords(metadata, ObjectConstraints))
        return schema

    def _class_schema(self, descriptor: TypeDescriptor, context: SynthesisContext) -> Schema:
        schema: Schema = {"type": "object"}
        schema.update(constraint_keywords(descriptor.metadata, Description, ObjectConstraints))

        properties: Schema = {}
        required: list[str] = []
        for element in descriptor.elements:
            if element.transient:
                continue
            properties[element.name] = self.generate(element.descriptor, element.metadata, context)
            if not element.optional:
                required.append(element.name)

        if properties:
            schema["properties"] = properties
        if required:
            schema["required"] = required
        return schema

    def _variant_schema(self, variant: TypeDescriptor, context: SynthesisContext) -> Schema:
        key = variant.serial_name
        if key in context.in_progress:
            return context.reference(variant)
        context.in_progress.add(key)
        try:
            return self._class_schema(variant, context)
        finally:
            context.in_progress.discard(key)

    def _discriminator_property(self, variants: Sequence[TypeDescriptor]) -> str:
        """Return the configured class discriminator.

        Variants are only checked for a conflicting declaration: the serializer
        writes the discriminator itself, so a variant that lacks the property is
        fine, but one that declares it with a non-string kind is not.
        """
        candidate = self.config.class_discriminator
        for variant in variants:
            for element in variant.elements:
                if element.name == candidate and element.descriptor.kind != "string":
                    logger.warning(
                        "variant %s declares discriminator %r with kind %s",
                        variant.serial_name,
                        candidate,
                        element.descriptor.kind,
                    )
        return candidate

    def _sealed_schema(self, descriptor: TypeDescriptor, context: SynthesisContext) -> Schema:
        variants = descriptor.variants
        discriminator = self._discriminator_property(variants)
        references: list[Schema] = []
        mapping: dict[str, str] = {}

        for variant in variants:
            reentered = variant.serial_name in context.in_progress
            variant_schema = self._variant_schema(variant, context)
            name = context.recursive.get(variant.serial_name)
            if name is None:
                name = context.registry.register(variant.local_name, variant_schema)
            elif not reentered:
                # The outer occurrence fills the definition.
                context.registry.define(name, variant_schema)
            mapping[variant.discriminator_value] = definition_ref(name)
            references.append({"$ref": definition_ref(name)})

        if has_marker(descriptor.metadata, Flattened):
            return {
                "anyOf": [
                    self._flattened_variant(variant, discriminator, context) for variant in variants
                ]
            }

        discriminator_node: Schema = {"propertyName": discriminator}
        if self.config.include_discriminator_mapping:
            discriminator_node["mapping"] = mapping
        return {"oneOf": references, "discriminator": discriminator_node}

    def _flattened_variant(
        self, variant: TypeDescriptor, discriminator: str, context: SynthesisContext
    ) -> Schema:
        variant_schema = self._variant_schema(variant, context)
        tag: Schema = {discriminator: {"const": variant.discriminator_value}}
        if "$ref" in variant_schema:
            return {"allOf": [variant_schema, {"properties": tag, "required": [discriminator]}]}
        properties: Schema = dict(tag)
        for name, value in variant_schema.get("properties", {}).items():
            if name != discriminator:
                properties[name] = value
        required = [discriminator]
        required.extend(name for name in variant_schema.get("required", []) if name != discriminator)
        return {"type": "object", "properties": properties, "required": required}
