"""Constraint metadata attached to descriptors and their elements.

Every optional field carries an explicit "unset" sentinel instead of ``None``:
negative values for integral bounds, +/-infinity for float bounds and NaN for a
float ``multiple_of``. ``keywords()`` on each constraint returns only the JSON
Schema keywords whose field is set, in a fixed order.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import Enum
from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, Field, field_serializer, model_validator

LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1


class StringFormat(str, Enum):
    """Formats understood by ``StringConstraints``."""

    NONE = "none"
    DATE_TIME = "date-time"
    DATE = "date"
    TIME = "time"
    DURATION = "duration"
    EMAIL = "email"
    IDN_EMAIL = "idn-email"
    HOSTNAME = "hostname"
    IDN_HOSTNAME = "idn-hostname"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    URI = "uri"
    URI_REFERENCE = "uri-reference"
    UUID = "uuid"
    REGEX = "regex"

    @property
    def json_format(self) -> str | None:
        return None if self is StringFormat.NONE else self.value


def _sentinels_for_null(data: Any, sentinels: dict[str, Any]) -> Any:
    # JSON has no NaN/Infinity, so a dumped sentinel comes back as null.
    if isinstance(data, dict):
        for key, sentinel in sentinels.items():
            if key in data and data[key] is None:
                data[key] = sentinel
    return data


class Description(BaseModel):
    """Human readable description of a type or element."""

    type: Literal["description"] = "description"
    value: str

    model_config = {"frozen": True}

    def keywords(self) -> dict[str, Any]:
        return {"description": self.value}


class StringConstraints(BaseModel):
    """Length, pattern and format limits for string elements."""

    type: Literal["string_constraints"] = "string_constraints"
    min_length: int = -1
    max_length: int = -1
    pattern: str = ""
    format: StringFormat = StringFormat.NONE

    model_config = {"frozen": True}

    def keywords(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.min_length >= 0:
            out["minLength"] = self.min_length
        if self.max_length >= 0:
            out["maxLength"] = self.max_length
        if self.pattern:
            out["pattern"] = self.pattern
        token = self.format.json_format
        if token is not None:
            out["format"] = token
        return out


class NumberConstraints(BaseModel):
    """Floating point bounds; infinities and NaN mean unset."""

    type: Literal["number_constraints"] = "number_constraints"
    minimum: float = -math.inf
    maximum: float = math.inf
    exclusive_minimum: float = -math.inf
    exclusive_maximum: float = math.inf
    multiple_of: float = math.nan

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def restore_sentinels(cls, data: Any) -> Any:
        return _sentinels_for_null(
            data,
            {
                "minimum": -math.inf,
                "maximum": math.inf,
                "exclusive_minimum": -math.inf,
                "exclusive_maximum": math.inf,
                "multiple_of": math.nan,
            },
        )

    @field_serializer(
        "minimum", "maximum", "exclusive_minimum", "exclusive_maximum", "multiple_of"
    )
    def dump_unset_as_null(self, value: float) -> float | None:
        return value if math.isfinite(value) else None

    def keywords(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.minimum != -math.inf:
            out["minimum"] = self.minimum
        if self.maximum != math.inf:
            out["maximum"] = self.maximum
        if self.exclusive_minimum != -math.inf:
            out["exclusiveMinimum"] = self.exclusive_minimum
        if self.exclusive_maximum != math.inf:
            out["exclusiveMaximum"] = self.exclusive_maximum
        if not math.isnan(self.multiple_of):
            out["multipleOf"] = self.multiple_of
        return out


class IntConstraints(BaseModel):
    """Integral bounds; the 64-bit extremes mean unset."""

    type: Literal["int_constraints"] = "int_constraints"
    minimum: int = Field(default=LONG_MIN, ge=LONG_MIN, le=LONG_MAX)
    maximum: int = Field(default=LONG_MAX, ge=LONG_MIN, le=LONG_MAX)
    exclusive_minimum: int = Field(default=LONG_MIN, ge=LONG_MIN, le=LONG_MAX)
    exclusive_maximum: int = Field(default=LONG_MAX, ge=LONG_MIN, le=LONG_MAX)
    multiple_of: int = Field(default=-1, le=LONG_MAX)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def restore_sentinels(cls, data: Any) -> Any:
        return _sentinels_for_null(
            data,
            {
                "minimum": LONG_MIN,
                "maximum": LONG_MAX,
                "exclusive_minimum": LONG_MIN,
                "exclusive_maximum": LONG_MAX,
                "multiple_of": -1,
            },
        )

    def keywords(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.minimum != LONG_MIN:
            out["minimum"] = self.minimum
        if self.maximum != LONG_MAX:
            out["maximum"] = self.maximum
        if self.exclusive_minimum != LONG_MIN:
            out["exclusiveMinimum"] = self.exclusive_minimum
        if self.exclusive_maximum != LONG_MAX:
            out["exclusiveMaximum"] = self.exclusive_maximum
        if self.multiple_of > 0:
            out["multipleOf"] = self.multiple_of
        return out


class ArrayConstraints(BaseModel):
    """Item count and uniqueness limits for list elements."""

    type: Literal["array_constraints"] = "array_constraints"
    min_items: int = -1
    max_items: int = -1
    unique_items: bool = False

    model_config = {"frozen": True}

    def keywords(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.min_items >= 0:
            out["minItems"] = self.min_items
        if self.max_items >= 0:
            out["maxItems"] = self.max_items
        if self.unique_items:
            out["uniqueItems"] = True
        return out


class ObjectConstraints(BaseModel):
    """Property count limits for classes and maps."""

    type: Literal["object_constraints"] = "object_constraints"
    min_properties: int = -1
    max_properties: int = -1

    model_config = {"frozen": True}

    def keywords(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.min_properties >= 0:
            out["minProperties"] = self.min_properties
        if self.max_properties >= 0:
            out["maxProperties"] = self.max_properties
        return out


class Flattened(BaseModel):
    """Marks a sealed union to be inlined as ``anyOf`` with constant discriminants."""

    type: Literal["flattened"] = "flattened"

    model_config = {"frozen": True}


class Transient(BaseModel):
    """Marks an element that never appears in the schema."""

    type: Literal["transient"] = "transient"

    model_config = {"frozen": True}


ConstraintMetadata = Annotated[
    Description
    | StringConstraints
    | NumberConstraints
    | IntConstraints
    | ArrayConstraints
    | ObjectConstraints
    | Flattened
    | Transient,
    Field(discriminator="type"),
]

M = TypeVar("M", bound=BaseModel)


def find_metadata(metadata: Iterable[BaseModel], kind: type[M]) -> M | None:
    """Return the first attached metadata of ``kind``, if any."""
    return next((item for item in metadata if isinstance(item, kind)), None)


def has_marker(metadata: Iterable[BaseModel], kind: type[BaseModel]) -> bool:
    return find_metadata(metadata, kind) is not None


def constraint_keywords(metadata: Iterable[BaseModel], *kinds: type[BaseModel]) -> dict[str, Any]:
    """Collect the explicitly set keywords of the first metadata of each kind, in order."""
    out: dict[str, Any] = {}
    items = list(metadata)
    for kind in kinds:
        found = find_metadata(items, kind)
        if found is not None:
            out.update(found.keywords())  # type: ignore[attr-defined]
    return out
