import math

import pytest
from pydantic import TypeAdapter

from shape_schema.metadata import (
    LONG_MAX,
    LONG_MIN,
    ArrayConstraints,
    ConstraintMetadata,
    Description,
    IntConstraints,
    NumberConstraints,
    ObjectConstraints,
    StringConstraints,
    StringFormat,
    Transient,
    constraint_keywords,
    find_metadata,
)


def test_unset_constraints_emit_nothing() -> None:
    assert StringConstraints().keywords() == {}
    assert NumberConstraints().keywords() == {}
    assert IntConstraints().keywords() == {}
    assert ArrayConstraints().keywords() == {}
    assert ObjectConstraints().keywords() == {}


def test_string_constraints_keep_field_order() -> None:
    constraints = StringConstraints(
        min_length=2, max_length=10, pattern="[a-z]+", format=StringFormat.EMAIL
    )
    assert list(constraints.keywords().items()) == [
        ("minLength", 2),
        ("maxLength", 10),
        ("pattern", "[a-z]+"),
        ("format", "email"),
    ]


def test_zero_is_not_unset() -> None:
    assert StringConstraints(min_length=0).keywords() == {"minLength": 0}
    assert ArrayConstraints(max_items=0).keywords() == {"maxItems": 0}
    assert NumberConstraints(minimum=0.0).keywords() == {"minimum": 0.0}
    assert IntConstraints(minimum=0, maximum=-1).keywords() == {"minimum": 0, "maximum": -1}


def test_integer_multiple_of_requires_positive() -> None:
    assert IntConstraints(multiple_of=0).keywords() == {}
    assert IntConstraints(multiple_of=3).keywords() == {"multipleOf": 3}


def test_integer_sentinels_are_64_bit_extremes() -> None:
    constraints = IntConstraints(minimum=LONG_MIN, maximum=LONG_MAX)
    assert constraints.keywords() == {}
    with pytest.raises(ValueError):
        IntConstraints(minimum=LONG_MIN - 1)


def test_number_constraints_full_set() -> None:
    constraints = NumberConstraints(
        minimum=0.0, maximum=10.5, exclusive_minimum=-0.5, exclusive_maximum=20.0, multiple_of=0.5
    )
    assert constraints.keywords() == {
        "minimum": 0.0,
        "maximum": 10.5,
        "exclusiveMinimum": -0.5,
        "exclusiveMaximum": 20.0,
        "multipleOf": 0.5,
    }


def test_number_sentinels_survive_json_dump() -> None:
    dumped = NumberConstraints(maximum=3.5).model_dump(mode="json")
    assert dumped["minimum"] is None
    assert dumped["multiple_of"] is None
    restored = NumberConstraints.model_validate(dumped)
    assert restored.minimum == -math.inf
    assert math.isnan(restored.multiple_of)
    assert restored.keywords() == {"maximum": 3.5}


@pytest.mark.parametrize(
    ("fmt", "token"),
    [
        (StringFormat.NONE, None),
        (StringFormat.DATE_TIME, "date-time"),
        (StringFormat.IDN_HOSTNAME, "idn-hostname"),
        (StringFormat.URI_REFERENCE, "uri-reference"),
        (StringFormat.REGEX, "regex"),
    ],
)
def test_string_format_tokens(fmt: StringFormat, token: str | None) -> None:
    assert fmt.json_format == token


def test_metadata_union_dispatches_on_type() -> None:
    adapter = TypeAdapter(list[ConstraintMetadata])
    items = adapter.validate_python(
        [
            {"type": "description", "value": "a tag"},
            {"type": "array_constraints", "min_items": 1},
            {"type": "transient"},
        ]
    )
    assert isinstance(items[0], Description)
    assert isinstance(items[1], ArrayConstraints)
    assert find_metadata(items, Transient) is not None
    assert find_metadata(items, StringConstraints) is None


def test_constraint_keywords_uses_first_of_each_kind() -> None:
    metadata = [
        StringConstraints(max_length=4),
        Description(value="first"),
        Description(value="second"),
    ]
    assert constraint_keywords(metadata, Description, StringConstraints) == {
        "description": "first",
        "maxLength": 4,
    }
