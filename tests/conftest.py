import pytest

from shape_schema.dsl import TypeDescriptor


@pytest.fixture()
def simple_record() -> TypeDescriptor:
    return TypeDescriptor(
        kind="class",
        serial_name="app.SimpleRecord",
        elements=[
            {"name": "a", "descriptor": "string"},
            {"name": "b", "descriptor": "int"},
        ],
    )


@pytest.fixture()
def operation_union() -> TypeDescriptor:
    return TypeDescriptor.model_validate(
        {
            "kind": "sealed",
            "serial_name": "app.Operation",
            "variants": [
                {
                    "kind": "class",
                    "serial_name": "app.Operation.CreateOperation",
                    "rename": "create",
                    "elements": [
                        {"name": "type", "descriptor": "string", "optional": True},
                        {"name": "payload", "descriptor": "string"},
                    ],
                },
                {
                    "kind": "class",
                    "serial_name": "app.Operation.DeleteOperation",
                    "rename": "delete",
                    "elements": [
                        {"name": "type", "descriptor": "string", "optional": True},
                        {"name": "id", "descriptor": "int"},
                    ],
                },
            ],
        }
    )


@pytest.fixture()
def shape_union() -> TypeDescriptor:
    return TypeDescriptor.model_validate(
        {
            "kind": "sealed",
            "serial_name": "geo.Shape",
            "metadata": [{"type": "flattened"}],
            "variants": [
                {
                    "kind": "class",
                    "serial_name": "geo.Shape.Circle",
                    "rename": "circle",
                    "elements": [
                        {"name": "type", "descriptor": "string"},
                        {"name": "radius", "descriptor": "double"},
                    ],
                },
                {
                    "kind": "class",
                    "serial_name": "geo.Shape.Square",
                    "elements": [
                        {"name": "side", "descriptor": "double"},
                        {"name": "label", "descriptor": "string?", "optional": True},
                    ],
                },
            ],
        }
    )
