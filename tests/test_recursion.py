from shape_schema.api import build_schema_document, encode_to_schema
from shape_schema.dsl import ElementDescriptor, NullableMode, SchemaConfig, TypeDescriptor, add_element


def tree_node() -> TypeDescriptor:
    node = TypeDescriptor(
        kind="class",
        serial_name="app.Node",
        elements=[{"name": "value", "descriptor": "int"}],
    )
    children = TypeDescriptor(
        kind="list",
        serial_name="list",
        elements=[ElementDescriptor(name="item", descriptor=node)],
    )
    return add_element(node, "children", children)


def expression() -> TypeDescriptor:
    literal = TypeDescriptor(
        kind="class",
        serial_name="calc.Expr.Lit",
        rename="lit",
        elements=[{"name": "value", "descriptor": "int"}],
    )
    addition = TypeDescriptor(kind="class", serial_name="calc.Expr.Add", rename="add")
    expr = TypeDescriptor(kind="sealed", serial_name="calc.Expr", variants=[literal, addition])
    add_element(addition, "left", expr)
    add_element(addition, "right", expr)
    return expr


def test_self_referencing_class_becomes_a_definition() -> None:
    document = build_schema_document(tree_node())
    assert document == {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$ref": "#/$defs/Node",
        "$defs": {
            "Node": {
                "type": "object",
                "properties": {
                    "value": {"type": "integer"},
                    "children": {"type": "array", "items": {"$ref": "#/$defs/Node"}},
                },
                "required": ["value", "children"],
            }
        },
    }


def test_nullable_self_reference_wraps_ref() -> None:
    node = TypeDescriptor(kind="class", serial_name="app.Link")
    parent = TypeDescriptor(kind="class", serial_name="app.Link", nullable=True)
    add_element(node, "name", TypeDescriptor(kind="string"))
    add_element(node, "parent", parent, optional=True)

    document = build_schema_document(node, SchemaConfig(nullable_mode=NullableMode.TYPE_ARRAY))
    link = document["$defs"]["Link"]
    assert link["properties"]["parent"] == {"oneOf": [{"$ref": "#/$defs/Link"}, {"type": "null"}]}
    assert link["required"] == ["name"]
    assert document["$ref"] == "#/$defs/Link"


def test_recursive_sealed_union() -> None:
    document = build_schema_document(expression())
    assert document["$ref"] == "#/$defs/Expr"
    defs = document["$defs"]
    assert list(defs) == ["Lit", "Expr", "Add"]
    assert defs["Expr"]["oneOf"] == [{"$ref": "#/$defs/Lit"}, {"$ref": "#/$defs/Add"}]
    assert defs["Expr"]["discriminator"]["mapping"] == {
        "lit": "#/$defs/Lit",
        "add": "#/$defs/Add",
    }
    assert defs["Add"]["properties"] == {
        "left": {"$ref": "#/$defs/Expr"},
        "right": {"$ref": "#/$defs/Expr"},
    }


def test_recursive_output_is_deterministic() -> None:
    assert encode_to_schema(expression()) == encode_to_schema(expression())


def test_nested_distinct_classes_are_inlined() -> None:
    outer = TypeDescriptor.model_validate(
        {
            "kind": "class",
            "serial_name": "app.Outer",
            "elements": [
                {
                    "name": "inner",
                    "descriptor": {
                        "kind": "class",
                        "serial_name": "app.Inner",
                        "elements": [{"name": "x", "descriptor": "int"}],
                    },
                }
            ],
        }
    )
    document = build_schema_document(outer)
    assert "$defs" not in document
    assert document["properties"]["inner"] == {
        "type": "object",
        "properties": {"x": {"type": "integer"}},
        "required": ["x"],
    }


def test_variant_reached_through_second_union_shares_definition() -> None:
    ping = TypeDescriptor(kind="class", serial_name="app.Ping")
    pong = TypeDescriptor(
        kind="class", serial_name="app.Pong", elements=[{"name": "seq", "descriptor": "int"}]
    )
    reply = TypeDescriptor(kind="sealed", serial_name="app.Reply", variants=[ping, pong])
    add_element(ping, "reply", reply)
    message = TypeDescriptor(kind="sealed", serial_name="app.Message", variants=[ping])

    document = build_schema_document(message)
    defs = document["$defs"]
    assert list(defs) == ["Ping", "Pong"]
    assert document["oneOf"] == [{"$ref": "#/$defs/Ping"}]
    assert defs["Ping"]["properties"]["reply"]["oneOf"] == [
        {"$ref": "#/$defs/Ping"},
        {"$ref": "#/$defs/Pong"},
    ]
