from __future__ import annotations

from laag_smithy.smithy.shapes import (
    ListShape,
    MapShape,
    MemberShape,
    OperationShape,
    ResourceShape,
    ServiceShape,
    SetShape,
    ShapeType,
    SimpleShape,
    StructureShape,
    build_shape,
    iter_references,
    reference_target,
)
from laag_smithy.smithy.traits import get_trait


def test_shape_type_lookup() -> None:
    assert ShapeType.lookup("bigDecimal") is ShapeType.BIG_DECIMAL
    assert ShapeType.lookup("unknown") is None
    assert ShapeType.lookup(None) is None
    assert len(ShapeType) == 21


def test_reference_target_accepts_both_forms() -> None:
    assert reference_target("a#B") == "a#B"
    assert reference_target({"target": "a#B"}) == "a#B"
    assert reference_target({"target": 1}) is None
    assert reference_target(3) is None


def test_build_simple_shape() -> None:
    shape = build_shape("a#Text", {"type": "string", "traits": {"smithy.api#length": {}}})

    assert isinstance(shape, SimpleShape)
    assert shape.type is ShapeType.STRING
    assert shape.traits == {"smithy.api#length": {}}


def test_build_collection_shapes() -> None:
    list_shape = build_shape("a#L", {"type": "list", "member": {"target": "a#T"}})
    set_shape = build_shape("a#S", {"type": "set", "member": {"target": "a#T"}})
    map_shape = build_shape(
        "a#M", {"type": "map", "key": {"target": "a#K"}, "value": {"target": "a#V"}}
    )

    assert isinstance(list_shape, ListShape)
    assert list_shape.member.target == "a#T"
    assert isinstance(set_shape, SetShape)
    assert isinstance(map_shape, MapShape)
    assert (map_shape.key.target, map_shape.value.target) == ("a#K", "a#V")


def test_build_returns_none_for_unrepresentable_nodes() -> None:
    assert build_shape("a#X", {"type": "list"}) is None
    assert build_shape("a#X", {"type": "nope"}) is None
    assert build_shape("a#X", ["not", "a", "node"]) is None


def test_build_structure_skips_malformed_members() -> None:
    shape = build_shape(
        "a#S",
        {
            "type": "structure",
            "members": {
                "ok": {"target": "a#T", "traits": {"smithy.api#required": {}}},
                "broken": {"target": 5},
            },
            "mixins": [{"target": "a#Base"}],
        },
    )

    assert isinstance(shape, StructureShape)
    assert list(shape.members) == ["ok"]
    assert shape.members["ok"].required
    assert shape.mixins == ["a#Base"]


def test_build_service_and_operation(weather_document) -> None:
    shapes = weather_document["shapes"]
    service = build_shape("example.weather#Weather", shapes["example.weather#Weather"])
    operation = build_shape("example.weather#GetCity", shapes["example.weather#GetCity"])

    assert isinstance(service, ServiceShape)
    assert service.version == "2006-03-01"
    assert service.operations == ["example.weather#GetCurrentTime"]
    assert isinstance(operation, OperationShape)
    assert operation.input == "example.weather#GetCityInput"
    assert operation.errors == ["example.weather#NoSuchResource"]


def test_build_resource_lifecycle(weather_document) -> None:
    resource = build_shape(
        "example.weather#City", weather_document["shapes"]["example.weather#City"]
    )

    assert isinstance(resource, ResourceShape)
    assert resource.list_ == "example.weather#ListCities"
    assert resource.lifecycle() == {
        "read": "example.weather#GetCity",
        "list": "example.weather#ListCities",
    }
    assert resource.identifiers == {"cityId": "example.weather#CityId"}


def test_to_node_writes_json_ast_form() -> None:
    shape = StructureShape(
        shape_id="a#S",
        type=ShapeType.STRUCTURE,
        traits={"smithy.api#documentation": "Doc"},
        members={"name": MemberShape(target="a#T")},
        mixins=["a#Base"],
    )

    assert shape.to_node() == {
        "type": "structure",
        "members": {"name": {"target": "a#T"}},
        "mixins": [{"target": "a#Base"}],
        "traits": {"smithy.api#documentation": "Doc"},
    }


def test_resource_to_node_uses_list_key() -> None:
    resource = ResourceShape(
        shape_id="a#R", type=ShapeType.RESOURCE, traits={}, list_="a#ListR"
    )

    assert resource.to_node() == {"type": "resource", "list": {"target": "a#ListR"}}


def test_iter_references_reports_field_paths(weather_document) -> None:
    shapes = weather_document["shapes"]

    assert list(iter_references(shapes["example.weather#City"])) == [
        ("read", "example.weather#GetCity"),
        ("list", "example.weather#ListCities"),
        ("resources[0]", "example.weather#Forecast"),
        ("identifiers.cityId", "example.weather#CityId"),
    ]
    assert list(iter_references(shapes["example.weather#Tags"])) == [
        ("key", "example.weather#Text"),
        ("value", "example.weather#Text"),
    ]
    assert list(iter_references(shapes["example.weather#Text"])) == []


def test_operation_documentation_resolves_through_trait_lookup() -> None:
    shape = build_shape(
        "a#GetThing", {"type": "operation", "traits": {"documentation": "Gets a thing."}}
    )

    assert isinstance(shape, OperationShape)
    assert get_trait(shape.traits, "smithy.api#documentation") == "Gets a thing."
    assert not hasattr(shape, "documentation")
