"""Typed views over Smithy JSON-AST shape nodes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union


class ShapeType(str, Enum):
    BLOB = "blob"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTE = "byte"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BIG_INTEGER = "bigInteger"
    BIG_DECIMAL = "bigDecimal"
    TIMESTAMP = "timestamp"
    DOCUMENT = "document"
    LIST = "list"
    SET = "set"
    MAP = "map"
    STRUCTURE = "structure"
    UNION = "union"
    SERVICE = "service"
    OPERATION = "operation"
    RESOURCE = "resource"

    @classmethod
    def lookup(cls, value: object) -> ShapeType | None:
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


SIMPLE_TYPES = frozenset(
    {
        ShapeType.BLOB,
        ShapeType.BOOLEAN,
        ShapeType.STRING,
        ShapeType.BYTE,
        ShapeType.SHORT,
        ShapeType.INTEGER,
        ShapeType.LONG,
        ShapeType.FLOAT,
        ShapeType.DOUBLE,
        ShapeType.BIG_INTEGER,
        ShapeType.BIG_DECIMAL,
        ShapeType.TIMESTAMP,
        ShapeType.DOCUMENT,
    }
)

LIFECYCLE_OPERATIONS = ("create", "put", "read", "update", "delete", "list")
_LIFECYCLE_ATTRS = {name: name for name in LIFECYCLE_OPERATIONS}
_LIFECYCLE_ATTRS["list"] = "list_"


@dataclass
class MemberShape:
    target: str
    traits: dict[str, object] = field(default_factory=dict)

    @property
    def required(self) -> bool:
        return "smithy.api#required" in self.traits or "required" in self.traits

    def to_node(self) -> dict[str, object]:
        node: dict[str, object] = {"target": self.target}
        if self.traits:
            node["traits"] = dict(self.traits)
        return node


@dataclass
class Shape:
    shape_id: str
    type: ShapeType
    traits: dict[str, object]

    def to_node(self) -> dict[str, object]:
        node: dict[str, object] = {"type": self.type.value}
        self._fill_node(node)
        if self.traits:
            node["traits"] = dict(self.traits)
        return node

    def _fill_node(self, node: dict[str, object]) -> None:
        pass


@dataclass
class SimpleShape(Shape):
    pass


@dataclass
class ListShape(Shape):
    member: MemberShape

    def _fill_node(self, node: dict[str, object]) -> None:
        node["member"] = self.member.to_node()


@dataclass
class SetShape(ListShape):
    pass


@dataclass
class MapShape(Shape):
    key: MemberShape
    value: MemberShape

    def _fill_node(self, node: dict[str, object]) -> None:
        node["key"] = self.key.to_node()
        node["value"] = self.value.to_node()


@dataclass
class StructureShape(Shape):
    members: dict[str, MemberShape] = field(default_factory=dict)
    mixins: list[str] = field(default_factory=list)

    def _fill_node(self, node: dict[str, object]) -> None:
        node["members"] = {name: member.to_node() for name, member in self.members.items()}
        if self.mixins:
            node["mixins"] = [{"target": target} for target in self.mixins]


@dataclass
class UnionShape(Shape):
    members: dict[str, MemberShape] = field(default_factory=dict)

    def _fill_node(self, node: dict[str, object]) -> None:
        node["members"] = {name: member.to_node() for name, member in self.members.items()}


@dataclass
class ServiceShape(Shape):
    version: str | None = None
    operations: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    rename: dict[str, str] = field(default_factory=dict)

    def _fill_node(self, node: dict[str, object]) -> None:
        if self.version is not None:
            node["version"] = self.version
        _put_refs(node, "operations", self.operations)
        _put_refs(node, "resources", self.resources)
        _put_refs(node, "errors", self.errors)
        if self.rename:
            node["rename"] = dict(self.rename)


@dataclass
class OperationShape(Shape):
    input: str | None = None
    output: str | None = None
    errors: list[str] = field(default_factory=list)

    def _fill_node(self, node: dict[str, object]) -> None:
        if self.input is not None:
            node["input"] = {"target": self.input}
        if self.output is not None:
            node["output"] = {"target": self.output}
        _put_refs(node, "errors", self.errors)


@dataclass
class ResourceShape(Shape):
    identifiers: dict[str, str] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    create: str | None = None
    put: str | None = None
    read: str | None = None
    update: str | None = None
    delete: str | None = None
    list_: str | None = None
    operations: list[str] = field(default_factory=list)
    collection_operations: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)

    def lifecycle(self) -> dict[str, str]:
        bound: dict[str, str] = {}
        for name in LIFECYCLE_OPERATIONS:
            target = getattr(self, _LIFECYCLE_ATTRS[name])
            if target is not None:
                bound[name] = target
        return bound

    def _fill_node(self, node: dict[str, object]) -> None:
        if self.identifiers:
            node["identifiers"] = {k: {"target": v} for k, v in self.identifiers.items()}
        if self.properties:
            node["properties"] = {k: {"target": v} for k, v in self.properties.items()}
        for name, target in self.lifecycle().items():
            node[name] = {"target": target}
        _put_refs(node, "operations", self.operations)
        _put_refs(node, "collectionOperations", self.collection_operations)
        _put_refs(node, "resources", self.resources)


AnyShape = Union[
    SimpleShape,
    ListShape,
    SetShape,
    MapShape,
    StructureShape,
    UnionShape,
    ServiceShape,
    OperationShape,
    ResourceShape,
]


def _put_refs(node: dict[str, object], field_name: str, targets: list[str]) -> None:
    if targets:
        node[field_name] = [{"target": target} for target in targets]


def reference_target(value: object) -> str | None:
    """Return the shape ID named by a JSON-AST reference.

    References appear either as bare strings or as ``{"target": "..."}``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        target = value.get("target")
        if isinstance(target, str):
            return target
    return None


def _ref_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    targets = []
    for item in value:
        target = reference_target(item)
        if target is not None:
            targets.append(target)
    return targets


def _ref_map(value: object) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    targets: dict[str, str] = {}
    for key, item in value.items():
        target = reference_target(item)
        if isinstance(key, str) and target is not None:
            targets[key] = target
    return targets


def _traits(node: Mapping[str, object]) -> dict[str, object]:
    traits = node.get("traits") or {}
    return dict(traits) if isinstance(traits, Mapping) else {}


def _member(value: object) -> MemberShape | None:
    if not isinstance(value, Mapping):
        return None
    target = value.get("target")
    if not isinstance(target, str):
        return None
    return MemberShape(target=target, traits=_traits(value))


def _members(value: object) -> dict[str, MemberShape]:
    members: dict[str, MemberShape] = {}
    if not isinstance(value, Mapping):
        return members
    for name, raw in value.items():
        if not isinstance(name, str):
            continue
        member = _member(raw)
        if member is not None:
            members[name] = member
    return members


def build_shape(shape_id: str, node: object) -> AnyShape | None:
    """Build a typed view of a JSON-AST node.

    Malformed fields are skipped; nodes that cannot be represented at all
    (unknown type, list without a member target, ...) yield ``None``. Use the
    validators to find out why.
    """
    if not isinstance(node, Mapping):
        return None
    shape_type = ShapeType.lookup(node.get("type"))
    if shape_type is None:
        return None
    traits = _traits(node)

    if shape_type in SIMPLE_TYPES:
        return SimpleShape(shape_id=shape_id, type=shape_type, traits=traits)
    if shape_type in (ShapeType.LIST, ShapeType.SET):
        member = _member(node.get("member"))
        if member is None:
            return None
        cls = SetShape if shape_type is ShapeType.SET else ListShape
        return cls(shape_id=shape_id, type=shape_type, traits=traits, member=member)
    if shape_type is ShapeType.MAP:
        key = _member(node.get("key"))
        value = _member(node.get("value"))
        if key is None or value is None:
            return None
        return MapShape(shape_id=shape_id, type=shape_type, traits=traits, key=key, value=value)
    if shape_type is ShapeType.STRUCTURE:
        return StructureShape(
            shape_id=shape_id,
            type=shape_type,
            traits=traits,
            members=_members(node.get("members")),
            mixins=_ref_list(node.get("mixins")),
        )
    if shape_type is ShapeType.UNION:
        return UnionShape(
            shape_id=shape_id,
            type=shape_type,
            traits=traits,
            members=_members(node.get("members")),
        )
    if shape_type is ShapeType.SERVICE:
        version = node.get("version")
        rename = node.get("rename")
        return ServiceShape(
            shape_id=shape_id,
            type=shape_type,
            traits=traits,
            version=version if isinstance(version, str) else None,
            operations=_ref_list(node.get("operations")),
            resources=_ref_list(node.get("resources")),
            errors=_ref_list(node.get("errors")),
            rename={
                k: v for k, v in rename.items() if isinstance(k, str) and isinstance(v, str)
            }
            if isinstance(rename, Mapping)
            else {},
        )
    if shape_type is ShapeType.OPERATION:
        return OperationShape(
            shape_id=shape_id,
            type=shape_type,
            traits=traits,
            input=reference_target(node.get("input")),
            output=reference_target(node.get("output")),
            errors=_ref_list(node.get("errors")),
        )
    lifecycle = {
        _LIFECYCLE_ATTRS[name]: reference_target(node.get(name)) for name in LIFECYCLE_OPERATIONS
    }
    return ResourceShape(
        shape_id=shape_id,
        type=shape_type,
        traits=traits,
        identifiers=_ref_map(node.get("identifiers")),
        properties=_ref_map(node.get("properties")),
        operations=_ref_list(node.get("operations")),
        collection_operations=_ref_list(node.get("collectionOperations")),
        resources=_ref_list(node.get("resources")),
        **lifecycle,
    )


_REFERENCE_LISTS = {
    ShapeType.STRUCTURE: ("mixins",),
    ShapeType.UNION: ("mixins",),
    ShapeType.SERVICE: ("operations", "resources", "errors"),
    ShapeType.OPERATION: ("errors",),
    ShapeType.RESOURCE: ("operations", "collectionOperations", "resources"),
}

_REFERENCE_FIELDS = {
    ShapeType.OPERATION: ("input", "output"),
    ShapeType.RESOURCE: LIFECYCLE_OPERATIONS,
}

_MEMBER_FIELDS = {
    ShapeType.LIST: ("member",),
    ShapeType.SET: ("member",),
    ShapeType.MAP: ("key", "value"),
}


def iter_references(node: object) -> Iterator[tuple[str, str]]:
    """Yield ``(field, target)`` for each outgoing reference of a node.

    Only direct edges are reported; targets are never resolved, so cyclic
    models are safe to walk.
    """
    if not isinstance(node, Mapping):
        return
    shape_type = ShapeType.lookup(node.get("type"))
    if shape_type is None:
        return

    for name in _MEMBER_FIELDS.get(shape_type, ()):
        member = _member(node.get(name))
        if member is not None:
            yield name, member.target

    if shape_type in (ShapeType.STRUCTURE, ShapeType.UNION):
        for name, member in _members(node.get("members")).items():
            yield f"members.{name}", member.target

    for name in _REFERENCE_FIELDS.get(shape_type, ()):
        target = reference_target(node.get(name))
        if target is not None:
            yield name, target

    for name in _REFERENCE_LISTS.get(shape_type, ()):
        for index, target in enumerate(_ref_list(node.get(name))):
            yield f"{name}[{index}]", target

    if shape_type is ShapeType.RESOURCE:
        for name in ("identifiers", "properties"):
            for key, target in _ref_map(node.get(name)).items():
                yield f"{name}.{key}", target
