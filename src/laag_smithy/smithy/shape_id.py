"""Shape ID parsing, validation and comparison.

Shape IDs address shapes and members in a model:

- absolute: ``namespace#Name`` (e.g. ``smithy.api#String``)
- member: ``namespace#Name$member``
- relative: ``Name`` (only meaningful inside a known namespace)

The identifier grammar is an ASCII approximation of Smithy's: an identifier
starts with a letter or underscore and continues with letters, digits or
underscores; a namespace is one or more identifiers joined by dots.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class InvalidShapeIdError(ValueError):
    def __init__(self, text: object, reason: str) -> None:
        super().__init__(f"Invalid shape ID {text!r}: {reason}")
        self.text = text
        self.reason = reason


def is_valid_identifier(value: str) -> bool:
    return bool(value) and _IDENTIFIER.fullmatch(value) is not None


def is_valid_namespace(value: str) -> bool:
    if not value:
        return False
    return all(is_valid_identifier(segment) for segment in value.split("."))


@total_ordering
@dataclass(frozen=True)
class ShapeId:
    namespace: str | None
    name: str
    member: str | None = None

    def __post_init__(self) -> None:
        if self.namespace is not None and not is_valid_namespace(self.namespace):
            raise InvalidShapeIdError(str(self), f"invalid namespace {self.namespace!r}")
        if not is_valid_identifier(self.name):
            raise InvalidShapeIdError(str(self), f"invalid name {self.name!r}")
        if self.member is not None and not is_valid_identifier(self.member):
            raise InvalidShapeIdError(str(self), f"invalid member {self.member!r}")

    @classmethod
    def parse(cls, text: str) -> ShapeId:
        if not isinstance(text, str) or not text:
            raise InvalidShapeIdError(text, "shape ID must be a non-empty string")
        if text.count("#") > 1:
            raise InvalidShapeIdError(text, "at most one '#' is allowed")
        if text.count("$") > 1:
            raise InvalidShapeIdError(text, "at most one '$' is allowed")

        namespace: str | None = None
        rest = text
        if "#" in text:
            namespace, rest = text.split("#", 1)
            if not namespace:
                raise InvalidShapeIdError(text, "namespace is empty")
            if "$" in namespace:
                raise InvalidShapeIdError(text, "'$' must follow the shape name")

        member: str | None = None
        name = rest
        if "$" in rest:
            name, member = rest.split("$", 1)
            if not member:
                raise InvalidShapeIdError(text, "member name is empty")
        if not name:
            raise InvalidShapeIdError(text, "shape name is empty")
        return cls(namespace=namespace, name=name, member=member)

    @classmethod
    def from_parts(cls, namespace: str | None, name: str, member: str | None = None) -> ShapeId:
        return cls(namespace=namespace, name=name, member=member)

    @property
    def is_absolute(self) -> bool:
        return self.namespace is not None

    @property
    def is_relative(self) -> bool:
        return self.namespace is None

    @property
    def is_member(self) -> bool:
        return self.member is not None

    def with_member(self, member: str) -> ShapeId:
        return ShapeId(namespace=self.namespace, name=self.name, member=member)

    def without_member(self) -> ShapeId:
        return ShapeId(namespace=self.namespace, name=self.name)

    def to_absolute(self, default_namespace: str) -> ShapeId:
        if self.is_absolute:
            return self
        return ShapeId(namespace=default_namespace, name=self.name, member=self.member)

    def __str__(self) -> str:
        text = self.name if self.namespace is None else f"{self.namespace}#{self.name}"
        if self.member is not None:
            text = f"{text}${self.member}"
        return text

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ShapeId):
            return NotImplemented
        return str(self) < str(other)


def _split(shape_id: str) -> tuple[str | None, str]:
    if "#" not in shape_id:
        return None, shape_id
    namespace, name = shape_id.split("#", 1)
    return namespace or None, name


def is_valid_shape_id(shape_id: object) -> bool:
    if not isinstance(shape_id, str):
        return False
    try:
        ShapeId.parse(shape_id)
    except InvalidShapeIdError:
        return False
    return True


def is_absolute_shape_id(shape_id: str) -> bool:
    return "#" in shape_id


def is_relative_shape_id(shape_id: str) -> bool:
    return "#" not in shape_id


def get_namespace(shape_id: str) -> str | None:
    return _split(shape_id)[0]


def get_name(shape_id: str) -> str:
    return _split(shape_id)[1]


def create_shape_id(namespace: str, name: str) -> str:
    return f"{namespace}#{name}"


def to_absolute_shape_id(shape_id: str, default_namespace: str) -> str:
    if is_absolute_shape_id(shape_id):
        return shape_id
    return create_shape_id(default_namespace, shape_id)


def equals_shape_id_with_namespace(a: str, b: str, default_namespace: str) -> bool:
    return to_absolute_shape_id(a, default_namespace) == to_absolute_shape_id(
        b, default_namespace
    )


def matches_namespace(shape_id: str, namespace: str) -> bool:
    return get_namespace(shape_id) == namespace


def extract_namespaces(shape_ids: Iterable[str]) -> list[str]:
    namespaces: dict[str, None] = {}
    for shape_id in shape_ids:
        namespace = get_namespace(shape_id)
        if namespace is not None:
            namespaces.setdefault(namespace, None)
    return list(namespaces)


def filter_by_namespace(shape_ids: Iterable[str], namespace: str) -> list[str]:
    return [shape_id for shape_id in shape_ids if matches_namespace(shape_id, namespace)]


def sort_shape_ids(shape_ids: Iterable[str]) -> list[str]:
    """Sort relative IDs first, then absolute IDs by namespace and name."""

    def sort_key(shape_id: str) -> tuple[int, str, str]:
        namespace, name = _split(shape_id)
        if namespace is None:
            return (0, "", name)
        return (1, namespace, name)

    return sorted(shape_ids, key=sort_key)
