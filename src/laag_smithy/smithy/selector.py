"""Selector queries over the shape graph.

Supported syntax::

    *                          every shape
    structure                  shapes of a type
    [trait|required]           shapes carrying a trait (short or absolute ID)
    [id|namespace = example]   ID attribute comparison (=, !=, ^=, $=, *=)
    [id|name ^= Get]
    :not(<compound>)           negation
    structure [trait|error]    compound: every predicate must hold
    service > operation        direct neighbors of the previous step
    list, map                  alternatives

Matching never mutates the model. Results follow the model's shape order and
list each shape once.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from laag_smithy.smithy.shape_id import get_name, get_namespace, matches_namespace
from laag_smithy.smithy.shapes import ShapeType, iter_references
from laag_smithy.smithy.traits import has_trait

if TYPE_CHECKING:
    from laag_smithy.smithy.model import Model


class SelectorSyntaxError(ValueError):
    def __init__(self, selector: str, message: str, position: int | None = None) -> None:
        detail = f"{message} at position {position}" if position is not None else message
        super().__init__(f"Invalid selector {selector!r}: {detail}")
        self.selector = selector
        self.position = position


@dataclass
class SelectorMatch:
    shape_id: str
    shape: Mapping[str, object]


@dataclass(frozen=True)
class Wildcard:
    pass


@dataclass(frozen=True)
class TypeFilter:
    shape_type: ShapeType


@dataclass(frozen=True)
class TraitFilter:
    trait_id: str


@dataclass(frozen=True)
class AttributeFilter:
    attribute: str
    operator: str
    value: str


@dataclass(frozen=True)
class Not:
    compound: Compound


Predicate = Union[Wildcard, TypeFilter, TraitFilter, AttributeFilter, Not]


@dataclass(frozen=True)
class Compound:
    predicates: tuple[Predicate, ...]


@dataclass(frozen=True)
class Path:
    steps: tuple[Compound, ...]


@dataclass(frozen=True)
class Selector:
    text: str
    alternatives: tuple[Path, ...] = field(default_factory=tuple)


_ATTRIBUTES = ("namespace", "name")
# The operator is the first one after the attribute word; the value may contain others.
_ID_COMPARISON = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)\s*(!=|\^=|\$=|\*=|=)(.*)", re.DOTALL)
_WORD = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_COMPARATORS: dict[str, Callable[[str, str], bool]] = {
    "=": lambda actual, expected: actual == expected,
    "!=": lambda actual, expected: actual != expected,
    "^=": lambda actual, expected: actual.startswith(expected),
    "$=": lambda actual, expected: actual.endswith(expected),
    "*=": lambda actual, expected: expected in actual,
}


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, message: str) -> SelectorSyntaxError:
        return SelectorSyntaxError(self.text, message, self.pos)

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def parse(self) -> Selector:
        alternatives = [self.parse_path()]
        self.skip_ws()
        while self.peek() == ",":
            self.pos += 1
            alternatives.append(self.parse_path())
            self.skip_ws()
        if self.pos != len(self.text):
            raise self.error(f"unexpected {self.peek()!r}")
        return Selector(text=self.text, alternatives=tuple(alternatives))

    def parse_path(self) -> Path:
        steps = [self.parse_compound()]
        self.skip_ws()
        while self.peek() == ">":
            self.pos += 1
            steps.append(self.parse_compound())
            self.skip_ws()
        return Path(steps=tuple(steps))

    def parse_compound(self) -> Compound:
        predicates: list[Predicate] = []
        while True:
            self.skip_ws()
            char = self.peek()
            if char in ("", ",", ">", ")"):
                break
            predicates.append(self.parse_predicate())
        if not predicates:
            raise self.error("expected a selector")
        return Compound(predicates=tuple(predicates))

    def parse_predicate(self) -> Predicate:
        char = self.peek()
        if char == "*":
            self.pos += 1
            return Wildcard()
        if char == "[":
            return self.parse_attribute()
        if self.text.startswith(":not(", self.pos):
            self.pos += len(":not(")
            compound = self.parse_compound()
            self.skip_ws()
            if self.peek() != ")":
                raise self.error("expected ')'")
            self.pos += 1
            return Not(compound=compound)
        match = _WORD.match(self.text, self.pos)
        if match is None:
            raise self.error(f"unexpected {char!r}")
        shape_type = ShapeType.lookup(match.group())
        if shape_type is None:
            raise self.error(f"unknown shape type {match.group()!r}")
        self.pos = match.end()
        return TypeFilter(shape_type=shape_type)

    def parse_attribute(self) -> Predicate:
        end = self.text.find("]", self.pos)
        if end == -1:
            raise self.error("unterminated '['")
        body = self.text[self.pos + 1 : end].strip()
        start = self.pos
        self.pos = end + 1

        if body.startswith("trait|"):
            trait_id = body[len("trait|") :].strip()
            if not trait_id:
                raise SelectorSyntaxError(self.text, "empty trait ID", start)
            return TraitFilter(trait_id=trait_id)

        if body.startswith("id|"):
            match = _ID_COMPARISON.fullmatch(body[len("id|") :])
            if match is None:
                raise SelectorSyntaxError(self.text, "expected a comparison operator", start)
            attribute, operator, value = match.groups()
            value = value.strip().strip("'\"")
            if attribute not in _ATTRIBUTES:
                raise SelectorSyntaxError(self.text, f"unknown id attribute {attribute!r}", start)
            if not value:
                raise SelectorSyntaxError(self.text, "empty comparison value", start)
            return AttributeFilter(attribute=attribute, operator=operator, value=value)

        raise SelectorSyntaxError(self.text, f"unsupported attribute selector [{body}]", start)


def parse_selector(selector: str) -> Selector:
    """Parse selector text, raising ``SelectorSyntaxError`` when invalid."""
    if not isinstance(selector, str) or not selector.strip():
        raise SelectorSyntaxError(str(selector), "selector is empty")
    return _Parser(selector).parse()


def is_valid_selector(selector: str) -> bool:
    try:
        parse_selector(selector)
    except SelectorSyntaxError:
        return False
    return True


def _matches_predicate(predicate: Predicate, shape_id: str, node: Mapping[str, object]) -> bool:
    if isinstance(predicate, Wildcard):
        return True
    if isinstance(predicate, TypeFilter):
        return node.get("type") == predicate.shape_type.value
    if isinstance(predicate, TraitFilter):
        return has_trait(node.get("traits"), predicate.trait_id)
    if isinstance(predicate, AttributeFilter):
        if predicate.attribute == "namespace":
            actual = get_namespace(shape_id)
        else:
            actual = get_name(shape_id)
        if actual is None:
            return predicate.operator == "!="
        return _COMPARATORS[predicate.operator](actual, predicate.value)
    return not _matches_compound(predicate.compound, shape_id, node)


def _matches_compound(compound: Compound, shape_id: str, node: Mapping[str, object]) -> bool:
    return all(_matches_predicate(p, shape_id, node) for p in compound.predicates)


def _nodes(model: Model) -> dict[str, Mapping[str, object]]:
    shapes = model.shapes if isinstance(model.shapes, Mapping) else {}
    return {shape_id: node for shape_id, node in shapes.items() if isinstance(node, Mapping)}


def _evaluate_path(path: Path, nodes: dict[str, Mapping[str, object]]) -> set[str]:
    first, *rest = path.steps
    current = {
        shape_id for shape_id, node in nodes.items() if _matches_compound(first, shape_id, node)
    }
    for step in rest:
        neighbors = {
            target
            for shape_id in current
            for _, target in iter_references(nodes[shape_id])
            if target in nodes
        }
        current = {
            shape_id for shape_id in neighbors if _matches_compound(step, shape_id, nodes[shape_id])
        }
    return current


def select(model: Model, selector: str | Selector) -> list[SelectorMatch]:
    """Select the shapes of ``model`` matching ``selector``."""
    parsed = parse_selector(selector) if isinstance(selector, str) else selector
    nodes = _nodes(model)
    matched: set[str] = set()
    for path in parsed.alternatives:
        matched |= _evaluate_path(path, nodes)
    return [
        SelectorMatch(shape_id=shape_id, shape=node)
        for shape_id, node in nodes.items()
        if shape_id in matched
    ]


def select_by_type(model: Model, shape_type: ShapeType | str) -> list[SelectorMatch]:
    wanted = ShapeType.lookup(shape_type)
    if wanted is None:
        return []
    return select(model, wanted.value)


def select_by_trait(model: Model, trait_id: str) -> list[SelectorMatch]:
    return SelectorQuery(model).trait(trait_id).execute()


def select_by_namespace(model: Model, namespace: str) -> list[SelectorMatch]:
    return SelectorQuery(model).namespace(namespace).execute()


class SelectorQuery:
    """Fluent filter chain over a model's shapes.

    Each call narrows the current matches; ``execute`` returns them.
    """

    def __init__(self, model: Model) -> None:
        self._matches = [
            SelectorMatch(shape_id=shape_id, shape=node) for shape_id, node in _nodes(model).items()
        ]

    def type(self, shape_type: ShapeType | str) -> SelectorQuery:
        wanted = ShapeType.lookup(shape_type)
        self._matches = [
            m for m in self._matches if wanted is not None and m.shape.get("type") == wanted.value
        ]
        return self

    def trait(self, trait_id: str) -> SelectorQuery:
        self._matches = [m for m in self._matches if has_trait(m.shape.get("traits"), trait_id)]
        return self

    def namespace(self, namespace: str) -> SelectorQuery:
        self._matches = [m for m in self._matches if matches_namespace(m.shape_id, namespace)]
        return self

    def filter(self, predicate: Callable[[SelectorMatch], bool]) -> SelectorQuery:
        self._matches = [m for m in self._matches if predicate(m)]
        return self

    def execute(self) -> list[SelectorMatch]:
        return list(self._matches)

    def shape_ids(self) -> list[str]:
        return [m.shape_id for m in self._matches]

    def shapes(self) -> list[Mapping[str, object]]:
        return [m.shape for m in self._matches]

    def count(self) -> int:
        return len(self._matches)

    def first(self) -> SelectorMatch | None:
        return self._matches[0] if self._matches else None
