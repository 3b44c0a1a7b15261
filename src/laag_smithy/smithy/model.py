"""The Smithy model aggregate."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass

from laag_smithy.config import load_settings
from laag_smithy.errors import ValidationError, ValidationResult
from laag_smithy.smithy.shapes import AnyShape, MemberShape, Shape, ShapeType, build_shape
from laag_smithy.smithy.selector import SelectorMatch, select
from laag_smithy.smithy.traits import get_trait, has_trait
from laag_smithy.validators import ModelValidator, ShapeValidator, TraitValidator
from laag_smithy.validators.model_validator import UNDEFINED

logger = logging.getLogger(__name__)

ShapeNode = MutableMapping[str, object]


@dataclass
class Model:
    """A Smithy model: version, optional metadata and the shape map.

    ``shapes`` maps shape-ID strings to JSON-AST nodes. The model owns its
    nodes; references between shapes are plain shape-ID strings, so cycles
    are ordinary data. Mutations are not validated until ``validate()`` runs.
    """

    version: object
    shapes: MutableMapping[str, object]
    metadata: object = UNDEFINED

    @classmethod
    def from_dict(cls, document: Mapping[str, object]) -> Model:
        return cls(
            version=document.get("smithy"),
            shapes=document.get("shapes", UNDEFINED),
            metadata=document.get("metadata", UNDEFINED),
        )

    def _shape_map(self) -> Mapping[str, object]:
        # Malformed models still support validate(); accessors see no shapes.
        return self.shapes if isinstance(self.shapes, Mapping) else {}

    def get_node(self, shape_id: str) -> ShapeNode | None:
        node = self._shape_map().get(shape_id)
        return node if isinstance(node, MutableMapping) else None

    def get_shape(self, shape_id: str) -> AnyShape | None:
        return build_shape(shape_id, self._shape_map().get(shape_id))

    def has_shape(self, shape_id: str) -> bool:
        return shape_id in self._shape_map()

    def shape_ids(self) -> list[str]:
        return list(self._shape_map())

    def shapes_by_type(self, shape_type: ShapeType | str) -> list[AnyShape]:
        wanted = ShapeType.lookup(shape_type)
        if wanted is None:
            return []
        matches = []
        for shape_id in self._shape_map():
            shape = self.get_shape(shape_id)
            if shape is not None and shape.type is wanted:
                matches.append(shape)
        return matches

    def add_shape(self, shape_id: str, shape: Shape | Mapping[str, object]) -> None:
        node = shape.to_node() if isinstance(shape, Shape) else shape
        self.shapes[shape_id] = node
        logger.debug("Added shape %s", shape_id)

    def remove_shape(self, shape_id: str) -> bool:
        if shape_id not in self._shape_map():
            return False
        del self.shapes[shape_id]
        return True

    def get_members(self, shape_id: str) -> dict[str, MemberShape] | None:
        """Members of a structure or union; ``None`` for any other shape."""
        shape = self.get_shape(shape_id)
        if shape is None or shape.type not in (ShapeType.STRUCTURE, ShapeType.UNION):
            return None
        return dict(shape.members)

    def get_traits(self, shape_id: str) -> dict[str, object] | None:
        node = self.get_node(shape_id)
        if node is None:
            return None
        traits = node.get("traits")
        return dict(traits) if isinstance(traits, Mapping) else {}

    def get_trait(self, shape_id: str, trait_id: str) -> object:
        node = self.get_node(shape_id)
        if node is None:
            return None
        return get_trait(node.get("traits"), trait_id)

    def has_trait(self, shape_id: str, trait_id: str) -> bool:
        node = self.get_node(shape_id)
        if node is None:
            return False
        return has_trait(node.get("traits"), trait_id)

    def add_trait(self, shape_id: str, trait_id: str, value: object = None) -> None:
        node = self.get_node(shape_id)
        if node is None:
            raise KeyError(f"Shape not found: {shape_id}")
        traits = node.get("traits")
        if not isinstance(traits, MutableMapping):
            traits = {}
            node["traits"] = traits
        traits[trait_id] = {} if value is None else value

    def find_shapes_by_trait(self, trait_id: str) -> list[str]:
        return [shape_id for shape_id in self._shape_map() if self.has_trait(shape_id, trait_id)]

    def get_shape_hierarchy(self, shape_id: str) -> list[str]:
        """Mixin chain of a shape, base shapes first, ending with ``shape_id``."""
        hierarchy: list[str] = []
        self._collect_hierarchy(shape_id, hierarchy, set())
        return hierarchy

    def _collect_hierarchy(self, shape_id: str, hierarchy: list[str], seen: set[str]) -> None:
        if shape_id in seen:
            return
        seen.add(shape_id)
        shape = self.get_shape(shape_id)
        if shape is not None and shape.type is ShapeType.STRUCTURE:
            for mixin in shape.mixins:
                self._collect_hierarchy(mixin, hierarchy, seen)
        hierarchy.append(shape_id)

    def validate(self, check_references: bool | None = None) -> ValidationResult:
        """Run model, shape and trait validation and collect every error."""
        settings = load_settings().validation
        if check_references is None:
            check_references = settings.check_references

        errors: list[ValidationError] = list(ModelValidator().validate(self).errors)

        if not isinstance(self.shapes, Mapping):
            return ValidationResult.from_errors(errors)

        nodes = {
            shape_id: node
            for shape_id, node in self.shapes.items()
            if isinstance(node, Mapping)
        }
        shape_validator = ShapeValidator(self.shapes.keys() if check_references else None)
        for shape_id, node in nodes.items():
            errors.extend(shape_validator.validate(shape_id, node).errors)

        if settings.validate_traits:
            trait_validator = TraitValidator()
            for shape_id, node in nodes.items():
                errors.extend(
                    _validate_traits(trait_validator, f"{shape_id}.traits", node.get("traits"))
                )
                if settings.validate_member_traits:
                    for member_path, member in _iter_member_nodes(node):
                        errors.extend(
                            _validate_traits(
                                trait_validator,
                                f"{shape_id}.{member_path}.traits",
                                member.get("traits"),
                            )
                        )

        result = ValidationResult.from_errors(errors)
        logger.debug(
            "Validated model with %d shapes: %d errors", len(nodes), len(result.errors)
        )
        return result

    def select(self, selector: str) -> list[SelectorMatch]:
        return select(self, selector)

    def to_dict(self) -> dict[str, object]:
        document: dict[str, object] = {"smithy": self.version}
        if self.metadata is not UNDEFINED:
            document["metadata"] = self.metadata
        document["shapes"] = self.shapes
        return document

    def to_json(self, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=2 if pretty else None)


def _validate_traits(
    validator: TraitValidator, prefix: str, traits: object
) -> list[ValidationError]:
    if not isinstance(traits, Mapping):
        return []
    errors: list[ValidationError] = []
    for trait_id, value in traits.items():
        result = validator.validate(trait_id, value)
        for error in result.errors:
            errors.append(error.with_path(f"{prefix}.{error.path}"))
    return errors


def _iter_member_nodes(node: Mapping[str, object]) -> Iterator[tuple[str, Mapping[str, object]]]:
    members = node.get("members")
    if isinstance(members, Mapping):
        for name, member in members.items():
            if isinstance(member, Mapping):
                yield f"members.{name}", member
    for name in ("member", "key", "value"):
        member = node.get(name)
        if isinstance(member, Mapping):
            yield name, member
