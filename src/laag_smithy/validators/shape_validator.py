"""Per-shape structural and reference validation."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from laag_smithy.errors import ValidationError, ValidationResult
from laag_smithy.smithy.shapes import LIFECYCLE_OPERATIONS, SIMPLE_TYPES, Shape, ShapeType

ShapeNode = Mapping[str, object]


class ShapeValidator:
    """Validates the kind-specific structure of a single shape.

    Runs in one of two modes:

    - shallow: syntax only, no reference resolution (``ShapeValidator()``)
    - full: every reference must name a shape in ``shape_ids``

    An empty ``shape_ids`` collection selects shallow mode, so a shape can be
    checked before the rest of the model is known.
    """

    def __init__(self, shape_ids: Iterable[str] | None = None) -> None:
        ids = frozenset(shape_ids) if shape_ids is not None else frozenset()
        self._shape_ids: frozenset[str] | None = ids or None
        self._validators: dict[ShapeType, Callable[[str, ShapeNode], list[ValidationError]]] = {
            ShapeType.STRUCTURE: self._validate_structure,
            ShapeType.UNION: self._validate_union,
            ShapeType.SERVICE: self._validate_service,
            ShapeType.OPERATION: self._validate_operation,
            ShapeType.RESOURCE: self._validate_resource,
            ShapeType.LIST: self._validate_list,
            ShapeType.SET: self._validate_set,
            ShapeType.MAP: self._validate_map,
        }
        for simple_type in SIMPLE_TYPES:
            self._validators[simple_type] = self._validate_simple

    @classmethod
    def shallow(cls) -> ShapeValidator:
        return cls()

    @classmethod
    def with_references(cls, shape_ids: Iterable[str]) -> ShapeValidator:
        return cls(shape_ids)

    @property
    def checks_references(self) -> bool:
        return self._shape_ids is not None

    def validate(self, shape_id: str, shape: ShapeNode | Shape) -> ValidationResult:
        node = shape.to_node() if isinstance(shape, Shape) else shape
        if not isinstance(node, Mapping):
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=shape_id,
                        message="Shape must be an object",
                        code="INVALID_SHAPE_TYPE",
                    )
                ]
            )

        raw_type = node.get("type")
        if raw_type is None or raw_type == "":
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=shape_id,
                        message="Shape must have a type",
                        code="MISSING_SHAPE_TYPE",
                    )
                ]
            )

        shape_type = ShapeType.lookup(raw_type)
        if shape_type is None:
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=shape_id,
                        message=f'Invalid shape type: "{raw_type}"',
                        code="INVALID_SHAPE_TYPE",
                    )
                ]
            )

        return ValidationResult.from_errors(self._validators[shape_type](shape_id, node))

    def validate_structure(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_structure(shape_id, shape))

    def validate_union(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_union(shape_id, shape))

    def validate_service(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_service(shape_id, shape))

    def validate_operation(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_operation(shape_id, shape))

    def validate_resource(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_resource(shape_id, shape))

    def validate_list(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_list(shape_id, shape))

    def validate_set(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_set(shape_id, shape))

    def validate_map(self, shape_id: str, shape: ShapeNode) -> ValidationResult:
        return ValidationResult.from_errors(self._validate_map(shape_id, shape))

    def _validate_simple(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        return []

    def _validate_structure(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        errors = self._validate_members(shape_id, shape, "Structure")
        if "mixins" in shape:
            mixins = shape["mixins"]
            if not isinstance(mixins, list):
                errors.append(
                    ValidationError(
                        path=f"{shape_id}.mixins",
                        message="Structure mixins must be an array",
                        code="INVALID_MIXINS_TYPE",
                    )
                )
            else:
                for index, mixin in enumerate(mixins):
                    errors.extend(self._check_reference(shape_id, f"mixins[{index}]", mixin))
        return errors

    def _validate_union(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        return self._validate_members(shape_id, shape, "Union")

    def _validate_members(
        self, shape_id: str, shape: ShapeNode, label: str
    ) -> list[ValidationError]:
        if "members" not in shape:
            return []
        members = shape["members"]
        if not isinstance(members, Mapping):
            return [
                ValidationError(
                    path=f"{shape_id}.members",
                    message=f"{label} members must be an object",
                    code="INVALID_MEMBERS_TYPE",
                )
            ]
        errors: list[ValidationError] = []
        for member_name, member in members.items():
            errors.extend(self._validate_member(shape_id, str(member_name), member))
        return errors

    def _validate_service(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        errors: list[ValidationError] = []

        version = shape.get("version")
        if version is None or version == "":
            errors.append(
                ValidationError(
                    path=f"{shape_id}.version",
                    message="Service version is required",
                    code="MISSING_SERVICE_VERSION",
                )
            )
        elif not isinstance(version, str):
            errors.append(
                ValidationError(
                    path=f"{shape_id}.version",
                    message="Service version must be a string",
                    code="INVALID_SERVICE_VERSION_TYPE",
                )
            )

        for field_name in ("operations", "resources", "errors"):
            if field_name in shape:
                errors.extend(self._check_reference_array(shape_id, field_name, shape[field_name]))

        if "rename" in shape and not isinstance(shape["rename"], Mapping):
            errors.append(
                ValidationError(
                    path=f"{shape_id}.rename",
                    message="Service rename must be an object",
                    code="INVALID_RENAME_TYPE",
                )
            )
        return errors

    def _validate_operation(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        errors: list[ValidationError] = []
        for field_name in ("input", "output"):
            if field_name in shape:
                errors.extend(self._check_reference(shape_id, field_name, shape[field_name]))
        if "errors" in shape:
            errors.extend(self._check_reference_array(shape_id, "errors", shape["errors"]))
        return errors

    def _validate_resource(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        errors: list[ValidationError] = []
        for field_name in ("identifiers", "properties"):
            if field_name in shape:
                errors.extend(self._check_reference_map(shape_id, field_name, shape[field_name]))
        for field_name in LIFECYCLE_OPERATIONS:
            if field_name in shape:
                errors.extend(self._check_reference(shape_id, field_name, shape[field_name]))
        for field_name in ("operations", "collectionOperations", "resources"):
            if field_name in shape:
                errors.extend(self._check_reference_array(shape_id, field_name, shape[field_name]))
        return errors

    def _validate_list(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        return self._validate_required_member(
            shape_id, shape, "member", "List member is required", "MISSING_LIST_MEMBER"
        )

    def _validate_set(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        return self._validate_required_member(
            shape_id, shape, "member", "Set member is required", "MISSING_SET_MEMBER"
        )

    def _validate_map(self, shape_id: str, shape: ShapeNode) -> list[ValidationError]:
        errors = self._validate_required_member(
            shape_id, shape, "key", "Map key is required", "MISSING_MAP_KEY"
        )
        errors.extend(
            self._validate_required_member(
                shape_id, shape, "value", "Map value is required", "MISSING_MAP_VALUE"
            )
        )
        return errors

    def _validate_required_member(
        self, shape_id: str, shape: ShapeNode, field_name: str, message: str, code: str
    ) -> list[ValidationError]:
        member = shape.get(field_name)
        if member is None or member == "":
            return [ValidationError(path=f"{shape_id}.{field_name}", message=message, code=code)]
        return self._validate_member(shape_id, field_name, member)

    def _validate_member(
        self, shape_id: str, member_name: str, member: object
    ) -> list[ValidationError]:
        path = f"{shape_id}.{member_name}"
        if not isinstance(member, Mapping):
            return [
                ValidationError(
                    path=path,
                    message="Member must be an object",
                    code="INVALID_MEMBER_TYPE",
                )
            ]
        target = member.get("target")
        if target is None or target == "":
            return [
                ValidationError(
                    path=path,
                    message="Member must have a target",
                    code="MISSING_MEMBER_TARGET",
                )
            ]
        if not isinstance(target, str):
            return [
                ValidationError(
                    path=path,
                    message="Member target must be a string",
                    code="INVALID_MEMBER_TARGET_TYPE",
                )
            ]
        return self._check_reference(shape_id, member_name, target)

    def _check_reference(
        self, shape_id: str, field_name: str, reference: object
    ) -> list[ValidationError]:
        path = f"{shape_id}.{field_name}"
        target = reference
        if isinstance(reference, Mapping):
            target = reference.get("target")
        if not isinstance(target, str):
            return [
                ValidationError(
                    path=path,
                    message="Shape reference must be a string",
                    code="INVALID_REFERENCE_TYPE",
                )
            ]
        if self._shape_ids is not None and target not in self._shape_ids:
            return [
                ValidationError(
                    path=path,
                    message=f'Shape reference "{target}" not found',
                    code="INVALID_SHAPE_REFERENCE",
                    context={"reference": target},
                )
            ]
        return []

    def _check_reference_array(
        self, shape_id: str, field_name: str, references: object
    ) -> list[ValidationError]:
        if not isinstance(references, list):
            return [
                ValidationError(
                    path=f"{shape_id}.{field_name}",
                    message=f"{field_name} must be an array",
                    code="INVALID_REFERENCE_ARRAY_TYPE",
                )
            ]
        errors: list[ValidationError] = []
        for index, reference in enumerate(references):
            errors.extend(self._check_reference(shape_id, f"{field_name}[{index}]", reference))
        return errors

    def _check_reference_map(
        self, shape_id: str, field_name: str, references: object
    ) -> list[ValidationError]:
        if not isinstance(references, Mapping):
            return [
                ValidationError(
                    path=f"{shape_id}.{field_name}",
                    message=f"{field_name} must be an object",
                    code="INVALID_REFERENCE_MAP_TYPE",
                )
            ]
        errors: list[ValidationError] = []
        for key, reference in references.items():
            errors.extend(self._check_reference(shape_id, f"{field_name}.{key}", reference))
        return errors
