"""Top-level Smithy model validation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from laag_smithy.errors import ValidationError, ValidationResult

if TYPE_CHECKING:
    from laag_smithy.smithy.model import Model

SUPPORTED_VERSIONS = ("1.0", "2.0")

_VERSION_PATTERN = re.compile(r"^\d+\.\d+$")
_ABSOLUTE_SHAPE_ID = re.compile(r"^[A-Za-z][A-Za-z0-9_.]*#[A-Za-z][A-Za-z0-9_]*$")
_RELATIVE_SHAPE_ID = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class _Undefined:
    def __repr__(self) -> str:
        return "UNDEFINED"


# Distinguishes a missing "shapes" or "metadata" entry from an explicit null.
UNDEFINED = _Undefined()


class ModelValidator:
    """Validates model-level invariants: version, metadata and the shape map.

    All checks run; errors from each are concatenated.
    """

    def validate(self, model: Model | Mapping[str, object]) -> ValidationResult:
        if isinstance(model, Mapping):
            version = model.get("smithy")
            metadata = model.get("metadata", UNDEFINED)
            shapes = model.get("shapes", UNDEFINED)
        else:
            version = model.version
            metadata = model.metadata
            shapes = model.shapes

        errors: list[ValidationError] = []
        errors.extend(self.validate_version(version).errors)
        if metadata is not UNDEFINED:
            errors.extend(self.validate_metadata(metadata).errors)
        errors.extend(self.validate_shapes(shapes).errors)
        return ValidationResult.from_errors(errors)

    def validate_version(self, version: object) -> ValidationResult:
        if version is None or version == "":
            return _fail("smithy", "Smithy version is required", "MISSING_VERSION")
        if not isinstance(version, str):
            return _fail("smithy", "Smithy version must be a string", "INVALID_VERSION_TYPE")
        if not _VERSION_PATTERN.fullmatch(version):
            return _fail(
                "smithy",
                f'Invalid Smithy version format: "{version}". Expected format: "X.Y" (e.g., "2.0")',
                "INVALID_VERSION_FORMAT",
            )
        if version not in SUPPORTED_VERSIONS:
            return _fail(
                "smithy",
                f'Unsupported Smithy version: "{version}". '
                f"Supported versions: {', '.join(SUPPORTED_VERSIONS)}",
                "UNSUPPORTED_VERSION",
            )
        return ValidationResult.ok()

    def validate_metadata(self, metadata: object) -> ValidationResult:
        if isinstance(metadata, list):
            return _fail(
                "metadata", "Metadata must be an object, not an array", "INVALID_METADATA_TYPE"
            )
        if not isinstance(metadata, Mapping):
            return _fail("metadata", "Metadata must be an object", "INVALID_METADATA_TYPE")
        return ValidationResult.ok()

    def validate_shapes(self, shapes: object = UNDEFINED) -> ValidationResult:
        if shapes is UNDEFINED:
            return _fail("shapes", "Shapes collection is required", "MISSING_SHAPES")
        if shapes is None:
            return _fail("shapes", "Shapes must be an object", "INVALID_SHAPES_TYPE")
        if isinstance(shapes, list):
            return _fail("shapes", "Shapes must be an object, not an array", "INVALID_SHAPES_TYPE")
        if not isinstance(shapes, Mapping):
            return _fail("shapes", "Shapes must be an object", "INVALID_SHAPES_TYPE")
        if not shapes:
            return _fail("shapes", "Shapes collection cannot be empty", "EMPTY_SHAPES")

        errors: list[ValidationError] = []
        for shape_id, shape in shapes.items():
            if not is_valid_shape_key(shape_id):
                errors.append(
                    ValidationError(
                        path=f"shapes.{shape_id}",
                        message=(
                            f'Invalid shape ID format: "{shape_id}". '
                            'Expected format: "namespace#ShapeName" or "ShapeName"'
                        ),
                        code="INVALID_SHAPE_ID",
                    )
                )
            if not isinstance(shape, Mapping):
                errors.append(
                    ValidationError(
                        path=f"shapes.{shape_id}",
                        message="Shape must be an object",
                        code="INVALID_SHAPE_TYPE",
                    )
                )
        return ValidationResult.from_errors(errors)


def is_valid_shape_key(shape_id: object) -> bool:
    """Permissive shape-key grammar: ``ns#Name`` or ``Name``."""
    if not isinstance(shape_id, str) or not shape_id:
        return False
    return bool(_ABSOLUTE_SHAPE_ID.fullmatch(shape_id) or _RELATIVE_SHAPE_ID.fullmatch(shape_id))


def _fail(path: str, message: str, code: str) -> ValidationResult:
    return ValidationResult.from_errors([ValidationError(path=path, message=message, code=code)])
