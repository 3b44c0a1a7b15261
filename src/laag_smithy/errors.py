"""Error and result primitives shared by the parser and validators."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field


class ParseError(Exception):
    """Raised when input cannot be turned into a Smithy model."""

    def __init__(self, message: str, context: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, object] = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


@dataclass
class ValidationError:
    """Structured validation error for machine-readable error reporting.

    Attributes:
        path: Dotted location of the problem (e.g., "example#Svc.operations[0]").
        message: Human-readable error message.
        code: Stable machine-readable error code (e.g., "MISSING_VERSION").
        context: Optional extra details about the failure.
    """

    path: str
    message: str
    code: str
    context: dict[str, object] | None = None

    def with_path(self, path: str) -> ValidationError:
        return ValidationError(path=path, message=self.message, code=self.code, context=self.context)


@dataclass
class ValidationResult:
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True, errors=[])

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> ValidationResult:
        return cls(valid=not errors, errors=list(errors))

    @property
    def codes(self) -> list[str]:
        return [error.code for error in self.errors]

    def errors_by_path(self) -> dict[str, list[ValidationError]]:
        """Group errors by path, preserving first-seen order."""
        grouped: dict[str, list[ValidationError]] = {}
        for error in self.errors:
            grouped.setdefault(error.path, []).append(error)
        return grouped

    def to_dict(self) -> dict[str, object]:
        errors = []
        for error in self.errors:
            entry = asdict(error)
            if entry["context"] is None:
                entry.pop("context")
            errors.append(entry)
        return {"valid": self.valid, "errors": errors}


def json_type_name(value: object) -> str:
    """Name a Python value's type using JSON vocabulary."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__
