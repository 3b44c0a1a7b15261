"""Trait value validation."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from laag_smithy.errors import ValidationError, ValidationResult, json_type_name
from laag_smithy.smithy.traits import SmithyTrait
from laag_smithy.validators.model_validator import UNDEFINED

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")
PAGINATED_FIELDS = ("inputToken", "outputToken", "items", "pageSize")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_object(value: object) -> bool:
    return isinstance(value, Mapping)


class TraitValidator:
    """Validates trait values.

    Well-known prelude traits are checked against their fixed value schema.
    Any other trait is a custom trait and only has to be JSON-serializable,
    since its shape definition is not resolved from the model here.
    """

    def __init__(self) -> None:
        self._validators: dict[SmithyTrait, Callable[[object], ValidationResult]] = {
            SmithyTrait.HTTP: self.validate_http_trait,
            SmithyTrait.HTTP_ERROR: self.validate_http_error_trait,
            SmithyTrait.HTTP_QUERY: self.validate_http_query_trait,
            SmithyTrait.HTTP_HEADER: self.validate_http_header_trait,
            SmithyTrait.REQUIRED: self.validate_required_trait,
            SmithyTrait.DOCUMENTATION: self.validate_documentation_trait,
            SmithyTrait.PAGINATED: self.validate_paginated_trait,
            SmithyTrait.HTTP_LABEL: self._marker(SmithyTrait.HTTP_LABEL),
            SmithyTrait.HTTP_PAYLOAD: self._marker(SmithyTrait.HTTP_PAYLOAD),
            SmithyTrait.READONLY: self._marker(SmithyTrait.READONLY),
            SmithyTrait.IDEMPOTENT: self._marker(SmithyTrait.IDEMPOTENT),
        }

    def validate(self, trait_id: object, value: object = UNDEFINED) -> ValidationResult:
        """Validate one trait application.

        Omitting ``value`` applies the trait with no value (marker traits);
        JSON ``null`` is a value and is checked like any other.
        """
        if not isinstance(trait_id, str) or not trait_id:
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path="trait",
                        message="Trait ID must be a non-empty string",
                        code="INVALID_TRAIT_ID",
                    )
                ]
            )

        known = SmithyTrait.lookup(trait_id)
        if known is None:
            if value is UNDEFINED:
                return ValidationResult.ok()
            return self.validate_custom_trait(value, path=trait_id)
        return self._validators[known](value)

    def _marker(self, trait: SmithyTrait) -> Callable[[object], ValidationResult]:
        def validate(value: object) -> ValidationResult:
            return self.validate_marker_trait(value, path=trait.value)

        return validate

    def validate_http_trait(self, value: object) -> ValidationResult:
        root = SmithyTrait.HTTP.value
        if not _is_object(value):
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=root,
                        message="HTTP trait must be an object",
                        code="INVALID_HTTP_TRAIT_TYPE",
                    )
                ]
            )
        errors: list[ValidationError] = []

        method = value.get("method")
        if method is None or method == "":
            errors.append(
                ValidationError(
                    path=f"{root}.method",
                    message="HTTP method is required",
                    code="MISSING_HTTP_METHOD",
                )
            )
        elif not isinstance(method, str):
            errors.append(
                ValidationError(
                    path=f"{root}.method",
                    message="HTTP method must be a string",
                    code="INVALID_HTTP_METHOD_TYPE",
                )
            )
        elif method.upper() not in HTTP_METHODS:
            errors.append(
                ValidationError(
                    path=f"{root}.method",
                    message=(
                        f'Invalid HTTP method: "{method}". '
                        f"Must be one of: {', '.join(HTTP_METHODS)}"
                    ),
                    code="INVALID_HTTP_METHOD",
                )
            )

        uri = value.get("uri")
        if uri is None or uri == "":
            errors.append(
                ValidationError(
                    path=f"{root}.uri",
                    message="HTTP URI is required",
                    code="MISSING_HTTP_URI",
                )
            )
        elif not isinstance(uri, str):
            errors.append(
                ValidationError(
                    path=f"{root}.uri",
                    message="HTTP URI must be a string",
                    code="INVALID_HTTP_URI_TYPE",
                )
            )
        elif not uri.startswith("/"):
            errors.append(
                ValidationError(
                    path=f"{root}.uri",
                    message='HTTP URI must start with "/"',
                    code="INVALID_HTTP_URI_FORMAT",
                )
            )

        if "code" in value:
            code = value["code"]
            if not _is_number(code):
                errors.append(
                    ValidationError(
                        path=f"{root}.code",
                        message="HTTP code must be a number",
                        code="INVALID_HTTP_CODE_TYPE",
                    )
                )
            elif code < 100 or code > 599:
                errors.append(
                    ValidationError(
                        path=f"{root}.code",
                        message="HTTP code must be between 100 and 599",
                        code="INVALID_HTTP_CODE_RANGE",
                    )
                )

        return ValidationResult.from_errors(errors)

    def validate_http_error_trait(self, value: object) -> ValidationResult:
        root = SmithyTrait.HTTP_ERROR.value
        if not _is_number(value):
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=root,
                        message="HTTP error trait must be a number",
                        code="INVALID_HTTP_ERROR_TYPE",
                    )
                ]
            )
        if value < 400 or value > 599:
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=root,
                        message="HTTP error code must be between 400 and 599",
                        code="INVALID_HTTP_ERROR_RANGE",
                    )
                ]
            )
        return ValidationResult.ok()

    def validate_http_query_trait(self, value: object) -> ValidationResult:
        return self._non_empty_string(
            value,
            path=SmithyTrait.HTTP_QUERY.value,
            label="HTTP query trait",
            type_code="INVALID_HTTP_QUERY_TYPE",
            empty_message="HTTP query parameter name cannot be empty",
            empty_code="EMPTY_HTTP_QUERY",
        )

    def validate_http_header_trait(self, value: object) -> ValidationResult:
        return self._non_empty_string(
            value,
            path=SmithyTrait.HTTP_HEADER.value,
            label="HTTP header trait",
            type_code="INVALID_HTTP_HEADER_TYPE",
            empty_message="HTTP header name cannot be empty",
            empty_code="EMPTY_HTTP_HEADER",
        )

    def validate_documentation_trait(self, value: object) -> ValidationResult:
        return self._non_empty_string(
            value,
            path=SmithyTrait.DOCUMENTATION.value,
            label="Documentation trait",
            type_code="INVALID_DOCUMENTATION_TYPE",
            empty_message="Documentation cannot be empty",
            empty_code="EMPTY_DOCUMENTATION",
        )

    def _non_empty_string(
        self,
        value: object,
        *,
        path: str,
        label: str,
        type_code: str,
        empty_message: str,
        empty_code: str,
    ) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.from_errors(
                [ValidationError(path=path, message=f"{label} must be a string", code=type_code)]
            )
        if not value:
            return ValidationResult.from_errors(
                [ValidationError(path=path, message=empty_message, code=empty_code)]
            )
        return ValidationResult.ok()

    def validate_required_trait(self, value: object = UNDEFINED) -> ValidationResult:
        if value is UNDEFINED or (_is_object(value) and not value):
            return ValidationResult.ok()
        return ValidationResult.from_errors(
            [
                ValidationError(
                    path=SmithyTrait.REQUIRED.value,
                    message="Required trait must be an empty object",
                    code="INVALID_REQUIRED_TRAIT",
                )
            ]
        )

    def validate_marker_trait(
        self, value: object = UNDEFINED, path: str = "trait"
    ) -> ValidationResult:
        # Marker traits carry no data: absent or {}.
        if value is UNDEFINED or (_is_object(value) and not value):
            return ValidationResult.ok()
        return ValidationResult.from_errors(
            [
                ValidationError(
                    path=path,
                    message="Marker trait must be an empty object",
                    code="INVALID_MARKER_TRAIT",
                )
            ]
        )

    def validate_paginated_trait(self, value: object) -> ValidationResult:
        root = SmithyTrait.PAGINATED.value
        if not _is_object(value):
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        path=root,
                        message="Paginated trait must be an object",
                        code="INVALID_PAGINATED_TRAIT_TYPE",
                    )
                ]
            )
        errors = [
            ValidationError(
                path=f"{root}.{name}",
                message=f"Paginated {name} must be a string",
                code="INVALID_PAGINATED_FIELD_TYPE",
            )
            for name in PAGINATED_FIELDS
            if name in value and not isinstance(value[name], str)
        ]
        return ValidationResult.from_errors(errors)

    def validate_custom_trait(self, value: object, path: str = "trait") -> ValidationResult:
        """Check that a custom trait value is plain JSON data.

        Rejects callables and other non-JSON values at any depth, and reports
        self-referential containers separately from type problems.
        """
        errors: list[ValidationError] = []
        self._check_json_value(value, path, set(), errors)
        return ValidationResult.from_errors(errors)

    def _check_json_value(
        self,
        value: object,
        path: str,
        ancestors: set[int],
        errors: list[ValidationError],
    ) -> None:
        if value is None or isinstance(value, (str, bool, int, float)):
            return

        if callable(value):
            errors.append(
                ValidationError(
                    path=path,
                    message="Custom trait value cannot be a function",
                    code="INVALID_CUSTOM_TRAIT_TYPE",
                )
            )
            return

        if not isinstance(value, (Mapping, list, tuple)):
            errors.append(
                ValidationError(
                    path=path,
                    message=(
                        f"Custom trait value must be JSON-serializable, "
                        f"got {json_type_name(value)}"
                    ),
                    code="INVALID_CUSTOM_TRAIT_TYPE",
                )
            )
            return

        identity = id(value)
        if identity in ancestors:
            errors.append(
                ValidationError(
                    path=path,
                    message="Custom trait value must be JSON-serializable (no circular references)",
                    code="INVALID_CUSTOM_TRAIT_VALUE",
                )
            )
            return

        ancestors.add(identity)
        try:
            if isinstance(value, Mapping):
                for key, item in value.items():
                    if not isinstance(key, str):
                        errors.append(
                            ValidationError(
                                path=f"{path}.{key}",
                                message="Custom trait object keys must be strings",
                                code="INVALID_CUSTOM_TRAIT_TYPE",
                            )
                        )
                        continue
                    self._check_json_value(item, f"{path}.{key}", ancestors, errors)
            else:
                for index, item in enumerate(value):
                    self._check_json_value(item, f"{path}[{index}]", ancestors, errors)
        finally:
            ancestors.discard(identity)
