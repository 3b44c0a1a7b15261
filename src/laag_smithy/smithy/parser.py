"""Smithy JSON-AST parser."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from laag_smithy.errors import ParseError, json_type_name
from laag_smithy.smithy.model import Model

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> object:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> object:
    return json.loads(text, parse_constant=_reject_constant)


class JsonParser:
    """Turn JSON text or an already-decoded object into a ``Model``.

    Parsing is a shallow gate: it checks only that the input is plausibly a
    Smithy model. ``Model.validate()`` does the real validation.
    """

    def parse(self, data: str | Mapping[str, object]) -> Model:
        if isinstance(data, str):
            try:
                document = _loads(data)
            except (ValueError, RecursionError) as exc:
                logger.debug("Failed to decode JSON input: %s", exc)
                raise ParseError(
                    "Failed to parse JSON input",
                    {
                        "original_error": str(exc),
                        "input_type": "string",
                        "input_length": len(data),
                    },
                ) from exc
        elif isinstance(data, Mapping):
            document = data
        else:
            raise ParseError(
                "Input must be a JSON string or object",
                {"input_type": json_type_name(data), "received_value": data},
            )

        reason = _format_problem(document)
        if reason is not None:
            logger.debug("Rejected model document: %s", reason)
            raise ParseError(
                "Invalid Smithy model format",
                {"reason": reason, "received_type": json_type_name(document)},
            )
        return Model.from_dict(document)

    def validate_format(self, data: object) -> bool:
        return _format_problem(data) is None

    def is_valid_json(self, text: str) -> bool:
        if not isinstance(text, str):
            return False
        try:
            _loads(text)
        except (ValueError, RecursionError):
            return False
        return True


def _is_container(value: object) -> bool:
    return isinstance(value, (Mapping, list))


def _format_problem(document: object) -> str | None:
    # Arrays pass here; ModelValidator reports them with a specific message.
    if not isinstance(document, Mapping):
        return "model must be a JSON object"
    if not isinstance(document.get("smithy"), str):
        return "'smithy' must be a string"
    if not _is_container(document.get("shapes")):
        return "'shapes' must be a JSON object"
    if "metadata" in document and not _is_container(document["metadata"]):
        return "'metadata' must be a JSON object"
    return None
