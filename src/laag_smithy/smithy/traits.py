"""Well-known Smithy prelude traits and trait lookup helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

PRELUDE_NAMESPACE = "smithy.api"


class SmithyTrait(str, Enum):
    HTTP = "smithy.api#http"
    HTTP_ERROR = "smithy.api#httpError"
    HTTP_LABEL = "smithy.api#httpLabel"
    HTTP_QUERY = "smithy.api#httpQuery"
    HTTP_HEADER = "smithy.api#httpHeader"
    HTTP_PAYLOAD = "smithy.api#httpPayload"
    REQUIRED = "smithy.api#required"
    DOCUMENTATION = "smithy.api#documentation"
    READONLY = "smithy.api#readonly"
    IDEMPOTENT = "smithy.api#idempotent"
    PAGINATED = "smithy.api#paginated"

    @classmethod
    def lookup(cls, trait_id: object) -> SmithyTrait | None:
        """Resolve an absolute trait ID or a prelude short name (``http``)."""
        if not isinstance(trait_id, str) or not trait_id:
            return None
        try:
            return cls(absolute_trait_id(trait_id))
        except ValueError:
            return None


MARKER_TRAITS = frozenset(
    {
        SmithyTrait.HTTP_LABEL,
        SmithyTrait.HTTP_PAYLOAD,
        SmithyTrait.READONLY,
        SmithyTrait.IDEMPOTENT,
    }
)


def absolute_trait_id(trait_id: str) -> str:
    """Relative trait IDs resolve against the prelude namespace."""
    if "#" in trait_id:
        return trait_id
    return f"{PRELUDE_NAMESPACE}#{trait_id}"


def _trait_key(traits: Mapping[str, object], trait_id: str) -> str | None:
    if trait_id in traits:
        return trait_id
    absolute = absolute_trait_id(trait_id)
    if absolute in traits:
        return absolute
    # Nodes written with prelude short names ("required") instead of absolute IDs.
    if absolute.startswith(f"{PRELUDE_NAMESPACE}#"):
        short = absolute.split("#", 1)[1]
        if short in traits:
            return short
    return None


def has_trait(traits: object, trait_id: str) -> bool:
    if not isinstance(traits, Mapping):
        return False
    return _trait_key(traits, trait_id) is not None


def get_trait(traits: object, trait_id: str, default: object = None) -> object:
    if not isinstance(traits, Mapping):
        return default
    key = _trait_key(traits, trait_id)
    if key is None:
        return default
    return traits[key]


@dataclass(frozen=True)
class HttpTrait:
    method: str
    uri: str
    code: int | None = None

    @classmethod
    def from_value(cls, value: object) -> HttpTrait | None:
        if not isinstance(value, Mapping):
            return None
        method = value.get("method")
        uri = value.get("uri")
        if not isinstance(method, str) or not isinstance(uri, str):
            return None
        code = value.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            code = None
        return cls(method=method.upper(), uri=uri, code=code)


@dataclass(frozen=True)
class PaginatedTrait:
    input_token: str | None = None
    output_token: str | None = None
    items: str | None = None
    page_size: str | None = None

    @classmethod
    def from_value(cls, value: object) -> PaginatedTrait | None:
        if not isinstance(value, Mapping):
            return None

        def text(key: str) -> str | None:
            item = value.get(key)
            return item if isinstance(item, str) else None

        return cls(
            input_token=text("inputToken"),
            output_token=text("outputToken"),
            items=text("items"),
            page_size=text("pageSize"),
        )
