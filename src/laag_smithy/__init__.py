"""Parse, validate and query Smithy JSON-AST models."""

from laag_smithy.errors import ParseError, ValidationError, ValidationResult
from laag_smithy.smithy.catalog import HttpBinding, ServiceCatalog
from laag_smithy.smithy.loader import load_model, load_model_from_paths
from laag_smithy.smithy.model import Model
from laag_smithy.smithy.parser import JsonParser
from laag_smithy.smithy.selector import (
    SelectorMatch,
    SelectorQuery,
    SelectorSyntaxError,
    is_valid_selector,
    parse_selector,
    select,
)
from laag_smithy.smithy.shape_id import InvalidShapeIdError, ShapeId
from laag_smithy.smithy.shapes import MemberShape, ShapeType
from laag_smithy.validators import ModelValidator, ShapeValidator, TraitValidator

__all__ = [
    "HttpBinding",
    "InvalidShapeIdError",
    "JsonParser",
    "MemberShape",
    "Model",
    "ModelValidator",
    "ParseError",
    "SelectorMatch",
    "SelectorQuery",
    "SelectorSyntaxError",
    "ServiceCatalog",
    "ShapeId",
    "ShapeType",
    "ShapeValidator",
    "TraitValidator",
    "ValidationError",
    "ValidationResult",
    "is_valid_selector",
    "load_model",
    "load_model_from_paths",
    "parse_selector",
    "select",
]
