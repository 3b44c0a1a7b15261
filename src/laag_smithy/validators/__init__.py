"""Model, shape and trait validators."""

from laag_smithy.validators.model_validator import ModelValidator
from laag_smithy.validators.shape_validator import ShapeValidator
from laag_smithy.validators.trait_validator import TraitValidator

__all__ = ["ModelValidator", "ShapeValidator", "TraitValidator"]
