"""Smithy JSON-AST model: shape IDs, shapes, traits, parsing and selection."""
