"""Smithy model loader for local JSON files."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from laag_smithy.config import load_settings
from laag_smithy.logging_utils import get_logger
from laag_smithy.smithy.model import Model
from laag_smithy.smithy.parser import JsonParser
from laag_smithy.validators.model_validator import UNDEFINED


def load_model(path: str | Path | None = None) -> Model:
    """Load one ``.json`` model file, or merge every model under a directory."""
    model_path = Path(path) if path is not None else Path(load_settings().models.path)
    if not model_path.exists():
        raise FileNotFoundError(f"Smithy model path not found: {model_path}")
    return load_model_from_paths(_iter_json_files(model_path))


def load_model_from_paths(paths: list[Path]) -> Model:
    logger = get_logger(__name__)
    parser = JsonParser()

    version: object = None
    metadata: dict[str, object] = {}
    shapes: dict[str, object] = {}
    for file_path in paths:
        model = parser.parse(Path(file_path).read_text(encoding="utf-8"))
        if version is None:
            version = model.version
        if isinstance(model.metadata, Mapping):
            metadata.update(model.metadata)
        if isinstance(model.shapes, Mapping):
            shapes.update(model.shapes)
        logger.debug("Loaded %d shapes from %s", len(model.shapes), file_path)

    return Model(version=version, shapes=shapes, metadata=metadata or UNDEFINED)


def _iter_json_files(path: Path) -> list[Path]:
    if path.is_file() and path.suffix == ".json":
        return [path]
    if not path.is_dir():
        return []
    return sorted(path.glob("**/*.json"))
