"""Threshold catalogue loader.

The catalogue is a nested JSON document:
Difficulty → Category → Subcategory → Scenario → Tier → score threshold.
Only local files are read; fetching the published document is the caller's job.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..exceptions import CatalogueError
from ..models import ThresholdCatalogue

logger = logging.getLogger(__name__)


def parse_catalogue(document: Any) -> ThresholdCatalogue:
    """Validate a decoded catalogue document into typed records."""
    if not isinstance(document, dict):
        raise CatalogueError(f"Catalogue must be a JSON object, got {type(document).__name__}")
    try:
        return ThresholdCatalogue.from_nested(document)
    except ValidationError as e:
        raise CatalogueError(f"Invalid threshold catalogue: {e}") from e
    except (AttributeError, TypeError) as e:
        raise CatalogueError(f"Catalogue levels must be JSON objects: {e}") from e


def load_catalogue(path: Union[str, Path]) -> ThresholdCatalogue:
    """Read and parse a catalogue JSON file."""
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogueError(f"{path} is not valid JSON: {e}") from e

    catalogue = parse_catalogue(document)
    logger.info(
        "Loaded catalogue from %s: %d difficulties, %d scenarios",
        path,
        len(catalogue.difficulties),
        len(catalogue.scenario_names()),
    )
    return catalogue
