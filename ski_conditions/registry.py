"""Load source configuration from the YAML registry."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from ski_conditions.config import SOURCES_YAML
from ski_conditions.models import SourcesConfig

logger = logging.getLogger(__name__)


def load_sources(yaml_path: Optional[Path] = None) -> SourcesConfig:
    """
    Load source configuration from YAML file.

    Args:
        yaml_path: Path to sources.yaml, defaults to config.SOURCES_YAML

    Returns:
        SourcesConfig object

    Raises:
        FileNotFoundError: If the registry file is missing
        pydantic.ValidationError: If the registry is malformed
    """
    path = yaml_path or SOURCES_YAML

    if not path.exists():
        raise FileNotFoundError(f"Source registry not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    sources = SourcesConfig(**data)

    for location in sources.locations:
        if location.grid is None and (location.lat is None or location.lon is None):
            logger.warning(f"Location {location.key} has neither grid nor lat/lon")

    logger.info(
        f"Loaded {len(sources.locations)} locations, "
        f"{len(sources.metroparks.parks)} parks, "
        f"{len(sources.trail_reports.regions)} regions from registry"
    )
    return sources
