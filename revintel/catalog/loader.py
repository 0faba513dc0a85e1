"""Load and validate the interview option catalog from JSON files."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from revintel.catalog.schema import (
    ChallengeCatalogFile,
    ICPCatalogFile,
    InterviewCatalog,
)

logger = logging.getLogger(__name__)

# Default directory for catalog files
_CONFIG_DIR = Path(__file__).parent / "configs"


def _read_json(file_path: Path) -> dict:
    if not file_path.exists():
        raise FileNotFoundError(f"Catalog file not found: {file_path}")

    with open(file_path, "r") as f:
        return json.load(f)


def load_catalog(config_dir: Path | None = None) -> InterviewCatalog:
    """Load ICP definitions and challenge areas and cross-validate them.

    If no directory is provided, loads the bundled catalog.
    """
    if config_dir is None:
        config_dir = _CONFIG_DIR

    icp_file = ICPCatalogFile.model_validate(_read_json(config_dir / "icp_definitions.json"))
    challenge_file = ChallengeCatalogFile.model_validate(
        _read_json(config_dir / "challenge_areas.json")
    )

    catalog = InterviewCatalog(
        icps=icp_file.icps,
        challenge_areas=challenge_file.challenge_areas,
        default_challenge_area_ids=icp_file.default_challenge_area_ids,
    )
    logger.info(
        f"Loaded catalog v{icp_file.version}: {len(catalog.icps)} ICPs, "
        f"{len(catalog.challenge_areas)} challenge areas"
    )
    return catalog


@lru_cache(maxsize=1)
def get_default_catalog() -> InterviewCatalog:
    """Load the bundled catalog once per process."""
    return load_catalog()
