"""Load and manage prompts from YAML files."""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"
REQUIRED_KEYS = (
    "system",
    "catalog_context",
    "fallback_preamble",
    "fallback_catalog",
    "generation",
    "refinement",
    "validation",
    "product_details",
)


def load_prompt(
    version_key: str = "v1_avixa", prompts_dir: Optional[Union[str, Path]] = None
) -> Dict[str, str]:
    """Load a specific prompt version from prompt_versions.yaml."""

    directory = Path(prompts_dir) if prompts_dir else PROMPTS_DIR

    # handle .yaml vs .yml
    prompt_path = None
    for filename in ("prompt_versions.yaml", "prompt_versions.yml"):
        candidate = directory / filename
        if candidate.exists():
            prompt_path = candidate
            break

    if not prompt_path:
        existing_files = [f.name for f in directory.glob("*")] if directory.exists() else "Directory not found"
        error_msg = (
            f"Could not find prompt file. Looking in: {directory}. "
            f"Found these files instead: {existing_files}"
        )
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    with open(prompt_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    versions = data.get("versions", {})
    version_data = versions.get(version_key)
    if not version_data:
        raise KeyError(
            f"Version '{version_key}' not found in {prompt_path.name}. Available: {list(versions.keys())}"
        )

    missing = [key for key in REQUIRED_KEYS if key not in version_data]
    if missing:
        raise KeyError(f"Version '{version_key}' is missing prompt sections: {missing}")

    logger.info(f"Loaded prompt version: {version_key}")
    return {key: version_data[key] for key in REQUIRED_KEYS}
