"""
Presentation configuration loading.

Reads the document name, folder labels and line styles from YAML
(data/presentation.yml by default) into a validated Presentation model.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from .config.settings import ConfigurationError
from .domain.enums import GeometryRole
from .domain.models import Presentation

logger = logging.getLogger(__name__)

DEFAULT_PRESENTATION_PATH = Path(__file__).parent / "data" / "presentation.yml"


def load_presentation(config_path: Optional[Union[str, Path]] = None) -> Presentation:
    """
    Load presentation settings from YAML.

    Args:
        config_path: Path to presentation YAML (defaults to data/presentation.yml)

    Returns:
        Presentation with a label and style for every geometry role

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ConfigurationError: If the file content is invalid or a role is missing
    """
    config_path = Path(config_path) if config_path else DEFAULT_PRESENTATION_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Presentation file not found: {config_path}")

    with open(config_path, encoding='utf-8') as f:
        raw_config = yaml.safe_load(f) or {}

    try:
        presentation = Presentation(**raw_config)
    except (TypeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid presentation configuration in {config_path}: {e}") from e

    missing = [role.value for role in GeometryRole if role not in presentation.groups]
    if missing:
        raise ConfigurationError(
            f"Presentation configuration {config_path} is missing groups: {', '.join(missing)}"
        )

    logger.debug(f"Loaded presentation '{presentation.document_name}' from {config_path}")
    return presentation
