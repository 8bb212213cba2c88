"""
Configuration management for the NDS tile-to-KML pipeline.

Usage:
    from nds2kml.config.settings import Config
    config = Config()
    print(config.run.tile_id)

Environment Variables:
    NDS_BASE_PATH: Smart-layer tile service base URL
    NDS_API_KEY: API key sent with every tile request
    NDS_API_KEY_HEADER: Header carrying the API key
    NDS_TIMEOUT_SECONDS: HTTP timeout for the tile request
    NDS_TILE_ID: Tile to convert
    NDS_OUTPUT_FILE: Output document path
    NDS_TILE_TYPE: Generated zserio tile type (module:Class)
    NDS_LANE_LAYER_TYPE: Generated zserio lane layer type (module:Class)
    NDS_LANE_GEOMETRY_LAYER_TYPE: Generated zserio lane geometry layer type (module:Class)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = "https://api.nds.live/island1"
DEFAULT_TILE_ID = "545379780"
DEFAULT_OUTPUT_FILE = "island1.kml"


@dataclass
class TileServiceConfig:
    """Tile service endpoint and credential configuration."""
    base_path: str
    api_key: str
    api_key_header: str = "X-API-Key"
    timeout_s: float = 60.0

    def __post_init__(self):
        """Validate service configuration."""
        if not self.base_path.startswith(('http://', 'https://')):
            raise ValueError("Base path must include protocol (https://)")

        if not self.api_key:
            raise ValueError("API key cannot be empty")

        if not self.api_key_header:
            raise ValueError("API key header cannot be empty")

        if self.timeout_s <= 0:
            raise ValueError("Timeout must be positive")


@dataclass
class RunConfig:
    """Per-run tile and output selection."""
    tile_id: str
    output_file: Path

    def __post_init__(self):
        """Validate run configuration."""
        if not self.tile_id or not self.tile_id.isdigit():
            raise ValueError(f"Tile ID must be a non-empty decimal number, got '{self.tile_id}'")


@dataclass
class DecoderConfig:
    """Locations of the generated zserio types used to decode a tile."""
    tile_type: str = "nds.smart.tile.api:SmartLayerTile"
    lane_layer_type: str = "nds.lane.layer.api:LaneLayer"
    lane_geometry_layer_type: str = "nds.lane.layer.api:LaneGeometryLayer"

    def __post_init__(self):
        """Validate type references."""
        for ref in (self.tile_type, self.lane_layer_type, self.lane_geometry_layer_type):
            module_name, _, class_name = ref.partition(":")
            if not module_name or not class_name:
                raise ValueError(f"Type reference must look like 'package.module:Class', got '{ref}'")


class ConfigurationError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


class Config:
    """
    Centralized configuration for a pipeline run.

    Environment variables loaded (in order of preference):
    1. Explicit environment file passed to constructor
    2. .env.{ENVIRONMENT} (where ENVIRONMENT=development|production|staging)
    3. .env file in project root
    4. System environment variables

    Example:
        config = Config(environment="development")
        config = Config(env_file=Path("/secure/nds.env"))
    """

    def __init__(self,
                 environment: Optional[str] = None,
                 env_file: Optional[Path] = None):
        """
        Initialize configuration from the environment.

        Args:
            environment: Target environment (development|staging|production)
            env_file: Explicit path to environment file
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "development")
        self.project_root = self._find_project_root()

        self._load_environment_variables(env_file)

        self._load_service_config()
        self._load_run_config()
        self._load_decoder_config()

    def _find_project_root(self) -> Path:
        """Find project root containing pyproject.toml or .git, else the working directory."""
        current = Path(__file__).resolve()

        for parent in current.parents:
            if any((parent / marker).exists() for marker in ['pyproject.toml', '.git']):
                return parent

        return Path.cwd()

    def _load_environment_variables(self, env_file: Path | None) -> None:
        """Load environment variables from appropriate source."""
        loaded_files = []

        if env_file:
            if env_file.exists():
                load_dotenv(env_file)
                loaded_files.append(str(env_file))
                logger.info(f"Loaded configuration from {env_file}")
            else:
                raise ConfigurationError(f"Specified env file not found: {env_file}")

        else:
            env_specific_file = self.project_root / f".env.{self.environment}"
            if env_specific_file.exists():
                load_dotenv(env_specific_file)
                loaded_files.append(str(env_specific_file))
                logger.info(f"Loaded environment-specific config: {env_specific_file}")

            generic_env_file = self.project_root / ".env"
            if generic_env_file.exists():
                load_dotenv(generic_env_file)
                loaded_files.append(str(generic_env_file))
                logger.info(f"Loaded generic config: {generic_env_file}")

        if not loaded_files:
            logger.debug("No .env files found, using system environment variables only")

        self._loaded_env_files = loaded_files

        logger.debug(f"Project root: {self.project_root}")
        logger.debug(f"Environment: {self.environment}")

    def _load_service_config(self) -> None:
        """Load and validate tile service configuration."""
        base_path = os.getenv("NDS_BASE_PATH", DEFAULT_BASE_PATH)
        api_key = os.getenv("NDS_API_KEY")
        api_key_header = os.getenv("NDS_API_KEY_HEADER", "X-API-Key")

        if not api_key:
            raise ConfigurationError(
                "Missing required tile service credential: NDS_API_KEY.\n"
                "Please set it in your .env file:\n"
                "  NDS_API_KEY=your_api_key\n\n"
                f"Current .env file: {self.project_root / '.env'}"
            )

        try:
            timeout_s = float(os.getenv("NDS_TIMEOUT_SECONDS", "60"))
            self.service = TileServiceConfig(
                base_path=base_path.rstrip('/'),
                api_key=api_key,
                api_key_header=api_key_header,
                timeout_s=timeout_s
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid tile service configuration: {e}")

    def _load_run_config(self) -> None:
        """Load tile and output selection."""
        tile_id = os.getenv("NDS_TILE_ID", DEFAULT_TILE_ID)
        output_file = os.getenv("NDS_OUTPUT_FILE", DEFAULT_OUTPUT_FILE)

        try:
            self.run = RunConfig(tile_id=tile_id, output_file=Path(output_file))
        except ValueError as e:
            raise ConfigurationError(f"Invalid run configuration: {e}")

    def _load_decoder_config(self) -> None:
        """Load generated type references for the tile decoder."""
        defaults = DecoderConfig()

        try:
            self.decoder = DecoderConfig(
                tile_type=os.getenv("NDS_TILE_TYPE", defaults.tile_type),
                lane_layer_type=os.getenv("NDS_LANE_LAYER_TYPE", defaults.lane_layer_type),
                lane_geometry_layer_type=os.getenv(
                    "NDS_LANE_GEOMETRY_LAYER_TYPE", defaults.lane_geometry_layer_type
                )
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid decoder configuration: {e}")

    def get_run_summary(self) -> dict[str, Any]:
        """
        Get run configuration summary for logging.

        Returns:
            Dictionary with run-relevant configuration info (no secrets)
        """
        return {
            'environment': self.environment,
            'loaded_env_files': self._loaded_env_files,
            'base_path': self.service.base_path,
            'api_key_header': self.service.api_key_header,
            'timeout_s': self.service.timeout_s,
            'tile_id': self.run.tile_id,
            'output_file': str(self.run.output_file),
            'tile_type': self.decoder.tile_type,
        }

    def __repr__(self) -> str:
        """Safe string representation without credentials."""
        return (
            f"Config(environment={self.environment}, "
            f"base_path={self.service.base_path}, "
            f"tile_id={self.run.tile_id})"
        )
