"""
Configuration module for the NDS tile-to-KML pipeline.
"""

from .settings import (
    Config,
    ConfigurationError,
    DecoderConfig,
    RunConfig,
    TileServiceConfig,
)

__all__ = [
    'Config',
    'ConfigurationError',
    'TileServiceConfig',
    'RunConfig',
    'DecoderConfig'
]
