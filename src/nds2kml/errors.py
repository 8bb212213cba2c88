"""
Error hierarchy for the tile-to-KML pipeline.

Every failure carries the pipeline stage it came from so a single terminal
report can say where the run stopped (fetch, decode, extract, convert, write).
None of these are retried; each one aborts the run.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base exception for pipeline failures."""
    stage = "pipeline"

    def __init__(self, message: str, stage: Optional[str] = None):
        if stage:
            self.stage = stage
        super().__init__(message)


class TransportFailure(PipelineError):
    """Tile could not be fetched from the tile service."""
    stage = "fetch"

    def __init__(self, tile_id: str, message: str):
        self.tile_id = tile_id
        super().__init__(f"Failed to fetch tile {tile_id}: {message}")


class DecodeFailure(PipelineError):
    """Tile bytes or layer structure could not be decoded."""
    stage = "decode"


class OutOfRangeError(PipelineError, ValueError):
    """Converted coordinate lies outside valid WGS84 bounds."""
    stage = "convert"

    def __init__(self, axis: str, value: float, lower: float, upper: float):
        self.axis = axis
        self.value = value
        super().__init__(f"{axis.capitalize()} must be between {lower:g} and {upper:g} degrees, got {value!r}")


class SinkFailure(PipelineError):
    """Output document could not be written."""
    stage = "write"

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Failed to write {path}: {message}")
