"""
nds2kml Pipeline Components

Fetch → Decode → Extract → Build → Export, one tile per run.

Components:
- source: TileSource for HTTP tile retrieval
- decode: TileDecoder for zserio tile and layer deserialization
- extract: GeometryExtractor functions for center and boundary polylines
- build: DocumentBuilder for the styled visual document
- export: Exporter for KML, GeoJSON and GeoPackage output
"""

from .build import DocumentBuilder
from .decode import TileDecoder
from .export import Exporter
from .extract import GeometryGroups, extract
from .source import TileSource

__all__ = ["TileSource", "TileDecoder", "GeometryGroups", "extract", "DocumentBuilder", "Exporter"]
