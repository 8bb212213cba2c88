"""
Pipeline Enumerations

Core enums for type safety and clear interface definitions across the pipeline.
"""

from enum import Enum


class GeometryRole(str, Enum):
    """Polyline collections carried by a lane geometry layer."""
    CENTER = "center"       # Lane center lines
    BOUNDARY = "boundary"   # Lane boundary lines


class AltitudeMode(str, Enum):
    """KML altitude interpretation for path coordinates."""
    CLAMP_TO_GROUND = "clampToGround"
    RELATIVE_TO_GROUND = "relativeToGround"
    ABSOLUTE = "absolute"


class ExportFormat(str, Enum):
    """Export format options for data output."""
    KML = "kml"             # Google Earth document with styled folders
    GEOJSON = "geojson"     # Standards-compliant JSON format
    GPKG = "gpkg"           # SQLite-based format
