"""
Domain Models and Types

Core domain models and enumerations used throughout the pipeline.

Models:
- VisualDocument, VisualGroup, VisualPath, LineStyle: output document tree
- Presentation, GroupPresentation: labels and styles applied by the builder
- TileLayers: decoded layers of one tile

Enums:
- GeometryRole: polyline collections (center, boundary)
- AltitudeMode: KML altitude modes
- ExportFormat: export format options (kml, geojson, gpkg)
"""

from .enums import AltitudeMode, ExportFormat, GeometryRole
from .models import (
    GroupPresentation,
    LineStyle,
    Presentation,
    TileLayers,
    VisualDocument,
    VisualGroup,
    VisualPath,
)

__all__ = [
    "VisualDocument", "VisualGroup", "VisualPath", "LineStyle",
    "Presentation", "GroupPresentation", "TileLayers",
    "GeometryRole", "AltitudeMode", "ExportFormat"
]
