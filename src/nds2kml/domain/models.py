"""
Pipeline Domain Models

Pydantic models for the visual document produced by the pipeline and for the
presentation settings that style it. Document models are immutable once built.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .enums import AltitudeMode, GeometryRole


class LineStyle(BaseModel):
    """Solid line style shared by every path in a group."""
    color: str = Field(..., pattern=r"^[0-9a-fA-F]{8}$", description="KML colour as aabbggrr hex")
    width: float = Field(..., gt=0, description="Line width in pixels")

    class Config:
        """Pydantic configuration."""
        frozen = True


class VisualPath(BaseModel):
    """One styled polyline with its converted coordinates."""
    style_id: str = Field(..., description="Key into the document style table")
    altitude_mode: AltitudeMode = Field(default=AltitudeMode.RELATIVE_TO_GROUND)
    extrude: bool = Field(default=False)
    tessellate: bool = Field(default=True)
    coordinates: tuple[tuple[float, float, float], ...] = Field(
        default_factory=tuple, description="(lon, lat, elevation in metres) in path order"
    )

    class Config:
        """Pydantic configuration."""
        frozen = True


class VisualGroup(BaseModel):
    """Labelled container holding one path per input polyline."""
    name: str = Field(..., description="Folder label")
    role: GeometryRole = Field(..., description="Polyline collection this group came from")
    open: bool = Field(default=True)
    paths: tuple[VisualPath, ...] = Field(default_factory=tuple)

    class Config:
        """Pydantic configuration."""
        frozen = True


class VisualDocument(BaseModel):
    """Complete output document: style table plus ordered groups."""
    name: str = Field(..., description="Document title")
    open: bool = Field(default=True)
    styles: dict[str, LineStyle] = Field(default_factory=dict)
    groups: tuple[VisualGroup, ...] = Field(default_factory=tuple)

    class Config:
        """Pydantic configuration."""
        frozen = True

    @property
    def path_count(self) -> int:
        return sum(len(group.paths) for group in self.groups)

    @property
    def coordinate_count(self) -> int:
        return sum(len(path.coordinates) for group in self.groups for path in group.paths)


class GroupPresentation(BaseModel):
    """Label and style for one geometry role."""
    label: str = Field(..., description="Folder label")
    style: LineStyle

    class Config:
        """Pydantic configuration."""
        frozen = True


class Presentation(BaseModel):
    """Presentation constants applied when building a document."""
    document_name: str = Field(default="NDS.live Island 1")
    open: bool = Field(default=True)
    groups: dict[GeometryRole, GroupPresentation]

    class Config:
        """Pydantic configuration."""
        frozen = True

    def style_of(self, role: GeometryRole) -> LineStyle:
        return self.groups[role].style

    def label_of(self, role: GeometryRole) -> str:
        return self.groups[role].label


class TileLayers(BaseModel):
    """Decoded layers of one smart-layer tile."""
    tile_id: str
    lane_layer: Optional[Any] = Field(None, description="Decoded lane layer")
    lane_geometry_layer: Any = Field(..., description="Decoded lane geometry layer")

    class Config:
        """Pydantic configuration."""
        arbitrary_types_allowed = True
        frozen = True
