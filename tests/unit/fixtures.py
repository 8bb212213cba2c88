"""Builders for decoded-layer stand-ins shaped like the generated zserio bindings."""

from types import SimpleNamespace

from nds2kml.domain.enums import GeometryRole
from nds2kml.domain.models import GroupPresentation, LineStyle, Presentation


def position(lon, lat, elevation=0):
    return SimpleNamespace(longitude=lon, latitude=lat, elevation=elevation)


def line(*positions):
    return SimpleNamespace(positions=list(positions))


def geometry_sub_layer(lines):
    if lines is None:
        return None
    return SimpleNamespace(buffers=SimpleNamespace(lines_3d=list(lines)))


def lane_geometry_layer(center=None, boundary=None):
    return SimpleNamespace(
        center_line_geometry_layer=geometry_sub_layer(center),
        boundary_geometry_layer=geometry_sub_layer(boundary),
    )


def sample_layer():
    """One 3-vertex center line and one 2-vertex boundary line near 45N 90W."""
    center = line(
        position(3221225472, 536870912, 12345),
        position(3221225572, 536870962, 12400),
        position(3221225672, 536871012, 12455),
    )
    boundary = line(
        position(3221225472, 536870900, 10000),
        position(3221225672, 536871000, 10050),
    )
    return lane_geometry_layer(center=[center], boundary=[boundary])


def presentation():
    return Presentation(
        document_name="Test Tile",
        open=True,
        groups={
            GeometryRole.CENTER: GroupPresentation(
                label="Test Center", style=LineStyle(color="ff00a5ff", width=4)
            ),
            GeometryRole.BOUNDARY: GroupPresentation(
                label="Test Boundary", style=LineStyle(color="ffffffff", width=2)
            ),
        },
    )
