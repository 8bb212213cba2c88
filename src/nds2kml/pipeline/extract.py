"""
GeometryExtractor - lane polylines from a decoded lane geometry layer

Reads the center-line and boundary geometry sub-layers and returns their 3-D
lines as ordered sequences of fixed-point coordinates. Vertex order is kept as
stored; nothing is reordered, deduplicated or simplified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..coordinates import FixedPointCoordinate
from ..domain.enums import GeometryRole
from ..errors import DecodeFailure

logger = logging.getLogger(__name__)

Polyline = tuple[FixedPointCoordinate, ...]

# Sub-layer attribute per role. Generated bindings differ in how they case
# names, so each step lists the accepted spellings.
_ROLE_LAYERS = {
    GeometryRole.CENTER: ("center_line_geometry_layer", "centerLineGeometryLayer"),
    GeometryRole.BOUNDARY: ("boundary_geometry_layer", "boundaryGeometryLayer"),
}
_BUFFERS = ("buffers",)
_LINES_3D = ("lines_3d", "lines3_d", "lines3d", "lines3D")
_POSITIONS = ("positions",)


@dataclass(frozen=True)
class GeometryGroups:
    """Center and boundary polylines of one tile."""
    center: list[Polyline] = field(default_factory=list)
    boundary: list[Polyline] = field(default_factory=list)

    def of(self, role: GeometryRole) -> list[Polyline]:
        return self.center if role is GeometryRole.CENTER else self.boundary

    def items(self) -> Iterable[tuple[GeometryRole, list[Polyline]]]:
        for role in (GeometryRole.CENTER, GeometryRole.BOUNDARY):
            yield role, self.of(role)


def _attr(obj: Any, names: tuple[str, ...]) -> Optional[Any]:
    for name in names:
        value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _to_fixed(position: Any) -> FixedPointCoordinate:
    try:
        return FixedPointCoordinate(
            lon=int(position.longitude),
            lat=int(position.latitude),
            elevation=int(position.elevation),
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise DecodeFailure(f"Unexpected position structure: {e}", stage="extract") from e
    except DecodeFailure as e:
        raise DecodeFailure(str(e), stage="extract") from e


def extract_lines(layer: Any, role: GeometryRole) -> list[Polyline]:
    """
    Extract the polylines of one role.

    An absent sub-layer, buffer or line list yields an empty list.
    """
    sub_layer = _attr(layer, _ROLE_LAYERS[role])
    if sub_layer is None:
        logger.debug(f"No {role.value} geometry layer present")
        return []

    buffers = _attr(sub_layer, _BUFFERS)
    lines = _attr(buffers, _LINES_3D) if buffers is not None else None
    if not lines:
        return []

    polylines = []
    for line in lines:
        positions = _attr(line, _POSITIONS) or []
        polylines.append(tuple(_to_fixed(position) for position in positions))
    return polylines


def extract(layer: Any) -> GeometryGroups:
    """
    Pull the center-line and boundary polylines from a lane geometry layer.

    Args:
        layer: Decoded lane geometry layer

    Returns:
        GeometryGroups with both collections, possibly empty

    Raises:
        DecodeFailure: If a position lacks longitude, latitude or elevation
    """
    groups = GeometryGroups(
        center=extract_lines(layer, GeometryRole.CENTER),
        boundary=extract_lines(layer, GeometryRole.BOUNDARY),
    )
    logger.info(
        f"Extracted {len(groups.center):,} center lines and {len(groups.boundary):,} boundary lines"
    )
    return groups
