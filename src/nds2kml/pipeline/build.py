"""
DocumentBuilder - geometry groups to visual document

Structural transform from (group, polyline, vertex) to (folder, path,
coordinate). Every vertex is converted to WGS84 and validated before it enters
the document; one bad vertex aborts the whole build.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from ..domain.enums import AltitudeMode, GeometryRole
from ..domain.models import LineStyle, Presentation, VisualDocument, VisualGroup, VisualPath
from ..utils import timer
from .extract import GeometryGroups, Polyline

logger = logging.getLogger(__name__)


def style_id(role: GeometryRole) -> str:
    return f"{role.value}Style"


def convert_polyline(polyline: Polyline) -> tuple[tuple[float, float, float], ...]:
    """Convert and validate every vertex, keeping order."""
    return tuple(vertex.to_geo().as_tuple() for vertex in polyline)


def build_path(polyline: Polyline, role: GeometryRole) -> VisualPath:
    return VisualPath(
        style_id=style_id(role),
        altitude_mode=AltitudeMode.RELATIVE_TO_GROUND,
        extrude=False,
        tessellate=True,
        coordinates=convert_polyline(polyline),
    )


class DocumentBuilder:
    """
    Build a VisualDocument from extracted geometry.

    Args:
        presentation: Document name, folder labels and styles
        style_of: Optional override mapping a role to its line style
    """

    def __init__(
        self,
        presentation: Presentation,
        style_of: Optional[Callable[[GeometryRole], LineStyle]] = None
    ):
        self.presentation = presentation
        self.style_of = style_of or presentation.style_of

    @timer
    def build(self, groups: GeometryGroups) -> VisualDocument:
        """
        Build the document.

        Returns:
            VisualDocument with one group per role (center, boundary) and one
            path per polyline, in input order

        Raises:
            OutOfRangeError: If any converted vertex is outside WGS84 bounds
        """
        styles = {}
        visual_groups = []

        for role, polylines in groups.items():
            styles[style_id(role)] = self.style_of(role)
            paths = tuple(build_path(polyline, role) for polyline in polylines)
            visual_groups.append(VisualGroup(
                name=self.presentation.label_of(role),
                role=role,
                open=self.presentation.open,
                paths=paths,
            ))
            logger.debug(f"Built group '{self.presentation.label_of(role)}' with {len(paths):,} paths")

        document = VisualDocument(
            name=self.presentation.document_name,
            open=self.presentation.open,
            styles=styles,
            groups=tuple(visual_groups),
        )
        logger.info(
            f"Document '{document.name}': {document.path_count:,} paths, "
            f"{document.coordinate_count:,} coordinates"
        )
        return document


def build(
    groups: GeometryGroups,
    style_of: Callable[[GeometryRole], LineStyle],
    presentation: Presentation
) -> VisualDocument:
    """Functional entry point for DocumentBuilder."""
    return DocumentBuilder(presentation, style_of).build(groups)
