"""
Exporter - VisualDocument serialization

Writes the built document as KML (folders of styled line placemarks), GeoJSON
or GeoPackage. Output is first written into a temporary directory next to the
target and then moved into place, so a failed write never leaves a partial file.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import geopandas as gpd
import simplekml
from shapely.geometry import LineString, Point

from ..domain.enums import ExportFormat
from ..domain.models import VisualDocument
from ..errors import SinkFailure

logger = logging.getLogger(__name__)

FEATURE_COLUMNS = ["group", "role", "style", "color", "width", "altitude_mode", "geometry"]


def infer_format(path: Path) -> ExportFormat:
    """Infer export format from file extension, defaulting to KML."""
    suffix = path.suffix.lower()
    if suffix in ['.geojson', '.json']:
        return ExportFormat.GEOJSON
    if suffix == '.gpkg':
        return ExportFormat.GPKG
    return ExportFormat.KML


def to_kml(document: VisualDocument) -> simplekml.Kml:
    """Build the simplekml tree: document, one folder per group, one placemark per path."""
    kml = simplekml.Kml(name=document.name, open=int(document.open))

    styles = {}
    for style_id, line_style in document.styles.items():
        style = simplekml.Style()
        style.linestyle.color = line_style.color.lower()
        style.linestyle.width = line_style.width
        styles[style_id] = style

    for group in document.groups:
        folder = kml.newfolder(name=group.name, open=int(group.open))
        for path in group.paths:
            line = folder.newlinestring(coords=list(path.coordinates))
            line.altitudemode = path.altitude_mode.value
            line.extrude = int(path.extrude)
            line.tessellate = int(path.tessellate)
            line.style = styles[path.style_id]

    return kml


def path_geometry(coordinates):
    """3-D LineString for a path, a Point for a single vertex, None when empty."""
    if len(coordinates) >= 2:
        return LineString(coordinates)
    if coordinates:
        return Point(coordinates[0])
    return None


def to_geodataframe(document: VisualDocument, group_name: Optional[str] = None) -> gpd.GeoDataFrame:
    """
    Flatten the document into one feature per path, in document order.

    Groups without paths contribute no rows; the frame keeps its columns and CRS.
    """
    records = []
    for group in document.groups:
        if group_name is not None and group.name != group_name:
            continue
        for path in group.paths:
            style = document.styles[path.style_id]
            records.append({
                "group": group.name,
                "role": group.role.value,
                "style": path.style_id,
                "color": style.color,
                "width": style.width,
                "altitude_mode": path.altitude_mode.value,
                "geometry": path_geometry(path.coordinates),
            })

    return gpd.GeoDataFrame(records, columns=FEATURE_COLUMNS, geometry="geometry", crs="EPSG:4326")


class Exporter:
    """
    Multi-format document exporter.

    Format is inferred from the output extension unless given explicitly.
    """

    def __init__(self, out_path: Path, fmt: Optional[ExportFormat] = None):
        """
        Initialize exporter with output path and format.

        Args:
            out_path: Output file path
            fmt: Explicit format override
        """
        self.out_path = Path(out_path)
        self.fmt = fmt or infer_format(self.out_path)

    def write(self, document: VisualDocument) -> Path:
        """
        Write the document.

        Returns:
            Path to the created file

        Raises:
            SinkFailure: If the document cannot be serialized or moved into place
        """
        try:
            self.out_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(dir=self.out_path.parent, prefix=".nds2kml-") as tmp_dir:
                staged = Path(tmp_dir) / self.out_path.name

                if self.fmt == ExportFormat.KML:
                    self._write_kml(document, staged)
                elif self.fmt == ExportFormat.GEOJSON:
                    self._write_geojson(document, staged)
                elif self.fmt == ExportFormat.GPKG:
                    self._write_gpkg(document, staged)
                else:
                    raise ValueError(f"Unsupported export format: {self.fmt}")

                os.replace(staged, self.out_path)
        except SinkFailure:
            raise
        except Exception as e:
            raise SinkFailure(self.out_path, f"{type(e).__name__}: {e}") from e

        logger.info(f"Successfully exported to {self.out_path} ({self.fmt.value})")
        return self.out_path

    def _write_kml(self, document: VisualDocument, path: Path) -> None:
        to_kml(document).save(str(path))
        logger.debug(f"KML written: {document.path_count:,} placemarks in {len(document.groups)} folders")

    def _write_geojson(self, document: VisualDocument, path: Path) -> None:
        gdf = to_geodataframe(document)
        features = json.loads(gdf.to_json()).get("features", [])

        geojson_data = {
            "type": "FeatureCollection",
            "name": document.name,
            "features": features,
            "metadata": {
                "generated": datetime.now(timezone.utc).isoformat(),
                "source": "nds2kml",
                "groups": {group.name: len(group.paths) for group in document.groups},
                "count": len(features),
            },
        }

        with open(path, "w", encoding="utf-8") as f:
            json.dump(geojson_data, f)
        logger.debug(f"GeoJSON written: {len(features):,} features")

    def _write_gpkg(self, document: VisualDocument, path: Path) -> None:
        for index, group in enumerate(document.groups):
            gdf = to_geodataframe(document, group_name=group.name)
            mode = 'w' if index == 0 else 'a'
            gdf.to_file(path, driver="GPKG", layer=group.role.value, mode=mode)
            logger.debug(f"Exported layer '{group.role.value}' with {len(gdf)} features")
