"""Unit tests for building the styled visual document."""

import unittest
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from nds2kml.coordinates import FixedPointCoordinate
from nds2kml.domain.enums import AltitudeMode, GeometryRole
from nds2kml.domain.models import LineStyle
from nds2kml.errors import OutOfRangeError
from nds2kml.pipeline.build import DocumentBuilder, build, style_id
from nds2kml.pipeline.extract import GeometryGroups, extract

from .fixtures import presentation, sample_layer


class TestDocumentBuilder(unittest.TestCase):

    def setUp(self):
        self.presentation = presentation()
        self.builder = DocumentBuilder(self.presentation)

    def test_end_to_end_structure(self):
        layer = sample_layer()
        document = self.builder.build(extract(layer))

        self.assertEqual(document.name, "Test Tile")
        self.assertEqual([group.role for group in document.groups], [GeometryRole.CENTER, GeometryRole.BOUNDARY])
        self.assertEqual([group.name for group in document.groups], ["Test Center", "Test Boundary"])
        self.assertEqual([len(group.paths) for group in document.groups], [1, 1])
        self.assertEqual(len(document.groups[0].paths[0].coordinates), 3)
        self.assertEqual(len(document.groups[1].paths[0].coordinates), 2)

        # Every output elevation is the input centimetres over 100
        for sub_layer, group in ((layer.center_line_geometry_layer, document.groups[0]),
                                 (layer.boundary_geometry_layer, document.groups[1])):
            positions = sub_layer.buffers.lines_3d[0].positions
            for pos, coordinate in zip(positions, group.paths[0].coordinates):
                self.assertEqual(coordinate[2], pytest.approx(pos.elevation / 100.0))

    def test_coordinates_converted_in_order(self):
        document = self.builder.build(extract(sample_layer()))
        coordinates = document.groups[0].paths[0].coordinates

        self.assertEqual(coordinates[0], (-90.0, 45.0, pytest.approx(123.45)))
        lons = [c[0] for c in coordinates]
        self.assertEqual(lons, sorted(lons))

    def test_path_flags_and_styles(self):
        document = self.builder.build(extract(sample_layer()))

        for group in document.groups:
            for path in group.paths:
                self.assertEqual(path.altitude_mode, AltitudeMode.RELATIVE_TO_GROUND)
                self.assertFalse(path.extrude)
                self.assertTrue(path.tessellate)
                self.assertEqual(path.style_id, style_id(group.role))

        self.assertEqual(document.styles["centerStyle"], LineStyle(color="ff00a5ff", width=4))
        self.assertEqual(document.styles["boundaryStyle"], LineStyle(color="ffffffff", width=2))

    def test_empty_groups(self):
        document = self.builder.build(GeometryGroups())

        self.assertEqual(len(document.groups), 2)
        self.assertTrue(all(group.paths == () for group in document.groups))
        self.assertEqual(document.path_count, 0)

    def test_out_of_range_vertex_aborts(self):
        polyline = (FixedPointCoordinate(0, 0), FixedPointCoordinate(0, 2 ** 29))
        # Second vertex decodes just above the pole
        with patch("nds2kml.coordinates.fixed_lat_to_degrees", side_effect=[0.0, 90.0000001]):
            with self.assertRaises(OutOfRangeError):
                self.builder.build(GeometryGroups(center=[], boundary=[polyline]))

    def test_style_override(self):
        red = LineStyle(color="ff0000ff", width=6)
        document = build(extract(sample_layer()), lambda role: red, self.presentation)
        self.assertEqual(set(document.styles.values()), {red})

    def test_document_is_frozen(self):
        document = self.builder.build(GeometryGroups())
        with self.assertRaises(ValidationError):
            document.name = "changed"

    def test_document_contents_are_immutable(self):
        document = self.builder.build(extract(sample_layer()))

        self.assertIsInstance(document.groups, tuple)
        with self.assertRaises(AttributeError):
            document.groups[0].paths.clear()
        with self.assertRaises(TypeError):
            document.groups[0].paths[0].coordinates[0] = (0.0, 0.0, 0.0)
        self.assertEqual(document.path_count, 2)

    def test_counts(self):
        document = self.builder.build(extract(sample_layer()))
        self.assertEqual(document.path_count, 2)
        self.assertEqual(document.coordinate_count, 5)
