"""Unit tests for lane polyline extraction from a decoded geometry layer."""

import unittest
from types import SimpleNamespace

from nds2kml.coordinates import FixedPointCoordinate
from nds2kml.domain.enums import GeometryRole
from nds2kml.errors import DecodeFailure
from nds2kml.pipeline.extract import GeometryGroups, extract, extract_lines

from .fixtures import lane_geometry_layer, line, position, sample_layer


class TestExtract(unittest.TestCase):

    def test_both_collections(self):
        groups = extract(sample_layer())

        self.assertEqual(len(groups.center), 1)
        self.assertEqual(len(groups.boundary), 1)
        self.assertEqual(len(groups.center[0]), 3)
        self.assertEqual(len(groups.boundary[0]), 2)
        self.assertEqual(
            groups.center[0][0],
            FixedPointCoordinate(lon=3221225472, lat=536870912, elevation=12345)
        )

    def test_vertex_order_preserved(self):
        # Deliberately non-monotonic to catch any sorting
        vertices = [position(30, 10, 1), position(10, 30, 2), position(20, 20, 3), position(10, 30, 2)]
        groups = extract(lane_geometry_layer(center=[line(*vertices)], boundary=[]))

        self.assertEqual(
            [(v.lon, v.lat, v.elevation) for v in groups.center[0]],
            [(30, 10, 1), (10, 30, 2), (20, 20, 3), (10, 30, 2)]
        )

    def test_line_order_preserved(self):
        lines = [line(position(i, i)) for i in range(5)]
        groups = extract(lane_geometry_layer(center=[], boundary=lines))
        self.assertEqual([polyline[0].lon for polyline in groups.boundary], [0, 1, 2, 3, 4])

    def test_empty_collection(self):
        groups = extract(lane_geometry_layer(center=[], boundary=[line(position(1, 1))]))
        self.assertEqual(groups.center, [])
        self.assertEqual(len(groups.boundary), 1)

    def test_absent_sub_layer(self):
        groups = extract(SimpleNamespace(center_line_geometry_layer=None))
        self.assertEqual(groups.center, [])
        self.assertEqual(groups.boundary, [])

    def test_absent_buffers(self):
        layer = SimpleNamespace(
            center_line_geometry_layer=SimpleNamespace(buffers=None),
            boundary_geometry_layer=SimpleNamespace(buffers=SimpleNamespace(lines_3d=None)),
        )
        self.assertEqual(extract(layer), GeometryGroups())

    def test_line_without_positions(self):
        groups = extract(lane_geometry_layer(center=[SimpleNamespace(positions=[])]))
        self.assertEqual(groups.center, [()])

    def test_camel_case_bindings(self):
        layer = SimpleNamespace(
            centerLineGeometryLayer=SimpleNamespace(
                buffers=SimpleNamespace(lines3D=[line(position(5, 6, 7))])
            )
        )
        polylines = extract_lines(layer, GeometryRole.CENTER)
        self.assertEqual(polylines, [(FixedPointCoordinate(5, 6, 7),)])

    def test_malformed_position(self):
        bad = SimpleNamespace(longitude=1, latitude=2)
        with self.assertRaises(DecodeFailure) as ctx:
            extract(lane_geometry_layer(center=[line(bad)]))
        self.assertEqual(ctx.exception.stage, "extract")

    def test_position_outside_fixed_point_domain(self):
        bad = position(2 ** 32, 0)
        with self.assertRaises(DecodeFailure) as ctx:
            extract(lane_geometry_layer(boundary=[line(position(0, 0), bad)]))
        self.assertEqual(ctx.exception.stage, "extract")
        self.assertIn("longitude", str(ctx.exception))


class TestGeometryGroups(unittest.TestCase):

    def test_of_and_items(self):
        center = [(FixedPointCoordinate(1, 2, 3),)]
        groups = GeometryGroups(center=center, boundary=[])

        self.assertIs(groups.of(GeometryRole.CENTER), center)
        self.assertEqual(groups.of(GeometryRole.BOUNDARY), [])
        self.assertEqual([role for role, _ in groups.items()], [GeometryRole.CENTER, GeometryRole.BOUNDARY])
        self.assertEqual([polylines for _, polylines in groups.items()], [center, []])
