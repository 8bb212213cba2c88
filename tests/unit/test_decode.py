"""Unit tests for zserio tile decoding."""

import unittest
from types import SimpleNamespace
from unittest.mock import patch

import zserio

from nds2kml.config.settings import DecoderConfig
from nds2kml.errors import DecodeFailure
from nds2kml.pipeline.decode import TileDecoder, load_type


class SmartLayerTile:
    pass


class LaneLayer:
    pass


class LaneGeometryLayer:
    pass


def tile_with_layers(*payloads):
    return SimpleNamespace(layers=[
        SimpleNamespace(layer=SimpleNamespace(data=payload)) for payload in payloads
    ])


class TestTileDecoder(unittest.TestCase):

    def setUp(self):
        self.decoder = TileDecoder(SmartLayerTile, LaneLayer, LaneGeometryLayer)

    @patch("nds2kml.pipeline.decode.zserio.deserialize_from_bytes")
    def test_decodes_lane_layers(self, mock_deserialize):
        tile = tile_with_layers(b"lane", b"geometry")
        lane, geometry = object(), object()
        mock_deserialize.side_effect = [tile, lane, geometry]

        result = self.decoder.decode("545379780", b"tile-bytes")

        self.assertEqual(result.tile_id, "545379780")
        self.assertIs(result.lane_layer, lane)
        self.assertIs(result.lane_geometry_layer, geometry)
        calls = [(c.args[0], c.args[1]) for c in mock_deserialize.call_args_list]
        self.assertEqual(calls, [
            (SmartLayerTile, b"tile-bytes"),
            (LaneLayer, b"lane"),
            (LaneGeometryLayer, b"geometry"),
        ])

    @patch("nds2kml.pipeline.decode.zserio.deserialize")
    @patch("nds2kml.pipeline.decode.zserio.deserialize_from_bytes")
    def test_bit_buffer_payload(self, mock_from_bytes, mock_deserialize):
        lane_buffer = zserio.BitBuffer(b"\x01")
        geometry_buffer = zserio.BitBuffer(b"\x02")
        mock_from_bytes.return_value = tile_with_layers(lane_buffer, geometry_buffer)
        mock_deserialize.side_effect = ["lane", "geometry"]

        result = self.decoder.decode("1", b"tile")

        self.assertEqual(result.lane_geometry_layer, "geometry")
        mock_deserialize.assert_any_call(LaneGeometryLayer, geometry_buffer)

    @patch("nds2kml.pipeline.decode.zserio.deserialize_from_bytes")
    def test_missing_geometry_layer(self, mock_deserialize):
        mock_deserialize.return_value = tile_with_layers(b"lane")
        with self.assertRaises(DecodeFailure) as ctx:
            self.decoder.decode("1", b"tile")
        self.assertIn("1 layers", str(ctx.exception))
        self.assertEqual(ctx.exception.stage, "decode")

    @patch("nds2kml.pipeline.decode.zserio.deserialize_from_bytes")
    def test_malformed_bytes(self, mock_deserialize):
        mock_deserialize.side_effect = zserio.PythonRuntimeException("Reading behind the stream!")
        with self.assertRaises(DecodeFailure) as ctx:
            self.decoder.decode("1", b"\x00")
        self.assertIn("SmartLayerTile", str(ctx.exception))

    @patch("nds2kml.pipeline.decode.zserio.deserialize_from_bytes")
    def test_layer_without_data(self, mock_deserialize):
        mock_deserialize.return_value = SimpleNamespace(layers=[SimpleNamespace(layer=None)] * 2)
        with self.assertRaises(DecodeFailure):
            self.decoder.decode("1", b"tile")


class TestLoadType(unittest.TestCase):

    def test_loads_class(self):
        self.assertIs(load_type("types:SimpleNamespace"), SimpleNamespace)

    def test_missing_module(self):
        with self.assertRaises(DecodeFailure):
            load_type("nds_bindings_that_do_not_exist.api:SmartLayerTile")

    def test_missing_class(self):
        with self.assertRaises(DecodeFailure):
            load_type("types:NoSuchClass")

    def test_from_config(self):
        decoder = TileDecoder.from_config(DecoderConfig(
            tile_type="types:SimpleNamespace",
            lane_layer_type="collections:OrderedDict",
            lane_geometry_layer_type="collections:Counter",
        ))
        self.assertIs(decoder.tile_type, SimpleNamespace)
