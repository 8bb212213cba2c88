"""
TileDecoder - zserio deserialization of smart-layer tiles

Turns the raw tile bytes into the decoded lane layer and lane geometry layer.
The schema classes are produced by the zserio code generator from the NDS.live
schema and are located through 'package.module:Class' references.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

import zserio

from ..config.settings import DecoderConfig
from ..domain.models import TileLayers
from ..errors import DecodeFailure

logger = logging.getLogger(__name__)

LANE_LAYER_INDEX = 0
LANE_GEOMETRY_LAYER_INDEX = 1


def load_type(reference: str) -> type:
    """
    Import a generated class from a 'package.module:Class' reference.

    Raises:
        DecodeFailure: If the module or class cannot be imported
    """
    module_name, _, class_name = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise DecodeFailure(
            f"Generated type '{reference}' is not importable: {e}. "
            f"Generate the NDS.live Python bindings with zserio and install them."
        ) from e


class TileDecoder:
    """Decode a serialized smart-layer tile into its lane layers."""

    def __init__(self, tile_type: type, lane_layer_type: type, lane_geometry_layer_type: type):
        self.tile_type = tile_type
        self.lane_layer_type = lane_layer_type
        self.lane_geometry_layer_type = lane_geometry_layer_type

    @classmethod
    def from_config(cls, config: DecoderConfig) -> TileDecoder:
        return cls(
            tile_type=load_type(config.tile_type),
            lane_layer_type=load_type(config.lane_layer_type),
            lane_geometry_layer_type=load_type(config.lane_geometry_layer_type),
        )

    def decode(self, tile_id: str, payload: bytes) -> TileLayers:
        """
        Decode tile bytes.

        Args:
            tile_id: Tile identifier, used for reporting
            payload: Serialized tile

        Returns:
            TileLayers holding the decoded lane and lane geometry layers

        Raises:
            DecodeFailure: If the tile or one of its layers is malformed or missing
        """
        tile = self._deserialize(self.tile_type, payload, "tile")
        layers = getattr(tile, "layers", None)
        if layers is None or len(layers) <= LANE_GEOMETRY_LAYER_INDEX:
            found = 0 if layers is None else len(layers)
            raise DecodeFailure(
                f"Tile {tile_id} holds {found} layers, expected lane and lane geometry layers"
            )

        lane_layer = self._deserialize(
            self.lane_layer_type, self._layer_payload(layers, LANE_LAYER_INDEX), "lane layer"
        )
        lane_geometry_layer = self._deserialize(
            self.lane_geometry_layer_type,
            self._layer_payload(layers, LANE_GEOMETRY_LAYER_INDEX),
            "lane geometry layer"
        )

        logger.info(f"Decoded tile {tile_id}: {len(layers)} layers")
        return TileLayers(tile_id=tile_id, lane_layer=lane_layer, lane_geometry_layer=lane_geometry_layer)

    @staticmethod
    def _layer_payload(layers: Any, index: int) -> Any:
        try:
            return layers[index].layer.data
        except AttributeError as e:
            raise DecodeFailure(f"Layer {index} has no data payload: {e}") from e

    @staticmethod
    def _deserialize(obj_class: type, payload: Any, what: str) -> Any:
        try:
            if isinstance(payload, zserio.BitBuffer):
                return zserio.deserialize(obj_class, payload)
            return zserio.deserialize_from_bytes(obj_class, bytes(payload))
        except (zserio.PythonRuntimeException, ValueError, TypeError, AttributeError) as e:
            raise DecodeFailure(f"Failed to decode {what} as {obj_class.__name__}: {e}") from e
