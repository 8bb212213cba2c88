"""
TileSource - Smart-layer tile retrieval

Fetches the raw bytes of one tile from the tile service over HTTP using a
static API key header.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from ..config.settings import TileServiceConfig
from ..errors import TransportFailure

logger = logging.getLogger(__name__)


class TileSource:
    """
    HTTP client for the smart-layer tile service.

    The service is asked for a tile by identifier and answers with the
    serialized tile. Any transport error or non-2xx answer aborts the run.
    """

    TILE_ENDPOINT = "{base_path}/tiles/{tile_id}/layer"

    def __init__(self, service: TileServiceConfig, session: Optional[requests.Session] = None):
        """
        Initialize tile source.

        Args:
            service: Tile service endpoint and credential configuration
            session: Optional pre-built requests session
        """
        self.service = service
        self.session = session or requests.Session()
        self.session.headers.update({
            service.api_key_header: service.api_key,
            'Accept': 'application/octet-stream',
        })

    def tile_url(self, tile_id: str) -> str:
        return self.TILE_ENDPOINT.format(base_path=self.service.base_path, tile_id=tile_id)

    def fetch(self, tile_id: str) -> bytes:
        """
        Fetch the serialized tile.

        Args:
            tile_id: Packed NDS tile identifier

        Returns:
            Raw tile bytes

        Raises:
            TransportFailure: On connection errors, timeouts, non-2xx status or empty body
        """
        url = self.tile_url(tile_id)
        logger.info(f"Requesting tile {tile_id} from {url}")

        try:
            response = self.session.get(url, timeout=self.service.timeout_s)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportFailure(tile_id, str(e)) from e

        payload = response.content
        if not payload:
            raise TransportFailure(tile_id, "service returned an empty body")

        logger.info(f"Received {len(payload):,} bytes for tile {tile_id}")
        return payload

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> TileSource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
