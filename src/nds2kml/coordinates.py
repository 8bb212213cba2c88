"""
NDS fixed-point coordinates and WGS84 conversion.

NDS stores angles as integers where 2^30 units equal 90 degrees. Longitude
covers the full circle (2^32 units = 360 degrees) and is stored unsigned;
latitude covers a half circle (2^31 units = 180 degrees). Negative angles are
wrapped into the unsigned range on the way in and unwrapped on the way out.

Elevation is stored in centimetres and emitted in metres.

Usage:
    from nds2kml.coordinates import FixedPointCoordinate
    geo = FixedPointCoordinate(lon=3221225472, lat=536870912, elevation=12345).to_geo()
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import DecodeFailure, OutOfRangeError

# =============================================================================
# Geodetic constants
# =============================================================================

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

LON_EXTENT = MAX_LONGITUDE - MIN_LONGITUDE
LAT_EXTENT = MAX_LATITUDE - MIN_LATITUDE

# Fixed-point encoding
QUARTER_CIRCLE = 0x40000000   # 2^30 units = 90 degrees
HALF_CIRCLE = 0x80000000      # 2^31 units = 180 degrees
FULL_CIRCLE = 0x100000000     # 2^32 units = 360 degrees

QUANTIZATION_STEP = 90.0 / QUARTER_CIRCLE  # ~8.38e-8 degrees

CENTIMETERS_PER_METER = 100.0


# =============================================================================
# Conversion functions
# =============================================================================

def degrees_lon_to_fixed(lon: float) -> int:
    """Convert WGS84 longitude in degrees to an unsigned NDS longitude."""
    x = math.floor(lon / 90.0 * QUARTER_CIRCLE)
    return x if x >= 0 else x + FULL_CIRCLE


def degrees_lat_to_fixed(lat: float) -> int:
    """Convert WGS84 latitude in degrees to an NDS latitude in [0, 2^31)."""
    y = math.floor(lat / 90.0 * QUARTER_CIRCLE)
    return y if y >= 0 else y + HALF_CIRCLE


def fixed_lon_to_degrees(lon: int) -> float:
    """Convert an NDS longitude back to WGS84 degrees."""
    if lon >= HALF_CIRCLE:
        lon -= FULL_CIRCLE
    return 90.0 * lon / QUARTER_CIRCLE


def fixed_lat_to_degrees(lat: int) -> float:
    """Convert an NDS latitude back to WGS84 degrees."""
    if lat >= QUARTER_CIRCLE:
        lat -= HALF_CIRCLE
    return 90.0 * lat / QUARTER_CIRCLE


def centimeters_to_meters(elevation: int) -> float:
    return elevation / CENTIMETERS_PER_METER


def meters_to_centimeters(elevation: float) -> int:
    return round(elevation * CENTIMETERS_PER_METER)


# =============================================================================
# Validation
# =============================================================================

def _check_range(axis: str, value: float, lower: float, upper: float) -> None:
    # NaN fails every comparison, so test finiteness explicitly
    if not math.isfinite(value) or value < lower or value > upper:
        raise OutOfRangeError(axis, value, lower, upper)


def validate(lon: float, lat: float, elevation: float = 0.0) -> GeoCoordinate:
    """
    Validate a WGS84 position and return it as a GeoCoordinate.

    Raises:
        OutOfRangeError: If longitude is outside [-180, 180] or latitude
            outside [-90, 90]
    """
    return GeoCoordinate(lon=lon, lat=lat, elevation=elevation)


# =============================================================================
# Value types
# =============================================================================

@dataclass(frozen=True)
class GeoCoordinate:
    """WGS84 position in degrees with elevation in metres."""
    lon: float
    lat: float
    elevation: float = 0.0

    def __post_init__(self):
        """Reject positions outside geodetic bounds."""
        _check_range("longitude", self.lon, MIN_LONGITUDE, MAX_LONGITUDE)
        _check_range("latitude", self.lat, MIN_LATITUDE, MAX_LATITUDE)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.lon, self.lat, self.elevation)


@dataclass(frozen=True)
class FixedPointCoordinate:
    """NDS position in fixed-point units with elevation in centimetres."""
    lon: int
    lat: int
    elevation: int = 0

    def __post_init__(self):
        """Reject values outside the unsigned NDS encoding."""
        if not 0 <= self.lon < FULL_CIRCLE:
            raise DecodeFailure(f"NDS longitude must be in [0, 2^32), got {self.lon}")
        if not 0 <= self.lat < HALF_CIRCLE:
            raise DecodeFailure(f"NDS latitude must be in [0, 2^31), got {self.lat}")

    @classmethod
    def from_geo(cls, coordinate: GeoCoordinate) -> FixedPointCoordinate:
        """
        Encode a WGS84 coordinate into NDS fixed-point form.

        The forward transform floors, so decoding the result gives back the
        input only to within one quantization step.
        """
        return cls(
            lon=degrees_lon_to_fixed(coordinate.lon),
            lat=degrees_lat_to_fixed(coordinate.lat),
            elevation=meters_to_centimeters(coordinate.elevation),
        )

    def to_geo(self) -> GeoCoordinate:
        """
        Decode into a validated WGS84 coordinate.

        Raises:
            OutOfRangeError: If the decoded angles fall outside WGS84 bounds
        """
        return validate(
            fixed_lon_to_degrees(self.lon),
            fixed_lat_to_degrees(self.lat),
            centimeters_to_meters(self.elevation),
        )
