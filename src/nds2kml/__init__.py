"""
nds2kml - NDS.live lane geometry to KML.

Fetches one smart-layer tile, decodes its lane geometry layer, converts the
NDS fixed-point coordinates to WGS84 and writes the lane center and boundary
lines as a styled 3-D document.
"""

__version__ = "0.1.0"
