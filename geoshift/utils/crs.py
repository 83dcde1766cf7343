"""Coordinate Reference System (CRS) codes used throughout geoshift.

This module defines the codes of the built-in coordinate systems:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326), the hub system
- XY_CRS: Web Mercator projected coordinates (EPSG:3857)
- GCJ02_CRS / GCJ02_XY_CRS: the offset GCJ-02 degrees and its Mercator projection
- BD09_CRS / BD09_XY_CRS: the warped BD-09 degrees and its banded Mercator projection
"""

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Every other system has an edge to and from it
LATLON_CRS = "EPSG:4326"

# Web Mercator projected coordinate system (EPSG:3857)
# Coordinates are in meters (easting, northing)
XY_CRS = "EPSG:3857"

# GCJ-02 longitude/latitude, WGS84 shifted by the administrative offset
GCJ02_CRS = "GCJ-02-Geo"

# Spherical Mercator projection of GCJ-02 degrees
GCJ02_XY_CRS = "GCJ-02-Mecator"

# BD-09 longitude/latitude, GCJ-02 warped in polar form
BD09_CRS = "BD-09-Geo"

# Banded polynomial Mercator projection of BD-09 degrees
BD09_XY_CRS = "BD-09-Mecator"

# The system composed transforms pass through when no direct edge exists
HUB_CRS = LATLON_CRS
