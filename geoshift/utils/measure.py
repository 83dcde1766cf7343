"""
Ground measurements of geometries in any registered system.

Geometry is first brought into WGS84 degrees through the registry, then measured
on the WGS84 ellipsoid with pyproj.Geod, so lengths and areas are the same
whichever system the caller drew in.
"""

from __future__ import annotations

import math
from typing import Sequence

from pyproj import Geod
from shapely.geometry import MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry

from geoshift.registry.registry_interface import RegistryInterface
from geoshift.utils.crs import LATLON_CRS
from geoshift.utils.geo import transform_geometry

WGS84_GEOD = Geod(ellps="WGS84")

# lengths above this are formatted in kilometers
KM_FORMAT_THRESHOLD = 100.0
# areas above this are formatted in square kilometers
KM2_FORMAT_THRESHOLD = 10000.0


def geodesic_length(geom: BaseGeometry, crs: str, registry: RegistryInterface) -> float:
    """
    Measure the length of a geometry along the ellipsoid.

    Args:
        geom: A LineString, MultiLineString or polygon (its rings are measured)
        crs: The code of the system the geometry is expressed in
        registry: The registry used to reach EPSG:4326

    Returns:
        The length in meters
    """
    geom = transform_geometry(geom, crs, LATLON_CRS, registry)
    return WGS84_GEOD.geometry_length(geom)


def geodesic_area(geom: BaseGeometry, crs: str, registry: RegistryInterface) -> float:
    """
    Measure the area of a polygon on the ellipsoid.

    The orientation of the rings does not matter; the area is always positive.

    Args:
        geom: A Polygon or MultiPolygon
        crs: The code of the system the geometry is expressed in
        registry: The registry used to reach EPSG:4326

    Returns:
        The area in square meters
    """
    geom = transform_geometry(geom, crs, LATLON_CRS, registry)
    area, _ = WGS84_GEOD.geometry_area_perimeter(geom)
    return abs(area)


def geodesic_distance(
    a: Sequence[float], b: Sequence[float], crs: str, registry: RegistryInterface
) -> float:
    """
    Measure the shortest distance between two points along the ellipsoid.

    Args:
        a: The first point as (x, y)
        b: The second point as (x, y)
        crs: The code of the system both points are expressed in
        registry: The registry used to reach EPSG:4326

    Returns:
        The distance in meters

    Examples:
        >>> from geoshift.registry.defaults import default_registry
        >>> round(geodesic_distance((0, 0), (1, 0), "EPSG:4326", default_registry()))
        111319
    """
    fn = registry.resolve(crs, LATLON_CRS)
    lon1, lat1 = fn(a[0], a[1])
    lon2, lat2 = fn(b[0], b[1])
    _, _, distance = WGS84_GEOD.inv(lon1, lat1, lon2, lat2)
    return distance


def geometry_center(geom: BaseGeometry, interior_point: bool = True) -> Point:
    """
    Get a point to anchor a label on a geometry.

    Polygons get a point guaranteed to lie inside them unless interior_point is False;
    every other geometry gets the center of its bounding box.
    """
    if interior_point and isinstance(geom, (Polygon, MultiPolygon)):
        return geom.representative_point()
    min_x, min_y, max_x, max_y = geom.bounds
    return Point((min_x + max_x) / 2, (min_y + max_y) / 2)


def _round2(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_length(meters: float) -> str:
    """
    Format a length with two decimals, in km above 100 m.

    Examples:
        >>> format_length(1234.5)
        '1.23 km'
        >>> format_length(42.123)
        '42.12 m'
    """
    if meters > KM_FORMAT_THRESHOLD:
        return f"{_round2(meters / 1000)} km"
    return f"{_round2(meters)} m"


def format_area(square_meters: float) -> str:
    """
    Format an area with two decimals, in km² above 10000 m².

    Examples:
        >>> format_area(2500000)
        '2.5 km²'
    """
    if square_meters > KM2_FORMAT_THRESHOLD:
        return f"{_round2(square_meters / 1000000)} km²"
    return f"{_round2(square_meters)} m²"


def rotation(start: Sequence[float], end: Sequence[float]) -> float:
    """
    Get the counter-clockwise angle of the segment from start to end, in radians.

    Examples:
        >>> rotation((0, 0), (0, 1)) == math.pi / 2
        True
    """
    return math.atan2(end[1] - start[1], end[0] - start[0])
