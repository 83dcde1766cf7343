"""
The GCJ-02 administrative offset between WGS84 and GCJ-02 degrees.

Inside the territory box every published coordinate is shifted by a smooth
empirical delta. `forward` applies the shift, `inverse` removes it by evaluating
the same delta at the shifted position, which is accurate to about 5e-5 degrees
(a few meters); `inverse_precise` iterates to well under a millimeter.
Both functions work element-wise on numpy arrays and never raise; NaN input
produces NaN output.
"""

from __future__ import annotations

import math

import numpy as np

from geoshift.constructs.projection import Extent
from geoshift.transforms.compose import from_arrays, to_arrays

# semi-major axis of the Krasovsky 1940 ellipsoid
AXIS = 6378245.0
# eccentricity squared, (a^2 - b^2) / a^2
OFFSET = 0.00669342162296594323

# the offset is only applied inside this lon/lat box
CHINA_EXTENT = Extent(72.004, 0.8293, 137.8347, 55.8271)


def out_of_china(lon, lat):
    """
    Tell whether a point lies outside the territory box.

    Comparisons are strict, so points on the box edges count as inside.

    Args:
        lon: Longitude in degrees (float or array)
        lat: Latitude in degrees (float or array)

    Returns:
        A bool, or a bool array for array input
    """
    outside = (
        (np.asarray(lon) < CHINA_EXTENT.min_x)
        | (np.asarray(lon) > CHINA_EXTENT.max_x)
        | (np.asarray(lat) < CHINA_EXTENT.min_y)
        | (np.asarray(lat) > CHINA_EXTENT.max_y)
    )
    if np.ndim(outside) == 0:
        return bool(outside)
    return outside


def _transform_lat(x, y):
    ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * np.sqrt(np.abs(x))
    ret += (20.0 * np.sin(6.0 * x * math.pi) + 20.0 * np.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * np.sin(y * math.pi) + 40.0 * np.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (160.0 * np.sin(y / 12.0 * math.pi) + 320.0 * np.sin(y * math.pi / 30.0)) * 2.0 / 3.0
    return ret


def _transform_lon(x, y):
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * np.sqrt(np.abs(x))
    ret += (20.0 * np.sin(6.0 * x * math.pi) + 20.0 * np.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * np.sin(x * math.pi) + 40.0 * np.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (150.0 * np.sin(x / 12.0 * math.pi) + 300.0 * np.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
    return ret


def delta(lon, lat):
    """
    Compute the (dlon, dlat) offset at a point, ignoring the territory box.

    Args:
        lon: Longitude in degrees (float or array)
        lat: Latitude in degrees (float or array)

    Returns:
        A tuple of (dlon, dlat) in degrees
    """
    d_lat = _transform_lat(lon - 105.0, lat - 35.0)
    d_lon = _transform_lon(lon - 105.0, lat - 35.0)
    rad_lat = lat / 180.0 * math.pi
    magic = np.sin(rad_lat)
    magic = 1 - OFFSET * magic * magic
    sqrt_magic = np.sqrt(magic)
    d_lat = (d_lat * 180.0) / ((AXIS * (1 - OFFSET)) / (magic * sqrt_magic) * math.pi)
    d_lon = (d_lon * 180.0) / (AXIS / sqrt_magic * np.cos(rad_lat) * math.pi)
    return d_lon, d_lat


def _shift(lon, lat, sign: float):
    lon, lat, scalar = to_arrays(lon, lat)
    with np.errstate(all="ignore"):
        d_lon, d_lat = delta(lon, lat)
        outside = out_of_china(lon, lat)
        new_lon = np.where(outside, lon, lon + sign * d_lon)
        new_lat = np.where(outside, lat, lat + sign * d_lat)
    return from_arrays(new_lon, new_lat, scalar)


def forward(lon, lat):
    """
    Apply the offset, converting WGS84 degrees to GCJ-02 degrees.

    Args:
        lon: WGS84 longitude (float or array)
        lat: WGS84 latitude (float or array)

    Returns:
        A tuple of (lon, lat) in GCJ-02 degrees

    Examples:
        >>> forward(116.397, 39.909)
        (116.40324..., 39.91040...)
    """
    return _shift(lon, lat, 1.0)


def inverse(lon, lat):
    """
    Remove the offset, converting GCJ-02 degrees back to WGS84 degrees.

    This is not an exact inverse: the delta is evaluated at the offset position.

    Args:
        lon: GCJ-02 longitude (float or array)
        lat: GCJ-02 latitude (float or array)

    Returns:
        A tuple of (lon, lat) in WGS84 degrees
    """
    return _shift(lon, lat, -1.0)


def inverse_precise(lon, lat, threshold: float = 1e-10, max_iterations: int = 30):
    """
    Remove the offset by fixed-point iteration on `forward`.

    Starting from `inverse`, the estimate is corrected by the residual of its
    forward projection until every point moves less than `threshold` degrees.

    Args:
        lon: GCJ-02 longitude (float or array)
        lat: GCJ-02 latitude (float or array)
        threshold: Convergence threshold in degrees
        max_iterations: Upper bound on the number of corrections

    Returns:
        A tuple of (lon, lat) in WGS84 degrees
    """
    lon, lat, scalar = to_arrays(lon, lat)
    est_lon, est_lat = _shift(lon, lat, -1.0)
    with np.errstate(all="ignore"):
        for _ in range(max_iterations):
            fwd_lon, fwd_lat = _shift(est_lon, est_lat, 1.0)
            d_lon = lon - fwd_lon
            d_lat = lat - fwd_lat
            est_lon = est_lon + d_lon
            est_lat = est_lat + d_lat
            if np.nanmax(np.abs(np.concatenate([np.ravel(d_lon), np.ravel(d_lat), [0.0]]))) < threshold:
                break
    return from_arrays(est_lon, est_lat, scalar)
