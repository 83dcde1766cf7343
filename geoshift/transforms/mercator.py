"""
Planar projections: the standard spherical Mercator and the banded polynomial
Mercator used for BD-09.

All functions are element-wise over numpy arrays and have no inter-point state.
"""

import math

import numpy as np

from geoshift.transforms.compose import from_arrays, to_arrays

RADIUS = 6378137.0
MAX_LATITUDE = 85.0511287798
RAD_PER_DEG = math.pi / 180.0

# half the circumference of the sphere, the edge of the square EPSG:3857 world
HALF_WORLD = math.pi * RADIUS

# banded projection limits
BANDED_MAX_LATITUDE = 74.0
BANDED_MIN_LONGITUDE = -180.0
BANDED_MAX_LONGITUDE = 180.0

# projected-distance thresholds of the inverse bands, largest first
MCBAND = np.array([12890594.86, 8362377.87, 5591021.0, 3481989.83, 1678043.12, 0.0])

# latitude thresholds of the forward bands, largest first
LLBAND = np.array([75.0, 60.0, 45.0, 30.0, 15.0, 0.0])

MC2LL = np.array(
    [
        [
            1.410526172116255e-8, 0.00000898305509648872, -1.9939833816331,
            200.9824383106796, -187.2403703815547, 91.6087516669843,
            -23.38765649603339, 2.57121317296198, -0.03801003308653, 17337981.2,
        ],
        [
            -7.435856389565537e-9, 0.000008983055097726239, -0.78625201886289,
            96.32687599759846, -1.85204757529826, -59.36935905485877,
            47.40033549296737, -16.50741931063887, 2.28786674699375, 10260144.86,
        ],
        [
            -3.030883460898826e-8, 0.00000898305509983578, 0.30071316287616,
            59.74293618442277, 7.357984074871, -25.38371002664745,
            13.45380521110908, -3.29883767235584, 0.32710905363475, 6856817.37,
        ],
        [
            -1.981981304930552e-8, 0.000008983055099779535, 0.03278182852591,
            40.31678527705744, 0.65659298677277, -4.44255534477492,
            0.85341911805263, 0.12923347998204, -0.04625736007561, 4482777.06,
        ],
        [
            3.09191371068437e-9, 0.000008983055096812155, 0.00006995724062,
            23.10934304144901, -0.00023663490511, -0.6321817810242,
            -0.00663494467273, 0.03430082397953, -0.00466043876332, 2555164.4,
        ],
        [
            2.890871144776878e-9, 0.000008983055095805407, -3.068298e-8,
            7.47137025468032, -0.00000353937994, -0.02145144861037,
            -0.00001234426596, 0.00010322952773, -0.00000323890364, 826088.5,
        ],
    ]
)

LL2MC = np.array(
    [
        [
            -0.0015702102444, 111320.7020616939, 1704480524535203,
            -10338987376042340, 26112667856603880, -35149669176653700,
            26595700718403920, -10725012454188240, 1800819912950474, 82.5,
        ],
        [
            0.0008277824516172526, 111320.7020463578, 647795574.6671607,
            -4082003173.641316, 10774905663.51142, -15171875531.51559,
            12053065338.62167, -5124939663.577472, 913311935.9512032, 67.5,
        ],
        [
            0.00337398766765, 111320.7020202162, 4481351.045890365,
            -23393751.19931662, 79682215.47186455, -115964993.2797253,
            97236711.15602145, -43661946.33752821, 8477230.501135234, 52.5,
        ],
        [
            0.00220636496208, 111320.7020209128, 51751.86112841131,
            3796837.749470245, 992013.7397791013, -1221952.21711287,
            1340652.697009075, -620943.6990984312, 144416.9293806241, 37.5,
        ],
        [
            -0.0003441963504368392, 111320.7020576856, 278.2353980772752,
            2485758.690035394, 6070.750963243378, 54821.18345352118,
            9540.606633304236, -2710.55326746645, 1405.483844121726, 22.5,
        ],
        [
            -0.0003218135878613132, 111320.7020701615, 0.00369383431289,
            823725.6402795718, 0.46104986909093, 2351.343141331292,
            1.58060784298199, 8.77738589078284, 0.37238884252424, 7.45,
        ],
    ]
)


def spherical_forward(lon, lat):
    """
    Project degrees onto the spherical Mercator plane (EPSG:3857 meters).

    Latitude is clamped to +/- MAX_LATITUDE first.

    Examples:
        >>> spherical_forward(0.0, 0.0)
        (0.0, 0.0)
    """
    lon, lat, scalar = to_arrays(lon, lat)
    lat = np.clip(lat, -MAX_LATITUDE, MAX_LATITUDE)
    sin = np.sin(lat * RAD_PER_DEG)
    x = RADIUS * lon * RAD_PER_DEG
    with np.errstate(all="ignore"):
        y = RADIUS * np.log((1 + sin) / (1 - sin)) / 2
    return from_arrays(x, y, scalar)


def spherical_inverse(x, y):
    """
    Unproject spherical Mercator meters back to degrees.
    """
    x, y, scalar = to_arrays(x, y)
    lon = x / RADIUS / RAD_PER_DEG
    with np.errstate(all="ignore"):
        lat = (2 * np.arctan(np.exp(y / RADIUS)) - math.pi / 2) / RAD_PER_DEG
    return from_arrays(lon, lat, scalar)


def wrap_longitude(lon, min_lon: float = BANDED_MIN_LONGITUDE, max_lon: float = BANDED_MAX_LONGITUDE):
    """
    Fold longitudes into [min_lon, max_lon] by whole periods.

    Values already inside the range, including both limits, are returned unchanged.
    """
    lon = np.asarray(lon, dtype=float)
    period = max_lon - min_lon
    lon = np.where(lon > max_lon, lon - period * np.ceil((lon - max_lon) / period), lon)
    lon = np.where(lon < min_lon, lon + period * np.ceil((min_lon - lon) / period), lon)
    return lon


def _first_band(value: np.ndarray, thresholds: np.ndarray) -> np.ndarray:
    """Index of the first threshold that value meets or exceeds."""
    return np.argmax(value[..., np.newaxis] >= thresholds, axis=-1)


def _convert(px: np.ndarray, py: np.ndarray, table: np.ndarray):
    """
    Evaluate one band table per point.

    `table` has one row of ten coefficients for every point: x is linear in |px|,
    y is a sixth-degree polynomial in |py| / c9. Signs of the operands are kept.
    """
    c = np.moveaxis(table, -1, 0)
    x = c[0] + c[1] * np.abs(px)
    d = np.abs(py) / c[9]
    y = c[2] + d * (c[3] + d * (c[4] + d * (c[5] + d * (c[6] + d * (c[7] + d * c[8])))))
    return np.where(px < 0, -x, x), np.where(py < 0, -y, y)


def banded_forward(lon, lat):
    """
    Project BD-09 degrees onto the banded polynomial Mercator plane.

    Longitude wraps into [-180, 180], latitude is clamped to [-74, 74], and the
    coefficient row is the first band whose threshold |lat| meets or exceeds, so
    southern latitudes use the same bands as their northern mirror.
    """
    lon, lat, scalar = to_arrays(lon, lat)
    with np.errstate(all="ignore"):
        lon = wrap_longitude(lon)
        lat = np.clip(lat, -BANDED_MAX_LATITUDE, BANDED_MAX_LATITUDE)
        band = _first_band(np.abs(lat), LLBAND)
        x, y = _convert(lon, lat, LL2MC[band])
    return from_arrays(x, y, scalar)


def banded_inverse(x, y):
    """
    Unproject banded polynomial Mercator meters back to BD-09 degrees.

    The coefficient row is the first band whose distance threshold |y| meets or exceeds.
    """
    x, y, scalar = to_arrays(x, y)
    with np.errstate(all="ignore"):
        band = _first_band(np.abs(y), MCBAND)
        lon, lat = _convert(x, y, MC2LL[band])
    return from_arrays(lon, lat, scalar)
