"""
The BD-09 polar warp layered on top of the GCJ-02 offset.

BD-09 degrees are GCJ-02 degrees shifted by a small fixed vector and warped in
polar form. Conversions to and from WGS84 always pass through GCJ-02, in this
order:

    to_public   = offset.inverse . polar_forward
    from_public = polar_inverse . offset.forward
"""

import math

import numpy as np

from geoshift.transforms import offset
from geoshift.transforms.compose import compose, from_arrays, to_arrays

X_PI = math.pi * 3000.0 / 180.0

# linear shift applied around the polar warp
SHIFT_X = 0.0065
SHIFT_Y = 0.006

# radial and angular warp amplitudes
RADIAL_WARP = 0.00002
ANGULAR_WARP = 0.000003


def polar_forward(x, y):
    """
    Convert BD-09 degrees to GCJ-02 degrees.
    """
    x, y, scalar = to_arrays(x, y)
    x = x - SHIFT_X
    y = y - SHIFT_Y
    z = np.sqrt(x * x + y * y) - RADIAL_WARP * np.sin(y * X_PI)
    theta = np.arctan2(y, x) - ANGULAR_WARP * np.cos(x * X_PI)
    return from_arrays(z * np.cos(theta), z * np.sin(theta), scalar)


def polar_inverse(x, y):
    """
    Convert GCJ-02 degrees to BD-09 degrees.
    """
    x, y, scalar = to_arrays(x, y)
    z = np.sqrt(x * x + y * y) + RADIAL_WARP * np.sin(y * X_PI)
    theta = np.arctan2(y, x) + ANGULAR_WARP * np.cos(x * X_PI)
    return from_arrays(z * np.cos(theta) + SHIFT_X, z * np.sin(theta) + SHIFT_Y, scalar)


# BD-09 degrees -> WGS84 degrees
to_public = compose(polar_forward, offset.inverse)

# WGS84 degrees -> BD-09 degrees
from_public = compose(offset.forward, polar_inverse)
