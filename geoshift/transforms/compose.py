from __future__ import annotations

import functools as ft
from typing import Any, Callable, Tuple

import numpy as np

# A point transform maps x and y (floats or equally shaped numpy arrays) to a new (x, y) pair
PointTransform = Callable[[Any, Any], Tuple[Any, Any]]


def to_arrays(x, y) -> Tuple[np.ndarray, np.ndarray, bool]:
    """
    Coerce the inputs of a point transform into float arrays.

    Returns:
        The x and y arrays and a flag telling whether both inputs were scalars
    """
    scalar = np.ndim(x) == 0 and np.ndim(y) == 0
    return np.asarray(x, dtype=float), np.asarray(y, dtype=float), scalar


def from_arrays(x: np.ndarray, y: np.ndarray, scalar: bool) -> Tuple[Any, Any]:
    """
    Undo `to_arrays`, handing plain floats back to scalar callers.
    """
    if scalar:
        return float(x), float(y)
    return x, y


def identity(x, y):
    return x, y


def compose(*transforms: PointTransform) -> PointTransform:
    """
    Chain point transforms, applying them left to right.

    `compose(f, g)(x, y)` is `g(*f(x, y))`, so the arguments read in the order
    the coordinates travel.

    Args:
        transforms: The point transforms to chain

    Returns:
        A single point transform running every step in order
    """
    if not transforms:
        return identity
    if len(transforms) == 1:
        return transforms[0]

    def _composed(x, y):
        return ft.reduce(lambda xy, fn: fn(*xy), transforms, (x, y))

    return _composed
