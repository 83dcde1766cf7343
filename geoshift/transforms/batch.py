from __future__ import annotations

import numbers
from typing import Any, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from geoshift.transforms.compose import PointTransform


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real)


def _is_coordinate(item: Any) -> bool:
    return (
        isinstance(item, (list, tuple))
        and len(item) >= 2
        and all(_is_number(v) for v in item)
    )


def _collect(sequence: Sequence, leaves: List[Sequence]):
    for item in sequence:
        if _is_coordinate(item):
            leaves.append(item)
        elif isinstance(item, (list, tuple)):
            _collect(item, leaves)
        else:
            raise TypeError(f"cannot read a coordinate from {item!r}")


def _new_leaf(leaf: Sequence, xy: Tuple[float, float]) -> Sequence:
    values = [xy[0], xy[1], *leaf[2:]]
    return tuple(values) if isinstance(leaf, tuple) else values


def _rebuild(sequence: Sequence, it: Iterator[Tuple[float, float]]) -> Sequence:
    items = []
    for item in sequence:
        if _is_coordinate(item):
            items.append(_new_leaf(item, next(it)))
        else:
            items.append(_rebuild(item, it))
    return tuple(items) if isinstance(sequence, tuple) else items


def _write(output: Sequence, it: Iterator[Tuple[float, float]]):
    for i, item in enumerate(output):
        if _is_coordinate(item):
            xy = next(it)
            if isinstance(item, list):
                item[0], item[1] = xy
            elif isinstance(output, list):
                output[i] = _new_leaf(item, xy)
            else:
                raise TypeError(
                    "in-place transform needs mutable lists for the rings holding tuple coordinates"
                )
        else:
            _write(item, it)


def _apply_array(fn: PointTransform, array: np.ndarray, output: Optional[np.ndarray], dimension: int) -> np.ndarray:
    if array.ndim == 1:
        if array.size % dimension:
            raise ValueError(
                f"flat array of length {array.size} is not a multiple of dimension {dimension}"
            )
        view = array.reshape(-1, dimension)
    else:
        view = array
    x, y = fn(view[..., 0], view[..., 1])

    if output is None:
        output = np.array(array, dtype=float, copy=True)
    elif output is not array:
        output[...] = array
    out_view = output.reshape(-1, dimension) if output.ndim == 1 else output
    out_view[..., 0] = x
    out_view[..., 1] = y
    return output


def _apply_flat(fn: PointTransform, sequence: Sequence, output: Optional[list], dimension: int) -> list:
    if len(sequence) % dimension:
        raise ValueError(
            f"flat sequence of length {len(sequence)} is not a multiple of dimension {dimension}"
        )
    x, y = fn(
        np.asarray(sequence[0::dimension], dtype=float),
        np.asarray(sequence[1::dimension], dtype=float),
    )

    if output is None:
        output = list(sequence)
    elif output is not sequence:
        output[:] = sequence
    output[0::dimension] = np.asarray(x).tolist()
    output[1::dimension] = np.asarray(y).tolist()
    return output


def _apply_nested(fn: PointTransform, sequence: Sequence, output: Optional[list]) -> Sequence:
    leaves: List[Sequence] = []
    _collect(sequence, leaves)
    if leaves:
        coords = np.array([(leaf[0], leaf[1]) for leaf in leaves], dtype=float)
        x, y = fn(coords[:, 0], coords[:, 1])
        xy = list(zip(np.asarray(x).tolist(), np.asarray(y).tolist()))
    else:
        xy = []

    if output is None:
        return _rebuild(sequence, iter(xy))
    if output is not sequence:
        output[:] = _rebuild(sequence, iter(xy))
        return output
    _write(output, iter(xy))
    return output


def apply(
    fn: PointTransform,
    sequence: Any,
    output: Optional[Any] = None,
    dimension: int = 2,
) -> Any:
    """
    Apply a point transform to every coordinate of a sequence.

    Three layouts are understood:

    - a flat sequence of numbers `[x0, y0, (z0,) x1, y1, ...]` walked with a stride of `dimension`
    - a numpy array, flat (walked with `dimension`) or with the ordinates on its last axis
    - nested lists/tuples (a line, a polygon's rings, a multipolygon) whose leaves are coordinate tuples

    Only the first two ordinates go through `fn`; anything beyond them (elevation,
    measures) is copied unchanged and the length of the sequence never changes.

    Args:
        fn: The point transform, called once with all x and all y values as arrays
        sequence: The coordinates to transform
        output: Where to write the result. Pass the input itself for an in-place transform. If None, a new sequence with the same layout is allocated.
        dimension: The number of ordinates per coordinate in flat layouts. Default is 2.

    Returns:
        The transformed sequence (`output` when one was given)

    Raises:
        ValueError: If a flat sequence is not a whole number of coordinates
        TypeError: If the sequence holds something other than numbers or coordinates

    Examples:
        >>> from geoshift.transforms.mercator import spherical_forward
        >>> apply(spherical_forward, [0.0, 0.0, 12.5], dimension=3)
        [0.0, 0.0, 12.5]
        >>> apply(spherical_forward, [[0.0, 0.0, 3.0]], dimension=3)
        [[0.0, 0.0, 3.0]]
    """
    if dimension < 2:
        raise ValueError(f"dimension must be at least 2, got {dimension}")

    if isinstance(sequence, np.ndarray):
        return _apply_array(fn, sequence, output, dimension)
    if not len(sequence):
        return type(sequence)() if output is None else output
    if _is_number(sequence[0]):
        return _apply_flat(fn, sequence, output, dimension)
    return _apply_nested(fn, sequence, output)
