from __future__ import annotations

from typing import Any, Optional, Sequence

from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

from geoshift.constructs.coordinate import Coordinate
from geoshift.constructs.projection import Extent
from geoshift.registry.registry_interface import RegistryInterface
from geoshift.transforms.batch import apply
from geoshift.transforms.compose import PointTransform


def transform_coordinates(
    registry: RegistryInterface,
    source: str,
    target: str,
    sequence: Any,
    output: Optional[Any] = None,
    dimension: int = 2,
) -> Any:
    """
    Transform raw coordinates from one registered system to another.

    This resolves the transform through the registry and applies it to every coordinate
    of the sequence. Flat sequences, numpy arrays and nested ring lists are all accepted.

    Args:
        registry: The registry resolving the transform
        source: The code of the system the coordinates are in
        target: The code of the system to convert to
        sequence: The coordinates to transform
        output: Where to write the result. Pass the input itself to transform in place.
        dimension: The number of ordinates per coordinate in flat layouts. Default is 2.

    Returns:
        The transformed coordinates, in the same layout as the input

    Raises:
        UnregisteredCRSError: If either code is unknown to the registry
        NoTransformPathError: If the registry cannot connect the two codes

    Examples:
        >>> from geoshift.registry.defaults import default_registry
        >>> registry = default_registry()
        >>> ring = [[113.93, 22.51], [113.96, 22.51], [113.96, 22.57], [113.93, 22.51]]
        >>> projected = transform_coordinates(registry, 'EPSG:4326', 'GCJ-02-Mecator', ring)
    """
    fn = registry.resolve(source, target)
    return apply(fn, sequence, output, dimension)


def _geometry_transform(fn: PointTransform):
    def _fn(x, y, z=None):
        new_x, new_y = fn(x, y)
        if z is None:
            return new_x, new_y
        return new_x, new_y, z

    return _fn


def transform_geometry(
    geom: BaseGeometry,
    source: str,
    target: str,
    registry: RegistryInterface,
) -> BaseGeometry:
    """
    Transform a Shapely geometry from one registered system to another.

    Works for every geometry type, including multi-part geometries and collections.
    Z values are carried over untouched. The input geometry is not modified.

    Args:
        geom: The geometry to transform
        source: The code of the system the geometry is in
        target: The code of the system to convert to
        registry: The registry resolving the transform

    Returns:
        A new geometry of the same type in the target system
    """
    if source == target:
        return geom
    fn = registry.resolve(source, target)
    return transform(_geometry_transform(fn), geom)


def contains_coordinate(
    registry: RegistryInterface, crs: str, coordinate: Sequence[float]
) -> bool:
    """
    Tell whether a coordinate lies inside the valid extent of a system (boundary included).

    Args:
        registry: The registry holding the system
        crs: The code of the system
        coordinate: The coordinate, in the system's units

    Returns:
        True if the coordinate is inside the extent or on its boundary
    """
    return registry.descriptor(crs).extent.contains_coordinate(coordinate)


def contains_extent(registry: RegistryInterface, crs: str, extent: Extent) -> bool:
    """
    Tell whether an extent lies completely inside the valid extent of a system.
    """
    return registry.descriptor(crs).extent.contains_extent(extent)


def coord_to_coord_dist(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the planar distance between two coordinates.

    The distance is in the units of the coordinates' system; for degree systems it is
    an angular distance, not a ground distance (see geoshift.utils.measure for that).

    Args:
        a: The first coordinate
        b: The second coordinate. Must be in the same CRS as coordinate a.

    Returns:
        The Euclidean distance in the units of the coordinates' CRS

    Raises:
        ValueError: If the coordinates are in different systems
    """
    if a.crs != b.crs:
        raise ValueError(f"cannot measure between {a.crs} and {b.crs}")

    return a.geom.distance(b.geom)
