from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Sequence


class Unit(Enum):
    """
    The linear unit of a coordinate system.

    Values:
        DEGREES: Angular longitude/latitude coordinates
        METERS: Projected easting/northing coordinates
    """

    DEGREES = "degrees"
    METERS = "m"


class Extent(NamedTuple):
    """
    An axis-aligned bounding box in the units of its coordinate system.

    Containment tests include the boundary.

    Attributes:
        min_x: The western edge
        min_y: The southern edge
        max_x: The eastern edge
        max_y: The northern edge

    Examples:
        >>> extent = Extent(113.935705, 22.512108, 113.969179, 22.579012)
        >>> extent.contains_coordinate((113.935705, 22.512108))
        True
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains_coordinate(self, coordinate: Sequence[float]) -> bool:
        """
        Tell whether a coordinate lies inside the extent or on its boundary.
        """
        x, y = coordinate[0], coordinate[1]
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def contains_extent(self, other: Extent) -> bool:
        """
        Tell whether another extent lies completely inside this one.
        """
        return (
            self.min_x <= other.min_x
            and other.max_x <= self.max_x
            and self.min_y <= other.min_y
            and other.max_y <= self.max_y
        )


class ProjectionDescriptor(NamedTuple):
    """
    Describes a coordinate system known to a registry.

    Attributes:
        code: The unique code of the system, e.g. 'EPSG:4326' or 'GCJ-02-Geo'
        extent: The valid extent of the system in its own units
        unit: The linear unit of the system's coordinates
    """

    code: str
    extent: Extent
    unit: Unit

    @property
    def is_geographic(self) -> bool:
        return self.unit is Unit.DEGREES
