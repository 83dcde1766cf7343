from __future__ import annotations

import math
from enum import Enum
from typing import Union

# Mean earth radius in meters, used to turn ground distances into arc lengths
EARTH_RADIUS = 6371008.8


class DistanceUnit(Enum):
    """
    Units accepted for split tolerances and ground distances.

    Values:
        DEGREES: Arc degrees, also the planar unit of geographic coordinates
        RADIANS: Arc radians
        MILES: Statute miles along the earth's surface
        KILOMETERS: Kilometers along the earth's surface
        METERS: Meters along the earth's surface
    """

    DEGREES = "degrees"
    RADIANS = "radians"
    MILES = "miles"
    KILOMETERS = "kilometers"
    METERS = "meters"

    @classmethod
    def parse(cls, unit: Union[str, DistanceUnit]) -> DistanceUnit:
        if isinstance(unit, DistanceUnit):
            return unit
        try:
            return cls(unit.lower())
        except ValueError as e:
            valid = ", ".join(u.value for u in cls)
            raise ValueError(
                f"unknown distance unit {unit!r}; expected one of {valid}"
            ) from e


# number of units per radian of arc
UNIT_FACTORS = {
    DistanceUnit.DEGREES: 180 / math.pi,
    DistanceUnit.RADIANS: 1.0,
    DistanceUnit.MILES: EARTH_RADIUS / 1609.344,
    DistanceUnit.KILOMETERS: EARTH_RADIUS / 1000,
    DistanceUnit.METERS: EARTH_RADIUS,
}


def length_to_radians(distance: float, unit: Union[str, DistanceUnit]) -> float:
    """
    Convert a distance into the arc length it spans in radians.

    Args:
        distance: The distance to convert
        unit: The unit of the distance

    Returns:
        The arc length in radians
    """
    return distance / UNIT_FACTORS[DistanceUnit.parse(unit)]


def length_to_degrees(distance: float, unit: Union[str, DistanceUnit]) -> float:
    """
    Convert a distance into the arc length it spans in degrees.

    Args:
        distance: The distance to convert
        unit: The unit of the distance

    Returns:
        The arc length in degrees

    Examples:
        >>> round(length_to_degrees(111.195, "kilometers"), 3)
        1.0
    """
    return math.degrees(length_to_radians(distance, unit))
