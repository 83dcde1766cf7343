from __future__ import annotations

import math
from typing import Any, NamedTuple

from shapely.geometry import Point

from geoshift.registry.registry_interface import RegistryInterface
from geoshift.utils.crs import LATLON_CRS


class Coordinate(NamedTuple):
    """
    Represents a single coordinate together with the code of its coordinate system.

    A Coordinate is immutable; transforming it returns a new Coordinate.

    Attributes:
        coordinate_id: The unique identifier for this coordinate (can be any hashable type)
        geom: The Shapely Point geometry, 2D or 3D
        crs: The code of the coordinate system the point is expressed in
        x: The x-coordinate value (longitude in degree systems, easting in projected systems)
        y: The y-coordinate value (latitude in degree systems, northing in projected systems)

    Examples:
        >>> from geoshift.registry.defaults import default_registry
        >>> coord = Coordinate.from_lat_lon(22.548752, 113.944016)
        >>> gcj = coord.to_crs('GCJ-02-Geo', default_registry())
        >>> gcj.crs
        'GCJ-02-Geo'
    """

    coordinate_id: Any
    geom: Point
    crs: str

    def __repr__(self):
        return f"Coordinate(coordinate_id={self.coordinate_id}, x={self.x}, y={self.y}, crs={self.crs})"

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> Coordinate:
        """
        Create a coordinate from WGS84 (EPSG:4326) latitude and longitude.

        Args:
            lat: The latitude in decimal degrees (range: -90 to 90)
            lon: The longitude in decimal degrees (range: -180 to 180)

        Returns:
            A new Coordinate in EPSG:4326 with no coordinate_id
        """
        return cls(coordinate_id=None, geom=Point(lon, lat), crs=LATLON_CRS)

    @property
    def x(self) -> float:
        return self.geom.x

    @property
    def y(self) -> float:
        return self.geom.y

    @property
    def dimension(self) -> int:
        return 3 if self.geom.has_z else 2

    def to_crs(self, new_crs: str, registry: RegistryInterface) -> Coordinate:
        """
        Transform this coordinate to a different coordinate system.

        If the target code equals the current one, the coordinate is returned unchanged.
        Any elevation is carried over untouched.

        Args:
            new_crs: The code of the target system
            registry: The registry that resolves the transform

        Returns:
            A new Coordinate in the target system with the same coordinate_id

        Raises:
            UnregisteredCRSError: If either code is unknown to the registry
            NoTransformPathError: If the registry cannot connect the two codes
            ValueError: If the transform produces infinite coordinates
        """
        if new_crs == self.crs:
            return self

        fn = registry.resolve(self.crs, new_crs)
        new_x, new_y = fn(self.geom.x, self.geom.y)

        if math.isinf(new_x) or math.isinf(new_y):
            raise ValueError(
                f"Unable to convert {self.crs} ({self.geom.x}, {self.geom.y}) -> {new_crs} ({new_x}, {new_y})"
            )

        if self.geom.has_z:
            geom = Point(new_x, new_y, self.geom.z)
        else:
            geom = Point(new_x, new_y)

        return Coordinate(coordinate_id=self.coordinate_id, geom=geom, crs=new_crs)
