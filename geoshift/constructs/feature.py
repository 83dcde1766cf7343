from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, NamedTuple, Optional

from geopandas import GeoDataFrame
from shapely.geometry import MultiPolygon, mapping, shape
from shapely.geometry.base import BaseGeometry

from geoshift.utils.crs import LATLON_CRS


class Feature(NamedTuple):
    """
    A geometry with its non-geometry attributes.

    Attributes:
        geometry: The Shapely geometry
        properties: The attributes of the feature, or None when it has none
    """

    geometry: BaseGeometry
    properties: Optional[dict] = None

    @classmethod
    def from_geojson(cls, feature: Dict[str, Any]) -> Feature:
        """
        Create a feature from a GeoJSON Feature mapping.

        Raises:
            TypeError: If the mapping is not a GeoJSON Feature
        """
        if feature.get("type") != "Feature":
            raise TypeError(f"expected a GeoJSON Feature but got {feature.get('type')!r}")
        return cls(shape(feature["geometry"]), dict(feature.get("properties") or {}))

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry),
            "properties": dict(self.properties or {}),
        }


class SplitResult:
    """
    The polygon pieces produced by splitting a polygon with a line.

    A SplitResult is an ordered, possibly empty, collection of Features whose
    geometries are Polygons. An empty result means the split was rejected or the
    line missed the polygon.

    Attributes:
        features: The pieces, in output order
        crs: The code of the system the pieces are expressed in

    Examples:
        >>> from shapely.geometry import LineString, Polygon
        >>> from geoshift.split.splitter import split_polygon_by_line
        >>> square = Polygon([(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)])
        >>> result = split_polygon_by_line(square, LineString([(-1, 5), (11, 5)]))
        >>> len(result)
        2
    """

    def __init__(self, features: Optional[List[Feature]] = None, crs: str = LATLON_CRS):
        self.features = list(features or [])
        self.crs = crs

    def __len__(self):
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, i) -> Feature:
        return self.features[i]

    def __bool__(self):
        return bool(self.features)

    def __add__(self, other: SplitResult) -> SplitResult:
        if self.crs != other.crs:
            raise TypeError("cannot add two split results together with different crs")
        return SplitResult(self.features + other.features, self.crs)

    def __repr__(self):
        return f"SplitResult(pieces={len(self.features)}, crs={self.crs})"

    @property
    def geometries(self) -> List[BaseGeometry]:
        return [f.geometry for f in self.features]

    def to_multipolygon(self) -> MultiPolygon:
        """
        Collect the pieces into one MultiPolygon (empty when there are no pieces).
        """
        return MultiPolygon(self.geometries)

    def to_geodataframe(self) -> GeoDataFrame:
        """
        Convert the pieces to a GeoDataFrame with one row per piece.

        Properties become columns; the CRS is set when the result is in an EPSG system.
        """
        crs = self.crs if self.crs.upper().startswith("EPSG:") else None
        records = [dict(f.properties or {}) for f in self.features]
        return GeoDataFrame(records, geometry=self.geometries, crs=crs)

    def to_geojson(self) -> str:
        """
        Convert the pieces to a GeoJSON FeatureCollection string.
        """
        collection = {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
        }
        return json.dumps(collection)
