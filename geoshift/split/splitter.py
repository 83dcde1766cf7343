from __future__ import annotations

import logging
from typing import List, Optional, Union

import numpy as np
import shapely
from shapely.errors import GEOSException
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry

from geoshift.constructs.feature import Feature, SplitResult
from geoshift.registry.registry_interface import RegistryInterface
from geoshift.utils.crs import LATLON_CRS
from geoshift.utils.geo import transform_geometry
from geoshift.utils.keys import DEFAULT_ID_KEY
from geoshift.utils.units import DistanceUnit, length_to_degrees

log = logging.getLogger(__name__)

DEFAULT_TOLERANCE_RADIUS = 1e-6
DEFAULT_TOLERANCE_UNIT = DistanceUnit.KILOMETERS

# vertices closer than this multiple of the tolerance are snapped to the cut
SNAP_FACTOR = 2.0

Splittable = Union[Polygon, MultiPolygon, Feature]


def _anchor_points(line: BaseGeometry, polygon: Polygon) -> np.ndarray:
    """
    Collect the exact cut locations: where the line crosses the polygon boundary,
    plus the interior vertices of the line.
    """
    crossings = shapely.get_coordinates(line.intersection(polygon.boundary))
    interior = [
        np.asarray(part.coords)[1:-1, :2] for part in shapely.get_parts(line)
    ]
    return np.vstack([crossings.reshape(-1, 2), *[i.reshape(-1, 2) for i in interior]])


def _snap_ring(coords: np.ndarray, anchors: np.ndarray, threshold: float) -> np.ndarray:
    """
    Move every ring vertex lying within threshold of an anchor onto the nearest anchor,
    then drop the consecutive duplicates this can create.
    """
    if len(anchors):
        dx = coords[:, np.newaxis, 0] - anchors[np.newaxis, :, 0]
        dy = coords[:, np.newaxis, 1] - anchors[np.newaxis, :, 1]
        dist = np.hypot(dx, dy)
        nearest = np.argmin(dist, axis=1)
        close = dist[np.arange(len(coords)), nearest] <= threshold
        coords = coords.copy()
        coords[close] = anchors[nearest[close]]

    keep = np.ones(len(coords), dtype=bool)
    keep[1:] = np.any(coords[1:] != coords[:-1], axis=1)
    coords = coords[keep]
    if len(coords) and np.any(coords[0] != coords[-1]):
        coords = np.vstack([coords, coords[:1]])
    return coords


def _distinct_vertices(ring: np.ndarray) -> int:
    return len({tuple(c) for c in ring[:-1]})


class PolygonSplitter:
    """
    Splits polygons into the pieces induced by a cutting line.

    The split only uses buffer and difference: the line is buffered by a tiny
    tolerance, the buffer is subtracted from the polygon, and the vertices the buffer
    left next to the cut are snapped back onto the exact crossing points. Each piece
    inherits a copy of the source attributes with a `-<index>` suffix on its id.

    A split is rejected, producing an empty result, when the splitter is not a line,
    when either end of a single line lies inside or on the polygon, or when the line
    misses the polygon. Pieces that collapse to fewer than three distinct vertices
    or become invalid after snapping are left out, and so is every member of a
    self-intersecting polygon that the overlay cannot process.

    Args:
        tolerance_radius: The buffer radius around the cutting line. Default is 1e-6.
        tolerance_unit: The unit of tolerance_radius: 'degrees', 'radians', 'miles', 'kilometers' or 'meters'. Default is 'kilometers'.
        id_key: The property holding the identity of a feature. Default is 'id'.
        registry: The registry used to move geometry into the working system when split is given a crs
        working_crs: The system the split is computed in. Default is EPSG:4326.

    Examples:
        >>> from shapely.geometry import LineString, Polygon
        >>> splitter = PolygonSplitter()
        >>> square = Polygon([(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)])
        >>> result = splitter.split(square, LineString([(-1, 5), (11, 5)]), properties={"id": "lot"})
        >>> [f.properties["id"] for f in result]
        ['lot-0', 'lot-1']
    """

    def __init__(
        self,
        tolerance_radius: float = DEFAULT_TOLERANCE_RADIUS,
        tolerance_unit: Union[str, DistanceUnit] = DEFAULT_TOLERANCE_UNIT,
        id_key: str = DEFAULT_ID_KEY,
        registry: Optional[RegistryInterface] = None,
        working_crs: str = LATLON_CRS,
    ):
        self.tolerance_radius = tolerance_radius
        self.tolerance_unit = DistanceUnit.parse(tolerance_unit)
        self.id_key = id_key
        self.registry = registry
        self.working_crs = working_crs

    @property
    def tolerance(self) -> float:
        """The buffer radius in coordinate degrees."""
        return length_to_degrees(self.tolerance_radius, self.tolerance_unit)

    def split(
        self,
        polygon: Splittable,
        line: BaseGeometry,
        properties: Optional[dict] = None,
        crs: Optional[str] = None,
    ) -> SplitResult:
        """
        Split a polygon, multipolygon or polygon feature with a line.

        Multipolygons are split member by member; the pieces of all members are
        concatenated and numbered continuously.

        Args:
            polygon: The geometry to split. A Feature contributes its properties unless properties is given.
            line: The cutting LineString or MultiLineString, in the same system as polygon
            properties: The attributes copied onto every piece
            crs: The system polygon and line are expressed in. When it differs from the working system and a registry is set, the split is computed in the working system and the pieces are converted back.

        Returns:
            A SplitResult in the input system; empty when the split is rejected
        """
        if isinstance(polygon, Feature):
            if properties is None:
                properties = polygon.properties
            polygon = polygon.geometry

        crs = crs or self.working_crs
        result = SplitResult(crs=crs)

        if not isinstance(line, (LineString, MultiLineString)) or line.is_empty:
            log.debug(f"cannot split with a {type(line).__name__}; a line is required")
            return result
        if not isinstance(polygon, (Polygon, MultiPolygon)) or polygon.is_empty:
            log.debug(f"cannot split a {type(polygon).__name__}; a polygon is required")
            return result

        reproject = crs != self.working_crs and self.registry is not None
        if reproject:
            polygon = transform_geometry(polygon, crs, self.working_crs, self.registry)
            line = transform_geometry(line, crs, self.working_crs, self.registry)

        pieces: List[Polygon] = []
        for member in shapely.get_parts(polygon):
            pieces.extend(self._split_polygon(member, line))

        for i, piece in enumerate(pieces):
            if reproject:
                piece = transform_geometry(piece, self.working_crs, crs, self.registry)
            result.features.append(Feature(piece, self._piece_properties(properties, i)))

        return result

    def _piece_properties(self, properties: Optional[dict], index: int) -> dict:
        props = dict(properties or {})
        if props.get(self.id_key) is not None:
            props[self.id_key] = f"{props[self.id_key]}-{index}"
        return props

    def _split_polygon(self, polygon: Polygon, line: BaseGeometry) -> List[Polygon]:
        try:
            if isinstance(line, LineString):
                start, end = Point(line.coords[0]), Point(line.coords[-1])
                if polygon.covers(start) or polygon.covers(end):
                    log.debug("line endpoint lies inside the polygon; split is undefined")
                    return []

            if not line.intersects(polygon):
                log.debug("line does not intersect the polygon")
                return []

            anchors = _anchor_points(line, polygon)
            buffer = line.buffer(self.tolerance)
            difference = polygon.difference(buffer)
        except GEOSException as e:
            log.debug(f"cannot split a degenerate polygon: {e}")
            return []

        pieces = []
        threshold = self.tolerance * SNAP_FACTOR
        for candidate in shapely.get_parts(difference):
            if not isinstance(candidate, Polygon) or candidate.is_empty:
                continue
            piece = self._snap_piece(candidate, anchors, threshold)
            if piece is not None:
                pieces.append(piece)

        return pieces

    def _snap_piece(self, piece: Polygon, anchors: np.ndarray, threshold: float) -> Optional[Polygon]:
        shell = _snap_ring(np.asarray(piece.exterior.coords)[:, :2], anchors, threshold)
        if _distinct_vertices(shell) < 3:
            log.debug("omitting a piece that collapsed below three vertices")
            return None

        holes = []
        for interior in piece.interiors:
            hole = _snap_ring(np.asarray(interior.coords)[:, :2], anchors, threshold)
            if _distinct_vertices(hole) >= 3:
                holes.append(hole)

        snapped = Polygon(shell, holes)
        if not snapped.is_valid or snapped.area == 0:
            log.debug("omitting a piece that became invalid after snapping")
            return None
        return snapped


def split_polygon_by_line(
    polygon: Splittable,
    line: BaseGeometry,
    tolerance_radius: float = DEFAULT_TOLERANCE_RADIUS,
    tolerance_unit: Union[str, DistanceUnit] = DEFAULT_TOLERANCE_UNIT,
    properties: Optional[dict] = None,
    id_key: str = DEFAULT_ID_KEY,
) -> SplitResult:
    """
    Split a polygon with a line, both already in the same (non-offset) system.

    This is a shortcut for `PolygonSplitter(...).split(polygon, line, properties)`.

    Args:
        polygon: The Polygon, MultiPolygon or polygon Feature to split
        line: The cutting line; both of its ends must lie outside the polygon
        tolerance_radius: The buffer radius around the line. Default is 1e-6.
        tolerance_unit: The unit of tolerance_radius. Default is 'kilometers'.
        properties: The attributes copied onto every piece
        id_key: The property holding the identity of the source feature

    Returns:
        The pieces; empty when the line is invalid, starts or ends inside the polygon, or misses it

    Examples:
        >>> from shapely.geometry import LineString, Polygon
        >>> square = Polygon([(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)])
        >>> sorted(round(p.area) for p in split_polygon_by_line(square, LineString([(-1, 5), (11, 5)])).geometries)
        [50, 50]
    """
    splitter = PolygonSplitter(tolerance_radius, tolerance_unit, id_key)
    return splitter.split(polygon, line, properties)
