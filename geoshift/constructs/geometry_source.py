"""
Where raw geometry comes from, decided by the caller.

A GeometrySource is one of three explicit variants. Nothing here inspects the
shape of a value to guess what it is.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Union

import requests
from geopandas import GeoDataFrame, read_file
from shapely.geometry import Point, mapping

from geoshift.constructs.feature import Feature
from geoshift.utils.crs import LATLON_CRS

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class UrlSource(NamedTuple):
    """
    GeoJSON served over HTTP.

    Attributes:
        url: The address of a GeoJSON FeatureCollection
        timeout: Seconds to wait for the server. Default is 30.
    """

    url: str
    timeout: float = DEFAULT_TIMEOUT


class InlineFeatureCollection(NamedTuple):
    """
    A GeoJSON FeatureCollection already held in memory.

    Attributes:
        data: The FeatureCollection mapping
    """

    data: Dict[str, Any]


class FeatureList(NamedTuple):
    """
    Features already built by the caller.

    Attributes:
        features: The features
    """

    features: List[Feature]


class FileSource(NamedTuple):
    """
    A file in any format geopandas can read (GeoJSON, shapefile, GeoPackage, ...).

    Attributes:
        path: The path of the file
    """

    path: Union[str, Path]


GeometrySource = Union[UrlSource, InlineFeatureCollection, FeatureList, FileSource]


def _from_collection(data: Dict[str, Any], crs: str) -> GeoDataFrame:
    if data.get("type") != "FeatureCollection":
        raise TypeError(
            f"expected a GeoJSON FeatureCollection but got {data.get('type')!r}"
        )
    if not data["features"]:
        return GeoDataFrame(geometry=[], crs=crs)
    return GeoDataFrame.from_features(data["features"], crs=crs)


def load_features(source: GeometrySource, crs: str = LATLON_CRS) -> GeoDataFrame:
    """
    Load the features of a geometry source into a GeoDataFrame.

    The caller always states the system the coordinates are in: a CRS stored in a
    file is replaced by `crs`, and the coordinates are never reprojected on load.
    For codes outside the EPSG namespace (e.g. 'GCJ-02-Geo') the frame has no CRS
    set and the code is stored in `frame.attrs['crs']`.

    Args:
        source: One of UrlSource, InlineFeatureCollection, FeatureList or FileSource
        crs: The code of the system the coordinates are expressed in. Default is EPSG:4326.

    Returns:
        A GeoDataFrame with one row per feature and one column per property

    Raises:
        TypeError: If the source is not one of the variants, or its data is not a FeatureCollection
        requests.HTTPError: If the server answers a UrlSource with an error status

    Examples:
        >>> source = InlineFeatureCollection({"type": "FeatureCollection", "features": []})
        >>> len(load_features(source))
        0
    """
    frame_crs = crs if crs.upper().startswith("EPSG:") else None

    if isinstance(source, UrlSource):
        log.debug(f"fetching features from {source.url}")
        response = requests.get(source.url, timeout=source.timeout)
        response.raise_for_status()
        frame = _from_collection(response.json(), frame_crs)
    elif isinstance(source, InlineFeatureCollection):
        frame = _from_collection(source.data, frame_crs)
    elif isinstance(source, FeatureList):
        frame = GeoDataFrame(
            [dict(f.properties or {}) for f in source.features],
            geometry=[f.geometry for f in source.features],
            crs=frame_crs,
        )
    elif isinstance(source, FileSource):
        filepath = Path(source.path)
        if not filepath.is_file():
            raise FileNotFoundError(source.path)
        frame = read_file(filepath)
        if frame.crs is not None and (frame_crs is None or not frame.crs.equals(frame_crs)):
            log.debug(f"replacing the file crs {frame.crs} with {crs}")
        frame = GeoDataFrame(
            frame.drop(columns=frame.geometry.name),
            geometry=list(frame.geometry),
            crs=frame_crs,
        )
    else:
        raise TypeError(f"unsupported geometry source {type(source).__name__}")

    frame.attrs["crs"] = crs
    return frame


def point_collection(
    records: Iterable[Dict[str, Any]],
    x_key: str = "lng",
    y_key: str = "lat",
) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection of points from plain records.

    The x and y fields become the point geometry; every other field is kept as a property.

    Args:
        records: Mappings holding at least the x and y fields
        x_key: The field holding the x value (longitude). Default is 'lng'.
        y_key: The field holding the y value (latitude). Default is 'lat'.

    Returns:
        A GeoJSON FeatureCollection mapping

    Raises:
        KeyError: If a record lacks the x or y field

    Examples:
        >>> fc = point_collection([{"lng": 113.94, "lat": 22.54, "name": "a"}])
        >>> fc["features"][0]["properties"]
        {'name': 'a'}
    """
    features = []
    for record in records:
        properties = {k: v for k, v in record.items() if k not in (x_key, y_key)}
        point = Point(record[x_key], record[y_key])
        features.append(
            {"type": "Feature", "geometry": mapping(point), "properties": properties}
        )
    return {"type": "FeatureCollection", "features": features}
