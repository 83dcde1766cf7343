from unittest import TestCase, mock

import requests
from shapely.geometry import Polygon

from geoshift.constructs.feature import Feature
from geoshift.constructs.geometry_source import (
    FeatureList,
    FileSource,
    InlineFeatureCollection,
    UrlSource,
    load_features,
    point_collection,
)
from geoshift.utils.crs import GCJ02_CRS
from tests import get_test_dir

PARCELS_FILE = get_test_dir() / "test_assets" / "parcels.geojson"

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]],
}


def collection(*properties):
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "geometry": SQUARE, "properties": p} for p in properties
        ],
    }


class TestLoadFeatures(TestCase):
    def test_inline_collection(self):
        frame = load_features(InlineFeatureCollection(collection({"id": "a"}, {"id": "b"})))

        self.assertEqual(len(frame), 2)
        self.assertEqual(list(frame["id"]), ["a", "b"])
        self.assertEqual(frame.crs.to_epsg(), 4326)
        self.assertEqual(frame.attrs["crs"], "EPSG:4326")

    def test_inline_empty_collection(self):
        frame = load_features(InlineFeatureCollection(collection()))
        self.assertEqual(len(frame), 0)

    def test_inline_requires_feature_collection(self):
        with self.assertRaises(TypeError):
            load_features(InlineFeatureCollection(SQUARE))

    def test_offset_system_has_no_frame_crs(self):
        """Codes outside EPSG are only recorded in the frame attributes"""
        frame = load_features(InlineFeatureCollection(collection({})), crs=GCJ02_CRS)
        self.assertIsNone(frame.crs)
        self.assertEqual(frame.attrs["crs"], GCJ02_CRS)

    def test_feature_list(self):
        square = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        features = [Feature(square, {"id": "a", "area": 1}), Feature(square)]
        frame = load_features(FeatureList(features))

        self.assertEqual(len(frame), 2)
        self.assertEqual(frame["id"].iloc[0], "a")
        self.assertTrue(frame.geometry.iloc[1].equals(square))

    def test_file(self):
        frame = load_features(FileSource(PARCELS_FILE))

        self.assertEqual(len(frame), 2)
        self.assertEqual(sorted(frame["name"]), ["north lot", "south lot"])
        self.assertEqual(frame.crs.to_epsg(), 4326)

    def test_file_in_offset_system(self):
        """The stated system replaces the CRS stored in the file"""
        frame = load_features(FileSource(PARCELS_FILE), crs=GCJ02_CRS)

        self.assertIsNone(frame.crs)
        self.assertEqual(frame.attrs["crs"], GCJ02_CRS)
        self.assertEqual(list(frame["id"]), ["parcel-1", "parcel-2"])
        self.assertEqual(frame.geometry.iloc[0].bounds, (113.93, 22.55, 113.96, 22.57))

    def test_file_with_other_epsg_code(self):
        frame = load_features(FileSource(PARCELS_FILE), crs="EPSG:3857")

        self.assertEqual(frame.crs.to_epsg(), 3857)
        # coordinates are relabelled, not reprojected
        self.assertEqual(frame.geometry.iloc[0].bounds, (113.93, 22.55, 113.96, 22.57))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_features(FileSource(get_test_dir() / "test_assets" / "missing.geojson"))

    @mock.patch("geoshift.constructs.geometry_source.requests.get")
    def test_url(self, get):
        get.return_value.json.return_value = collection({"id": "remote"})

        frame = load_features(UrlSource("https://example.com/parcels.geojson", timeout=5))

        get.assert_called_once_with("https://example.com/parcels.geojson", timeout=5)
        get.return_value.raise_for_status.assert_called_once()
        self.assertEqual(list(frame["id"]), ["remote"])

    @mock.patch("geoshift.constructs.geometry_source.requests.get")
    def test_url_error_status(self, get):
        get.return_value.raise_for_status.side_effect = requests.HTTPError("404")

        with self.assertRaises(requests.HTTPError):
            load_features(UrlSource("https://example.com/missing.geojson"))

    def test_unknown_source(self):
        with self.assertRaises(TypeError):
            load_features(collection({}))


class TestPointCollection(TestCase):
    def test_records(self):
        records = [
            {"lng": 113.94, "lat": 22.54, "name": "a"},
            {"lng": 113.95, "lat": 22.55, "name": "b"},
        ]
        fc = point_collection(records)

        self.assertEqual(fc["type"], "FeatureCollection")
        self.assertEqual(len(fc["features"]), 2)
        self.assertEqual(fc["features"][1]["geometry"]["coordinates"], (113.95, 22.55))
        self.assertEqual(fc["features"][1]["properties"], {"name": "b"})
        # records are untouched
        self.assertIn("lng", records[0])

    def test_custom_keys(self):
        fc = point_collection([{"x": 1.0, "y": 2.0}], x_key="x", y_key="y")
        self.assertEqual(fc["features"][0]["geometry"]["coordinates"], (1.0, 2.0))

    def test_missing_key(self):
        with self.assertRaises(KeyError):
            point_collection([{"lng": 1.0}])

    def test_loads_as_inline_collection(self):
        fc = point_collection([{"lng": 113.94, "lat": 22.54, "name": "a"}])
        frame = load_features(InlineFeatureCollection(fc))
        self.assertEqual(frame.geometry.iloc[0].x, 113.94)
