import math
from unittest import TestCase

from shapely.geometry import LineString, MultiPolygon, Point, Polygon

from geoshift.registry.defaults import default_registry
from geoshift.utils.crs import GCJ02_CRS, LATLON_CRS, XY_CRS
from geoshift.utils.geo import transform_geometry
from geoshift.utils.measure import (
    format_area,
    format_length,
    geodesic_area,
    geodesic_distance,
    geodesic_length,
    geometry_center,
    rotation,
)


class TestGeodesicMeasures(TestCase):
    def setUp(self):
        self.registry = default_registry()
        self.parcel = Polygon(
            [(113.93, 22.51), (113.93, 22.53), (113.96, 22.53), (113.96, 22.51)]
        )

    def test_equator_degree(self):
        line = LineString([(0, 0), (1, 0)])
        self.assertAlmostEqual(
            geodesic_length(line, LATLON_CRS, self.registry), 111319.49, delta=0.01
        )

    def test_length_independent_of_system(self):
        line = LineString([(113.93, 22.51), (113.96, 22.53)])
        projected = transform_geometry(line, LATLON_CRS, XY_CRS, self.registry)

        self.assertAlmostEqual(
            geodesic_length(projected, XY_CRS, self.registry),
            geodesic_length(line, LATLON_CRS, self.registry),
            delta=1e-3,
        )

    def test_area_independent_of_system(self):
        projected = transform_geometry(self.parcel, LATLON_CRS, XY_CRS, self.registry)
        area = geodesic_area(self.parcel, LATLON_CRS, self.registry)

        self.assertGreater(area, 0)
        self.assertAlmostEqual(
            geodesic_area(projected, XY_CRS, self.registry), area, delta=1e-2
        )

    def test_area_of_offset_geometry(self):
        """Measuring in GCJ-02 undoes the offset before measuring"""
        shifted = transform_geometry(self.parcel, LATLON_CRS, GCJ02_CRS, self.registry)
        area = geodesic_area(self.parcel, LATLON_CRS, self.registry)

        self.assertAlmostEqual(
            geodesic_area(shifted, GCJ02_CRS, self.registry) / area, 1.0, delta=1e-3
        )

    def test_area_ignores_orientation(self):
        reversed_parcel = Polygon(list(self.parcel.exterior.coords)[::-1])
        self.assertAlmostEqual(
            geodesic_area(reversed_parcel, LATLON_CRS, self.registry),
            geodesic_area(self.parcel, LATLON_CRS, self.registry),
        )

    def test_distance_along_equator(self):
        self.assertAlmostEqual(
            geodesic_distance((0, 0), (1, 0), LATLON_CRS, self.registry),
            111319.49,
            delta=0.01,
        )
        self.assertEqual(geodesic_distance((5, 5), (5, 5), LATLON_CRS, self.registry), 0.0)

    def test_distance_matches_line_length(self):
        a, b = (113.93, 22.51), (113.96, 22.53)
        self.assertAlmostEqual(
            geodesic_distance(a, b, LATLON_CRS, self.registry),
            geodesic_length(LineString([a, b]), LATLON_CRS, self.registry),
            delta=1e-6,
        )

    def test_distance_of_projected_points(self):
        a, b = (113.93, 22.51), (113.96, 22.53)
        registry = self.registry
        xy_a = transform_geometry(Point(a), LATLON_CRS, XY_CRS, registry)
        xy_b = transform_geometry(Point(b), LATLON_CRS, XY_CRS, registry)

        self.assertAlmostEqual(
            geodesic_distance((xy_a.x, xy_a.y), (xy_b.x, xy_b.y), XY_CRS, registry),
            geodesic_distance(a, b, LATLON_CRS, registry),
            delta=1e-3,
        )


class TestDisplayHelpers(TestCase):
    def test_format_length(self):
        self.assertEqual(format_length(42.123), "42.12 m")
        self.assertEqual(format_length(100), "100 m")
        self.assertEqual(format_length(1234.5), "1.23 km")
        self.assertEqual(format_length(2000), "2 km")

    def test_format_area(self):
        self.assertEqual(format_area(9999.5), "9999.5 m²")
        self.assertEqual(format_area(10000), "10000 m²")
        self.assertEqual(format_area(2500000), "2.5 km²")

    def test_center_of_polygon(self):
        # the bounding box center of this L shape lies outside it
        shape = Polygon([(0, 0), (10, 0), (10, 2), (2, 2), (2, 10), (0, 10)])

        self.assertTrue(shape.contains(geometry_center(shape)))
        self.assertEqual(geometry_center(shape, interior_point=False), Point(5, 5))

    def test_center_of_multipolygon(self):
        squares = MultiPolygon(
            [Polygon([(0, 0), (0, 1), (1, 1), (1, 0)]), Polygon([(4, 0), (4, 1), (5, 1), (5, 0)])]
        )
        self.assertTrue(squares.contains(geometry_center(squares)))

    def test_center_of_line(self):
        line = LineString([(0, 0), (4, 2)])
        self.assertEqual(geometry_center(line), Point(2, 1))

    def test_rotation(self):
        self.assertEqual(rotation((0, 0), (1, 0)), 0.0)
        self.assertEqual(rotation((0, 0), (0, 1)), math.pi / 2)
        self.assertEqual(rotation((1, 1), (0, 1)), math.pi)
        self.assertEqual(rotation((0, 0), (0, -1)), -math.pi / 2)
