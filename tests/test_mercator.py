from unittest import TestCase

import numpy as np
from pyproj import Transformer

from geoshift.transforms import mercator


class TestSphericalMercator(TestCase):
    def test_origin(self):
        self.assertEqual(mercator.spherical_forward(0.0, 0.0), (0.0, 0.0))

    def test_world_edges(self):
        """The antimeridian and the clamped latitude land on the square world edge"""
        x, _ = mercator.spherical_forward(180.0, 0.0)
        self.assertAlmostEqual(x, mercator.HALF_WORLD, delta=1e-6)

        _, y = mercator.spherical_forward(0.0, 90.0)
        self.assertAlmostEqual(y, mercator.HALF_WORLD, delta=0.1)

        _, y_clamped = mercator.spherical_forward(0.0, -89.0)
        _, y_max = mercator.spherical_forward(0.0, -mercator.MAX_LATITUDE)
        self.assertEqual(y_clamped, y_max)

    def test_round_trip(self):
        for lon in (-179.5, -74.006, 0.0, 113.944016, 180.0):
            for lat in (-85.05, -33.8688, 0.0, 22.548752, 85.05):
                back_lon, back_lat = mercator.spherical_inverse(
                    *mercator.spherical_forward(lon, lat)
                )
                self.assertAlmostEqual(back_lon, lon, delta=1e-9)
                self.assertAlmostEqual(back_lat, lat, delta=1e-9)

    def test_matches_pyproj(self):
        """The forward projection agrees with PROJ's EPSG:3857"""
        transformer = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
        lons = np.array([-74.006, 0.5, 113.944016, 151.2093])
        lats = np.array([40.7128, -10.0, 22.548752, -33.8688])

        x, y = mercator.spherical_forward(lons, lats)
        ex, ey = transformer.transform(lons, lats)

        np.testing.assert_allclose(x, ex, atol=1e-4)
        np.testing.assert_allclose(y, ey, atol=1e-4)


class TestBandedMercator(TestCase):
    def test_wrap_longitude(self):
        np.testing.assert_allclose(
            mercator.wrap_longitude([190.0, 540.0, -190.0, 180.0, -180.0, 12.5]),
            [-170.0, 180.0, 170.0, 180.0, -180.0, 12.5],
        )

    def test_band_selection(self):
        """The coefficient row is the first band |lat| meets or exceeds"""
        x, y = mercator.banded_forward(0.0, 0.0)
        self.assertEqual(x, mercator.LL2MC[5][0])
        self.assertEqual(y, mercator.LL2MC[5][2])

    def test_symmetry(self):
        """Southern and western inputs mirror the northern and eastern ones"""
        x, y = mercator.banded_forward(116.4, 39.9)
        mx, my = mercator.banded_forward(-116.4, -39.9)
        self.assertEqual(mx, -x)
        self.assertEqual(my, -y)

    def test_latitude_clamp(self):
        self.assertEqual(
            mercator.banded_forward(10.0, 80.0), mercator.banded_forward(10.0, 74.0)
        )

    def test_longitude_wrap(self):
        np.testing.assert_allclose(
            mercator.banded_forward(190.0, 20.0),
            mercator.banded_forward(-170.0, 20.0),
        )

    def assert_round_trip(self, lats, delta):
        for lon in (-179.0, -73.98, 0.5, 116.404, 151.2):
            for lat in lats:
                back_lon, back_lat = mercator.banded_inverse(
                    *mercator.banded_forward(lon, lat)
                )
                self.assertAlmostEqual(back_lon, lon, delta=delta)
                self.assertAlmostEqual(back_lat, lat, delta=delta)

    def test_round_trip_low_latitudes(self):
        """Up to 45 degrees inverse undoes forward to about a meter on the ground"""
        self.assert_round_trip((-33.87, -5.0, 7.0, 22.54, 39.9), delta=1e-5)

    def test_round_trip_high_latitudes(self):
        """The polar bands are looser fits, good to about ten meters"""
        self.assert_round_trip((-70.0, -52.0, 52.0, 70.0), delta=1e-4)

    def test_round_trip_at_band_edge(self):
        self.assert_round_trip((-60.0, 60.0), delta=1e-4)

    def test_arrays(self):
        lons = np.array([116.404, -73.98])
        lats = np.array([39.915, 40.75])
        x, y = mercator.banded_forward(lons, lats)
        self.assertEqual(x.shape, (2,))
        self.assertEqual(x[0], mercator.banded_forward(116.404, 39.915)[0])
        self.assertEqual(y[1], mercator.banded_forward(-73.98, 40.75)[1])
