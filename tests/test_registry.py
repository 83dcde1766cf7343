from unittest import TestCase

from geoshift.constructs.projection import Extent, ProjectionDescriptor, Unit
from geoshift.registry.defaults import BUILTIN_SYSTEMS, default_registry
from geoshift.registry.nx.nx_registry import CRSRegistry
from geoshift.transforms import offset, polar
from geoshift.transforms.mercator import (
    banded_inverse,
    spherical_forward,
    spherical_inverse,
)
from geoshift.utils.crs import (
    BD09_CRS,
    BD09_XY_CRS,
    GCJ02_CRS,
    GCJ02_XY_CRS,
    LATLON_CRS,
    XY_CRS,
)
from geoshift.utils.exceptions import (
    DuplicateCRSError,
    NoTransformPathError,
    RegistryFrozenError,
    UnregisteredCRSError,
)

LOCAL = ProjectionDescriptor("LOCAL", Extent(0.0, 0.0, 1000.0, 1000.0), Unit.METERS)


class TestCRSRegistry(TestCase):
    def setUp(self):
        self.registry = default_registry()

    def test_builtin_codes(self):
        self.assertEqual(
            self.registry.codes, [d.code for d in BUILTIN_SYSTEMS]
        )
        self.assertEqual(self.registry.hub, LATLON_CRS)
        self.assertIn(GCJ02_XY_CRS, self.registry)
        self.assertNotIn("EPSG:2000", self.registry)
        self.assertEqual(self.registry.descriptor(BD09_XY_CRS).unit, Unit.METERS)

    def test_every_system_connects_to_the_hub(self):
        for code in self.registry.codes:
            if code == LATLON_CRS:
                continue
            self.assertEqual(self.registry.path(code, LATLON_CRS), [code, LATLON_CRS])
            self.assertEqual(self.registry.path(LATLON_CRS, code), [LATLON_CRS, code])

    def test_direct_edge_preferred(self):
        self.assertEqual(
            self.registry.path(XY_CRS, GCJ02_XY_CRS), [XY_CRS, GCJ02_XY_CRS]
        )

    def test_hub_composition(self):
        """Without a direct edge the transform is hub->target after source->hub"""
        self.assertEqual(
            self.registry.path(BD09_XY_CRS, XY_CRS), [BD09_XY_CRS, LATLON_CRS, XY_CRS]
        )
        x, y = 12958000.0, 4825000.0
        fn = self.registry.resolve(BD09_XY_CRS, XY_CRS)
        expected = spherical_forward(*polar.to_public(*banded_inverse(x, y)))
        self.assertEqual(fn(x, y), expected)

    def test_direct_edge_chain(self):
        fn = self.registry.resolve(LATLON_CRS, GCJ02_XY_CRS)
        lon, lat = 113.944016, 22.548752
        self.assertEqual(fn(lon, lat), spherical_forward(*offset.forward(lon, lat)))

    def test_identity_for_same_code(self):
        fn = self.registry.resolve(GCJ02_CRS, GCJ02_CRS)
        self.assertEqual(fn(1.5, 2.5), (1.5, 2.5))

    def test_unregistered_code(self):
        with self.assertRaises(UnregisteredCRSError):
            self.registry.resolve("EPSG:2000", LATLON_CRS)
        with self.assertRaises(UnregisteredCRSError):
            self.registry.resolve(LATLON_CRS, "EPSG:2000")
        with self.assertRaises(UnregisteredCRSError):
            self.registry.descriptor("EPSG:2000")

    def test_no_transform_path(self):
        """Registered but unconnected systems are an error, never identity"""
        registry = CRSRegistry()
        registry.register(BUILTIN_SYSTEMS[0])
        registry.register(BUILTIN_SYSTEMS[1])
        registry.register(LOCAL)
        registry.register_edge(LATLON_CRS, XY_CRS, spherical_forward)

        with self.assertRaises(NoTransformPathError):
            registry.resolve("LOCAL", XY_CRS)
        # only one direction is registered
        with self.assertRaises(NoTransformPathError):
            registry.resolve(XY_CRS, LATLON_CRS)

        self.assertIs(registry.resolve(LATLON_CRS, XY_CRS), spherical_forward)

    def test_first_direct_edge_wins(self):
        registry = CRSRegistry()
        registry.register(BUILTIN_SYSTEMS[0])
        registry.register(BUILTIN_SYSTEMS[1])
        registry.register_edge(LATLON_CRS, XY_CRS, spherical_forward, name="first")
        registry.register_edge(LATLON_CRS, XY_CRS, spherical_inverse, name="second")

        self.assertIs(registry.resolve(LATLON_CRS, XY_CRS), spherical_forward)
        self.assertEqual([e.name for e in registry.edges], ["first", "second"])

    def test_duplicate_registration(self):
        registry = CRSRegistry()
        registry.register(LOCAL)
        with self.assertRaises(DuplicateCRSError):
            registry.register(LOCAL)

        registry.register_edge("LOCAL", "LOCAL", spherical_forward)
        with self.assertRaises(DuplicateCRSError):
            registry.register_edge("LOCAL", "LOCAL", spherical_forward)

    def test_edges_need_registered_codes(self):
        registry = CRSRegistry()
        registry.register(LOCAL)
        with self.assertRaises(UnregisteredCRSError):
            registry.register_edge("LOCAL", XY_CRS, spherical_forward)

    def test_frozen(self):
        with self.assertRaises(RegistryFrozenError):
            self.registry.register(LOCAL)
        with self.assertRaises(RegistryFrozenError):
            self.registry.register_edge(LATLON_CRS, XY_CRS, spherical_forward)
        self.assertTrue(self.registry.frozen)

    def test_default_registries_are_independent(self):
        self.assertIsNot(default_registry().g, self.registry.g)


class TestRoundTrips(TestCase):
    """resolve(a, b) followed by resolve(b, a) is close to identity"""

    def setUp(self):
        self.registry = default_registry()
        self.lonlat = [(116.397428, 39.90923), (113.944016, 22.548752)]

    def assert_round_trip(self, source, target, x, y, delta):
        there = self.registry.resolve(source, target)
        back = self.registry.resolve(target, source)
        bx, by = back(*there(x, y))
        self.assertAlmostEqual(bx, x, delta=delta)
        self.assertAlmostEqual(by, y, delta=delta)

    def test_degree_systems(self):
        for lon, lat in self.lonlat:
            self.assert_round_trip(LATLON_CRS, GCJ02_CRS, lon, lat, 5e-5)
            self.assert_round_trip(LATLON_CRS, BD09_CRS, lon, lat, 1e-4)
            self.assert_round_trip(GCJ02_CRS, BD09_CRS, lon, lat, 2e-5)
            self.assert_round_trip(BD09_CRS, GCJ02_CRS, lon, lat, 2e-5)

    def test_projected_systems(self):
        for lon, lat in self.lonlat:
            self.assert_round_trip(LATLON_CRS, XY_CRS, lon, lat, 1e-9)
            self.assert_round_trip(GCJ02_CRS, GCJ02_XY_CRS, lon, lat, 1e-9)
            self.assert_round_trip(BD09_CRS, BD09_XY_CRS, lon, lat, 1e-5)

            x, y = spherical_forward(lon, lat)
            # meters
            self.assert_round_trip(XY_CRS, GCJ02_XY_CRS, x, y, 10.0)
            self.assert_round_trip(GCJ02_XY_CRS, BD09_XY_CRS, x, y, 5.0)
            self.assert_round_trip(XY_CRS, BD09_XY_CRS, x, y, 20.0)
