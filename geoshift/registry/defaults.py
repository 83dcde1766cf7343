"""
The built-in coordinate systems and the transforms between them.

Every system has a transform to and from the WGS84 hub. Pairs that are commonly
converted directly get their own edge, which avoids a lossy round trip through
the offset when only a projection or the polar warp separates them.
"""

import logging

from geoshift.constructs.projection import Extent, ProjectionDescriptor, Unit
from geoshift.registry.nx.nx_registry import CRSRegistry
from geoshift.transforms import offset, polar
from geoshift.transforms.compose import compose
from geoshift.transforms.mercator import (
    HALF_WORLD,
    banded_forward,
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

log = logging.getLogger(__name__)

WORLD_DEGREES = Extent(-180.0, -90.0, 180.0, 90.0)
WORLD_METERS = Extent(-HALF_WORLD, -HALF_WORLD, HALF_WORLD, HALF_WORLD)
BD09_XY_EXTENT = Extent(-20037726.37, -12474104.17, 20037726.37, 12474104.17)

BUILTIN_SYSTEMS = [
    ProjectionDescriptor(LATLON_CRS, WORLD_DEGREES, Unit.DEGREES),
    ProjectionDescriptor(XY_CRS, WORLD_METERS, Unit.METERS),
    ProjectionDescriptor(GCJ02_CRS, WORLD_DEGREES, Unit.DEGREES),
    ProjectionDescriptor(GCJ02_XY_CRS, WORLD_METERS, Unit.METERS),
    ProjectionDescriptor(BD09_CRS, WORLD_DEGREES, Unit.DEGREES),
    ProjectionDescriptor(BD09_XY_CRS, BD09_XY_EXTENT, Unit.METERS),
]


def register_builtin(registry: CRSRegistry) -> CRSRegistry:
    """
    Add the built-in systems and transforms to a registry.

    Args:
        registry: A registry whose hub is EPSG:4326 and that has none of the built-in codes yet

    Returns:
        The same registry, for chaining
    """
    for descriptor in BUILTIN_SYSTEMS:
        registry.register(descriptor)

    # hub edges
    registry.register_edges(LATLON_CRS, XY_CRS, spherical_forward, spherical_inverse)
    registry.register_edges(LATLON_CRS, GCJ02_CRS, offset.forward, offset.inverse)
    registry.register_edges(
        LATLON_CRS,
        GCJ02_XY_CRS,
        compose(offset.forward, spherical_forward),
        compose(spherical_inverse, offset.inverse),
    )
    registry.register_edges(LATLON_CRS, BD09_CRS, polar.from_public, polar.to_public)
    registry.register_edges(
        LATLON_CRS,
        BD09_XY_CRS,
        compose(polar.from_public, banded_forward),
        compose(banded_inverse, polar.to_public),
    )

    # direct edges
    registry.register_edges(
        XY_CRS,
        GCJ02_XY_CRS,
        compose(spherical_inverse, offset.forward, spherical_forward),
        compose(spherical_inverse, offset.inverse, spherical_forward),
    )
    registry.register_edges(
        XY_CRS,
        GCJ02_CRS,
        compose(spherical_inverse, offset.forward),
        compose(offset.inverse, spherical_forward),
    )
    registry.register_edges(GCJ02_CRS, GCJ02_XY_CRS, spherical_forward, spherical_inverse)
    registry.register_edges(GCJ02_CRS, BD09_CRS, polar.polar_inverse, polar.polar_forward)
    registry.register_edges(
        GCJ02_CRS,
        BD09_XY_CRS,
        compose(polar.polar_inverse, banded_forward),
        compose(banded_inverse, polar.polar_forward),
    )
    registry.register_edges(
        GCJ02_XY_CRS,
        BD09_XY_CRS,
        compose(spherical_inverse, polar.polar_inverse, banded_forward),
        compose(banded_inverse, polar.polar_forward, spherical_forward),
    )
    registry.register_edges(BD09_CRS, BD09_XY_CRS, banded_forward, banded_inverse)

    log.info(
        f"registered {len(BUILTIN_SYSTEMS)} built-in systems and {len(registry.edges)} transforms"
    )
    return registry


def default_registry() -> CRSRegistry:
    """
    Build a frozen registry holding the built-in systems.

    Each call builds a new registry; construct one at startup and pass it to
    whatever needs to transform coordinates.

    Returns:
        A frozen CRSRegistry with EPSG:4326 as its hub

    Examples:
        >>> registry = default_registry()
        >>> fn = registry.resolve('EPSG:4326', 'GCJ-02-Mecator')
        >>> x, y = fn(113.944016, 22.548752)
    """
    return register_builtin(CRSRegistry(hub=LATLON_CRS)).freeze()
