from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional

import networkx as nx

from geoshift.constructs.projection import ProjectionDescriptor
from geoshift.registry.registry_interface import RegistryInterface
from geoshift.transforms.compose import PointTransform, compose, identity
from geoshift.utils.crs import HUB_CRS
from geoshift.utils.exceptions import (
    DuplicateCRSError,
    NoTransformPathError,
    RegistryFrozenError,
    UnregisteredCRSError,
)
from geoshift.utils.keys import (
    DEFAULT_DESCRIPTOR_KEY,
    DEFAULT_HUB_KEY,
    DEFAULT_TRANSFORM_KEY,
)

log = logging.getLogger(__name__)


class TransformEdge(NamedTuple):
    """
    A directed, named transform between two registered systems.

    Attributes:
        source: The code of the system the transform reads
        target: The code of the system the transform writes
        name: The name of the edge, unique per (source, target) pair
        fn: The point transform
    """

    source: str
    target: str
    name: str
    fn: PointTransform


class CRSRegistry(RegistryInterface):
    """
    A coordinate system registry backed by a NetworkX MultiDiGraph.

    Every registered system is a node holding its ProjectionDescriptor, every
    transform is a keyed edge holding its point transform. The graph is append-only:
    nothing is ever removed, and once `freeze` is called nothing more can be added.

    Transforms are resolved from a direct edge when one exists (the first edge
    registered for the pair wins), otherwise by composing `source -> hub` and
    `hub -> target`. Pairs that cannot be connected that way raise
    NoTransformPathError.

    Attributes:
        g: The NetworkX MultiDiGraph holding systems and transforms

    Examples:
        >>> from geoshift.registry.defaults import default_registry
        >>> registry = default_registry()
        >>> to_wgs84 = registry.resolve('GCJ-02-Mecator', 'EPSG:4326')
        >>> registry.path('BD-09-Mecator', 'EPSG:3857')
        ['BD-09-Mecator', 'EPSG:4326', 'EPSG:3857']
    """

    def __init__(self, hub: str = HUB_CRS, graph: Optional[nx.MultiDiGraph] = None):
        if graph is None:
            graph = nx.MultiDiGraph()
        graph.graph.setdefault(DEFAULT_HUB_KEY, hub)
        self.g = graph
        self._frozen = False

    def __repr__(self):
        return f"CRSRegistry(hub={self.hub}, codes={self.codes}, frozen={self.frozen})"

    @property
    def hub(self) -> str:
        return self.g.graph[DEFAULT_HUB_KEY]

    @property
    def codes(self) -> List[str]:
        return list(self.g.nodes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def edges(self) -> List[TransformEdge]:
        """
        Get all registered transforms in registration order.
        """
        return [
            TransformEdge(u, v, k, d[DEFAULT_TRANSFORM_KEY])
            for u, v, k, d in self.g.edges(keys=True, data=True)
        ]

    def __contains__(self, code: str) -> bool:
        return code in self.g

    def freeze(self) -> CRSRegistry:
        """
        Stop accepting registrations.

        Returns:
            The registry itself, to allow `registry = build().freeze()`
        """
        self._frozen = True
        return self

    def _check_writable(self):
        if self._frozen:
            raise RegistryFrozenError("registry is frozen; register systems at startup")

    def _check_registered(self, code: str):
        if code not in self.g:
            raise UnregisteredCRSError(code)

    def register(self, descriptor: ProjectionDescriptor):
        self._check_writable()
        if descriptor.code in self.g:
            raise DuplicateCRSError(f"CRS {descriptor.code!r} is already registered")

        self.g.add_node(descriptor.code, **{DEFAULT_DESCRIPTOR_KEY: descriptor})
        log.debug(f"registered crs {descriptor.code} ({descriptor.unit.value})")

    def register_edge(
        self,
        source: str,
        target: str,
        fn: PointTransform,
        name: Optional[str] = None,
    ):
        self._check_writable()
        self._check_registered(source)
        self._check_registered(target)

        if name is None:
            name = f"{source}->{target}"
        if self.g.has_edge(source, target, key=name):
            raise DuplicateCRSError(
                f"transform {name!r} from {source!r} to {target!r} is already registered"
            )

        self.g.add_edge(source, target, key=name, **{DEFAULT_TRANSFORM_KEY: fn})
        log.debug(f"registered transform {name}")

    def register_edges(
        self,
        a: str,
        b: str,
        forward: PointTransform,
        inverse: PointTransform,
    ):
        """
        Register a transform and its inverse in one call.

        Args:
            a: The code of the first system
            b: The code of the second system
            forward: The transform from a to b
            inverse: The transform from b to a
        """
        self.register_edge(a, b, forward)
        self.register_edge(b, a, inverse)

    def descriptor(self, code: str) -> ProjectionDescriptor:
        self._check_registered(code)
        return self.g.nodes[code][DEFAULT_DESCRIPTOR_KEY]

    def _direct(self, source: str, target: str) -> Optional[PointTransform]:
        edges = self.g.get_edge_data(source, target)
        if not edges:
            return None
        first = next(iter(edges.values()))
        return first[DEFAULT_TRANSFORM_KEY]

    def path(self, source: str, target: str) -> List[str]:
        self._check_registered(source)
        self._check_registered(target)

        if source == target:
            return [source]
        if self.g.has_edge(source, target):
            return [source, target]

        hub = self.hub
        if (
            hub not in (source, target)
            and self.g.has_edge(source, hub)
            and self.g.has_edge(hub, target)
        ):
            return [source, hub, target]

        raise NoTransformPathError(source, target)

    def resolve(self, source: str, target: str) -> PointTransform:
        codes = self.path(source, target)
        if len(codes) == 1:
            return identity

        steps = [self._direct(a, b) for a, b in zip(codes, codes[1:])]
        return compose(*steps)
