from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import List, Optional

from geoshift.constructs.projection import ProjectionDescriptor
from geoshift.transforms.compose import PointTransform


class RegistryInterface(metaclass=ABCMeta):
    """
    Abstract base class defining the interface for coordinate system registries.

    A registry knows a set of coordinate systems and the directed point transforms
    between them. Registries are populated once at startup and only read afterwards,
    so a populated registry can be shared by any number of readers.

    Subclasses must implement methods for:
    - Registering systems and transforms
    - Looking up systems by code
    - Resolving a (possibly composed) transform between two codes
    """

    @property
    @abstractmethod
    def hub(self) -> str:
        """
        Get the code of the system used to compose transforms that have no direct edge.

        Returns:
            The hub code, e.g. 'EPSG:4326'
        """

    @property
    @abstractmethod
    def codes(self) -> List[str]:
        """
        Get the codes of all registered systems

        Returns:
            A list of codes in registration order
        """

    @abstractmethod
    def register(self, descriptor: ProjectionDescriptor):
        """
        Register a coordinate system.

        Args:
            descriptor: The system to register. Its code must not be registered yet.
        """

    @abstractmethod
    def register_edge(
        self,
        source: str,
        target: str,
        fn: PointTransform,
        name: Optional[str] = None,
    ):
        """
        Register a directed transform between two registered systems.

        Args:
            source: The code of the system fn reads
            target: The code of the system fn writes
            fn: The point transform
            name: An optional name for the edge, defaults to 'source->target'
        """

    @abstractmethod
    def descriptor(self, code: str) -> ProjectionDescriptor:
        """
        Get a registered system by its code

        Args:
            code: The code to look up

        Returns:
            The registered descriptor
        """

    @abstractmethod
    def path(self, source: str, target: str) -> List[str]:
        """
        Get the codes a transform from source to target passes through.

        Args:
            source: The code of the input system
            target: The code of the output system

        Returns:
            The visited codes, starting with source and ending with target
        """

    @abstractmethod
    def resolve(self, source: str, target: str) -> PointTransform:
        """
        Get the point transform from one system to another.

        A direct edge is used when one exists, otherwise the transform is composed
        through the hub. Unknown or unconnected codes are errors, never identity.

        Args:
            source: The code of the input system
            target: The code of the output system

        Returns:
            A point transform from source coordinates to target coordinates
        """

    def __contains__(self, code: str) -> bool:
        return code in self.codes
