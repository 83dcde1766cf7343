from geoshift.registry.nx.nx_registry import CRSRegistry, TransformEdge

__all__ = ["CRSRegistry", "TransformEdge"]
