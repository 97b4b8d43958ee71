"""Resource ownership graph assembled from per-context resolvers."""

from infrastructure.authorization.ownership_graph import CompositeOwnershipGraph

__all__ = ["CompositeOwnershipGraph"]
