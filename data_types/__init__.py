from .errors import HarmonicsError, InvalidTopologyError
from .halfedge_mesh import HalfEdgeMesh

__all__ = ["HalfEdgeMesh", "HarmonicsError", "InvalidTopologyError"]
