class HarmonicsError(Exception):
    """Base class for errors raised by the mesh and the harmonic operations."""


class InvalidTopologyError(HarmonicsError):
    """The mesh topology is invalid or does not support the requested operation (e.g. not triangulated)."""
