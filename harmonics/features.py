"""
Peak and trough detection on mode fields.

A vertex is a local peak if its mode value is strictly greater than the value of every
1-ring neighbour, and a global peak if it is also strictly greater than every vertex of
its 2-ring. Troughs use the reversed comparison. Values are rounded before comparing so
that numerically flat regions do not produce spurious extrema.
"""

import logging
from dataclasses import dataclass

import networkx as nx
import numpy as np
from numpy.typing import NDArray

from data_types import HalfEdgeMesh

from . import config
from .diagnostics import DimensionMismatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtremumCount:
    global_count: int
    local_count: int  # includes the global extrema

    def __str__(self):
        return f"Global: {self.global_count}, Local: {self.local_count}"


@dataclass(frozen=True)
class ModeFeatures:
    mode: int
    peaks: ExtremumCount
    troughs: ExtremumCount


def vertex_graph(mesh: HalfEdgeMesh) -> nx.Graph:
    """Undirected graph of the mesh vertices and edges."""
    graph = nx.Graph()
    graph.add_nodes_from(range(mesh.vertex_count))
    graph.add_edges_from(mesh.edges.tolist())
    return graph


def two_ring(graph: nx.Graph, vertex: int) -> list[int]:
    """Vertices at exactly two edges from ``vertex``."""
    distances = nx.single_source_shortest_path_length(graph, vertex, cutoff=2)
    return [v for v, d in distances.items() if d == 2]


def extremum_vertices(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], mode: int, peaks: bool = True, graph: nx.Graph = None) -> tuple[list[int], list[int]]:
    """
    Vertices that are extrema of one mode.

    Returns:
        Tuple of (global extremum vertices, local extremum vertices). Global extrema are
        also listed as local extrema.
    """
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    if eigenvectors.shape[0] != mesh.vertex_count:
        raise DimensionMismatchError(
            f"The mode matrix has {eigenvectors.shape[0]} rows for {mesh.vertex_count} vertices"
        )
    if graph is None:
        graph = vertex_graph(mesh)

    sign = 1.0 if peaks else -1.0
    values = np.round(eigenvectors[:, mode], config.FEATURE_DECIMALS) * sign

    global_vertices = []
    local_vertices = []
    for vertex in range(mesh.vertex_count):
        neighbours = list(graph.neighbors(vertex))
        if not neighbours:
            continue
        if not np.all(values[vertex] > values[neighbours]):
            continue
        local_vertices.append(vertex)

        ring = two_ring(graph, vertex)
        if np.all(values[vertex] > values[ring]):
            global_vertices.append(vertex)

    return global_vertices, local_vertices


def count_extrema(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], mode: int, peaks: bool = True, graph: nx.Graph = None) -> ExtremumCount:
    """Number of global and local peaks (or troughs) of one mode."""
    global_vertices, local_vertices = extremum_vertices(mesh, eigenvectors, mode, peaks, graph)
    return ExtremumCount(len(global_vertices), len(local_vertices))


def detect_features(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64]) -> list[ModeFeatures]:
    """Peak and trough counts for every mode (column) of the eigenvector matrix."""
    graph = vertex_graph(mesh)
    features = []
    for mode in range(np.shape(eigenvectors)[1]):
        features.append(ModeFeatures(
            mode=mode,
            peaks=count_extrema(mesh, eigenvectors, mode, True, graph),
            troughs=count_extrema(mesh, eigenvectors, mode, False, graph),
        ))
        logger.debug(f"Mode {mode}: peaks ({features[-1].peaks}), troughs ({features[-1].troughs})")
    return features
