"""
Discrete Laplace operators on half-edge meshes.

Both operators are dense, symmetric, and have zero row sums:

    L_ij = -w_ij          if (i, j) is an edge
    L_ii = sum_j w_ij

The graph Laplacian uses w_ij = 1. The cotangent Laplacian uses
w_ij = cot(alpha_ij) + cot(beta_ij), optionally divided by sqrt(A_i * A_j)
where A_i is a (rescaled) barycentric or Voronoi vertex area.
"""

import logging
from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from data_types import HalfEdgeMesh

from . import config
from .diagnostics import InvalidTopologyError
from .geometry import (
    calculate_face_area,
    corner_angle,
    cotangent,
    edge_vector,
    is_obtuse,
    opposite_angle,
    outgoing_halfedge,
)

logger = logging.getLogger(__name__)


class AreaOption(IntEnum):
    BARYCENTRIC = 0
    VORONOI = 1
    UNWEIGHTED = 2

    @classmethod
    def coerce(cls, value) -> "AreaOption":
        """Accept an AreaOption or an integer, clamping integers into the valid range."""
        if isinstance(value, cls):
            return value
        return cls(min(max(int(value), cls.BARYCENTRIC), cls.UNWEIGHTED))


def build_graph_laplacian(mesh: HalfEdgeMesh) -> NDArray[np.float64]:
    """Graph Laplacian: vertex valence on the diagonal, -1 for connected vertices."""
    n = mesh.vertex_count
    laplacian = np.zeros((n, n))
    i, j = mesh.edges[:, 0], mesh.edges[:, 1]
    laplacian[i, j] = -1.0
    laplacian[j, i] = -1.0
    np.fill_diagonal(laplacian, [mesh.valence(v) for v in range(n)])
    return laplacian


def barycentric_vertex_area(mesh: HalfEdgeMesh, vertex_index: int) -> float:
    """One third of the area of every incident triangle."""
    area = 0.0
    for face_index in mesh.vertex_faces(vertex_index):
        area += calculate_face_area(mesh.vertices[list(mesh.face_vertices(face_index))]) / 3
    return area


def voronoi_vertex_area(mesh: HalfEdgeMesh, vertex_index: int) -> float:
    """
    Mixed Voronoi area of a vertex.

    Non-obtuse triangles contribute their exact Voronoi region,
    (1/8) * (|e_out|^2 cot(opposite e_out) + |e_in|^2 cot(opposite e_in)).
    Triangles with an angle of 90 degrees or more contribute T/2 at the obtuse corner
    and T/4 at the other two.
    """
    area = 0.0
    for face_index in mesh.vertex_faces(vertex_index):
        face_area = calculate_face_area(mesh.vertices[list(mesh.face_vertices(face_index))])

        if is_obtuse(mesh, face_index):
            if corner_angle(mesh, face_index, vertex_index) >= np.pi / 2:
                area += face_area / 2
            else:
                area += face_area / 4
        else:
            he_out = outgoing_halfedge(mesh, vertex_index, face_index)
            he_in = mesh.halfedge_prev[he_out]
            length_out_sq = np.sum(edge_vector(mesh, he_out) ** 2)
            length_in_sq = np.sum(edge_vector(mesh, he_in) ** 2)
            area += (1 / 8.0) * (
                length_out_sq * cotangent(opposite_angle(mesh, he_out))
                + length_in_sq * cotangent(opposite_angle(mesh, he_in))
            )
    return area


def vertex_areas(mesh: HalfEdgeMesh, area_option=AreaOption.VORONOI) -> NDArray[np.float64]:
    """
    Area associated with each vertex, mapped so the largest is AREA_MAP_MAXIMUM.

    The unweighted option returns zeros.
    """
    area_option = AreaOption.coerce(area_option)
    if area_option == AreaOption.UNWEIGHTED:
        return np.zeros(mesh.vertex_count)

    if area_option == AreaOption.BARYCENTRIC:
        areas = np.array([barycentric_vertex_area(mesh, v) for v in range(mesh.vertex_count)])
    else:
        areas = np.array([voronoi_vertex_area(mesh, v) for v in range(mesh.vertex_count)])

    area_max = areas.max() if len(areas) else 0.0
    if area_max <= 0.0:
        logger.warning("All vertex areas are zero, skipping area mapping")
        return areas
    return areas / area_max * config.AREA_MAP_MAXIMUM


def cotangent_edge_weights(mesh: HalfEdgeMesh, areas: NDArray[np.float64], area_option=AreaOption.VORONOI) -> NDArray[np.float64]:
    """
    Cotangent weight of every undirected edge, parallel to ``mesh.edges``.

    A boundary edge only has one opposite angle; the missing side contributes 0.
    """
    area_option = AreaOption.coerce(area_option)
    weights = np.zeros(mesh.edge_count)
    for edge_index, (i, j) in enumerate(mesh.edges):
        alpha = opposite_angle(mesh, 2 * edge_index)
        beta = opposite_angle(mesh, 2 * edge_index + 1)
        w_ij = cotangent(alpha) + cotangent(beta)

        if area_option != AreaOption.UNWEIGHTED:
            w_ij /= np.sqrt(areas[i] * areas[j])
        weights[edge_index] = w_ij
    return weights


def build_cotangent_laplacian(mesh: HalfEdgeMesh, area_option=AreaOption.VORONOI) -> NDArray[np.float64]:
    """
    Cotangent Laplacian of a triangulated mesh.

    Args:
        mesh: Triangulated half-edge mesh
        area_option: AreaOption (or 0 = barycentric, 1 = Voronoi, 2 = unweighted)

    Returns:
        NDArray[np.float64]: Dense n x n symmetric matrix with zero row sums

    Raises:
        InvalidTopologyError: If any face is not a triangle
    """
    if not mesh.is_triangulated():
        raise InvalidTopologyError("The input mesh has to be triangulated")
    area_option = AreaOption.coerce(area_option)

    areas = vertex_areas(mesh, area_option)
    weights = cotangent_edge_weights(mesh, areas, area_option)

    n = mesh.vertex_count
    laplacian = np.zeros((n, n))
    i, j = mesh.edges[:, 0], mesh.edges[:, 1]
    laplacian[i, j] = -weights
    laplacian[j, i] = -weights

    diagonal = np.zeros(n)
    np.add.at(diagonal, i, weights)
    np.add.at(diagonal, j, weights)
    np.fill_diagonal(laplacian, diagonal)

    logger.debug(f"Built {n}x{n} cotangent Laplacian ({area_option.name.lower()} areas)")
    return laplacian
