"""
Geometry utilities for half-edge meshes: areas, corner angles, cotangents and normals.
"""


import numpy as np
from numpy.typing import NDArray

from data_types import HalfEdgeMesh


def calculate_face_area(face_verts: NDArray[np.float64]) -> float:
    """Calculate the area of a 3D triangle."""
    p1_3d, p2_3d, p3_3d = face_verts
    v1 = p2_3d - p1_3d
    v2 = p3_3d - p1_3d
    return 0.5 * np.linalg.norm(np.cross(v1, v2))


def calculate_face_area_vectorized(faces_3d: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Vectorized triangle areas.

    Args:
        faces_3d: Array of shape (n_faces, 3, 3) holding the corner positions of each triangle

    Returns:
        NDArray[np.float64]: Area of each triangle
    """
    v1 = faces_3d[:, 1] - faces_3d[:, 0]
    v2 = faces_3d[:, 2] - faces_3d[:, 0]
    return 0.5 * np.linalg.norm(np.cross(v1, v2), axis=1)


def triangle_areas(mesh: HalfEdgeMesh) -> NDArray[np.float64]:
    """Area of every face of a triangulated mesh."""
    return calculate_face_area_vectorized(mesh.vertices[mesh.triangle_array()])


def vector_angle(v1: NDArray[np.float64], v2: NDArray[np.float64]) -> float:
    """Angle in radians between two vectors, 0.0 if either has zero length."""
    n1 = np.linalg.norm(v1)
    n2 = np.linalg.norm(v2)
    if n1 == 0.0 or n2 == 0.0:
        return 0.0
    cos_theta = np.dot(v1, v2) / (n1 * n2)
    return float(np.arccos(np.clip(cos_theta, -1.0, 1.0)))


def edge_vector(mesh: HalfEdgeMesh, halfedge_index: int) -> NDArray[np.float64]:
    """Vector from the start to the end vertex of a halfedge."""
    start = mesh.halfedge_start[halfedge_index]
    end = mesh.halfedge_end(halfedge_index)
    return mesh.vertices[end] - mesh.vertices[start]


def outgoing_halfedge(mesh: HalfEdgeMesh, vertex_index: int, face_index: int) -> int:
    """The halfedge of a face that starts at the given vertex, -1 if the vertex is not a corner."""
    for he in mesh.face_halfedges(face_index):
        if mesh.halfedge_start[he] == vertex_index:
            return he
    return -1


def corner_angle(mesh: HalfEdgeMesh, face_index: int, vertex_index: int) -> float:
    """Interior angle of a face (any polygon) at one of its corners."""
    he_out = outgoing_halfedge(mesh, vertex_index, face_index)
    if he_out == -1:
        return 0.0
    he_in = mesh.halfedge_prev[he_out]
    return vector_angle(edge_vector(mesh, he_out), -edge_vector(mesh, he_in))


def opposite_angle(mesh: HalfEdgeMesh, halfedge_index: int) -> float:
    """
    Angle opposite a halfedge in its (triangular) face.

    Returns 0.0 for boundary halfedges, which have no face.
    """
    face_index = mesh.halfedge_face[halfedge_index]
    if face_index == -1:
        return 0.0
    opposite_vertex = mesh.halfedge_start[mesh.halfedge_prev[halfedge_index]]
    return corner_angle(mesh, face_index, opposite_vertex)


def cotangent(angle: float) -> float:
    """Cotangent of an angle; a zero angle (missing triangle) contributes nothing."""
    if angle == 0.0:
        return 0.0
    return 1.0 / np.tan(angle)


def is_obtuse(mesh: HalfEdgeMesh, face_index: int) -> bool:
    """True if any corner of the face has an angle of 90 degrees or more."""
    return any(
        corner_angle(mesh, face_index, v) >= np.pi / 2
        for v in mesh.face_vertices(face_index)
    )


def face_normal(mesh: HalfEdgeMesh, face_index: int) -> NDArray[np.float64]:
    """
    Face normal (not normalised) of an n-gon as the average cross product of consecutive edges.
    """
    edge_vectors = np.array([edge_vector(mesh, he) for he in mesh.face_halfedges(face_index)])
    shifted = np.roll(edge_vectors, -1, axis=0)
    return np.cross(edge_vectors, shifted).sum(axis=0) / len(edge_vectors)


def vertex_normals(mesh: HalfEdgeMesh) -> NDArray[np.float64]:
    """
    Unit vertex normals as the area weighted average of the adjacent face normals.

    Vertices without faces, or whose face normals cancel, get a zero normal.
    """
    face_normals = np.array([face_normal(mesh, f) for f in range(mesh.face_count)]).reshape(-1, 3)
    normals = np.zeros((mesh.vertex_count, 3))
    for v in range(mesh.vertex_count):
        for f in mesh.vertex_faces(v):
            normals[v] += face_normals[f]

    lengths = np.linalg.norm(normals, axis=1)
    nonzero = lengths > 0
    normals[nonzero] /= lengths[nonzero, np.newaxis]
    return normals
