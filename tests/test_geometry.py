"""
Test script to verify the geometry functions in the harmonics module.
"""

import os
import sys
import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from harmonics.geometry import (
    calculate_face_area,
    calculate_face_area_vectorized,
    corner_angle,
    cotangent,
    face_normal,
    is_obtuse,
    opposite_angle,
    triangle_areas,
    vector_angle,
    vertex_normals,
)


def test_calculate_face_area():
    face = np.array([[0, 0, 0], [2, 0, 0], [0, 3, 0]], dtype=float)
    assert np.isclose(calculate_face_area(face), 3.0)

    faces = np.array([face, face + 1.0, face * 2])
    assert np.allclose(calculate_face_area_vectorized(faces), [3.0, 3.0, 12.0])


def test_triangle_areas(grid):
    areas = triangle_areas(grid)
    assert len(areas) == grid.face_count
    assert np.isclose(areas.sum(), 1.0)


def test_vector_angle():
    assert np.isclose(vector_angle(np.array([1.0, 0, 0]), np.array([0, 1.0, 0])), np.pi / 2)
    assert np.isclose(vector_angle(np.array([1.0, 0, 0]), np.array([-1.0, 0, 0])), np.pi)
    assert vector_angle(np.array([0.0, 0, 0]), np.array([1.0, 0, 0])) == 0.0


def test_cotangent():
    assert np.isclose(cotangent(np.pi / 4), 1.0)
    assert np.isclose(cotangent(np.pi / 2), 0.0)
    assert cotangent(0.0) == 0.0


def test_corner_and_opposite_angles(two_triangles):
    # Face 0 is (0,0) (1,0) (1,1): right angle at vertex 1
    assert np.isclose(corner_angle(two_triangles, 0, 1), np.pi / 2)
    assert np.isclose(corner_angle(two_triangles, 0, 0), np.pi / 4)
    assert np.isclose(corner_angle(two_triangles, 0, 2), np.pi / 4)

    # The diagonal is opposite the right angles in both triangles
    he = two_triangles.find_halfedge(0, 2)
    assert np.isclose(opposite_angle(two_triangles, he), np.pi / 2)
    assert np.isclose(opposite_angle(two_triangles, two_triangles.pair(he)), np.pi / 2)

    # Boundary halfedge 1 -> 0 has no face
    boundary_he = two_triangles.find_halfedge(1, 0)
    assert two_triangles.is_boundary_halfedge(boundary_he)
    assert opposite_angle(two_triangles, boundary_he) == 0.0


def test_is_obtuse(octahedron):
    assert not any(is_obtuse(octahedron, f) for f in range(octahedron.face_count))


def test_face_normal(unit_quad, tetrahedron):
    normal = face_normal(unit_quad, 0)
    assert normal[2] > 0
    assert np.allclose(normal[:2], 0.0)

    # Bottom face of the tetrahedron points down
    assert face_normal(tetrahedron, 0)[2] < 0


def test_vertex_normals_flat(grid):
    normals = vertex_normals(grid)
    assert np.allclose(normals, [0, 0, 1])


def test_vertex_normals_octahedron(octahedron):
    normals = vertex_normals(octahedron)
    assert np.allclose(np.linalg.norm(normals, axis=1), 1.0)
    # Every normal of the octahedron points away from the centre along its vertex
    assert np.allclose(normals, octahedron.vertices)


def test_vertex_normals_isolated_vertex():
    from data_types import HalfEdgeMesh
    vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [5, 5, 5]], dtype=float)
    mesh = HalfEdgeMesh(vertices, [[0, 1, 2]])
    normals = vertex_normals(mesh)
    assert np.allclose(normals[3], 0.0)
    assert np.allclose(normals[:3], [0, 0, 1])
