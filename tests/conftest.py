"""
Shared test meshes.
"""

import os
import sys
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the project packages
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import HalfEdgeMesh


def create_unit_square_vertices():
    return np.array([
        [0, 0, 0],
        [1, 0, 0],
        [1, 1, 0],
        [0, 1, 0]
    ], dtype=float)


def create_grid_mesh(n=4, size=1.0):
    """(n + 1) x (n + 1) vertices on a square in the XY plane, two CCW triangles per cell."""
    def index(x, y):
        return y * (n + 1) + x

    vertices = np.array([
        [x * size / n, y * size / n, 0.0]
        for y in range(n + 1)
        for x in range(n + 1)
    ])
    faces = []
    for y in range(n):
        for x in range(n):
            a, b, c, d = index(x, y), index(x + 1, y), index(x + 1, y + 1), index(x, y + 1)
            faces.append([a, b, c])
            faces.append([a, c, d])
    return HalfEdgeMesh(vertices, faces)


@pytest.fixture
def unit_quad():
    return HalfEdgeMesh(create_unit_square_vertices(), [[0, 1, 2, 3]])


@pytest.fixture
def two_triangles():
    return HalfEdgeMesh(create_unit_square_vertices(), [[0, 1, 2], [0, 2, 3]])


@pytest.fixture
def tetrahedron():
    vertices = np.array([
        [0, 0, 0],
        [1, 0, 0],
        [0, 1, 0],
        [0, 0, 1]
    ], dtype=float)
    faces = [[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]]
    return HalfEdgeMesh(vertices, faces)


@pytest.fixture
def octahedron():
    # +x, -x, +y, -y, +z, -z
    vertices = np.array([
        [1, 0, 0],
        [-1, 0, 0],
        [0, 1, 0],
        [0, -1, 0],
        [0, 0, 1],
        [0, 0, -1]
    ], dtype=float)
    faces = [
        [0, 2, 4], [2, 1, 4], [1, 3, 4], [3, 0, 4],
        [2, 0, 5], [1, 2, 5], [3, 1, 5], [0, 3, 5]
    ]
    return HalfEdgeMesh(vertices, faces)


@pytest.fixture
def grid():
    return create_grid_mesh(4)


@pytest.fixture
def small_grid():
    return create_grid_mesh(2)
