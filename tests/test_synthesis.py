"""
Test script to verify modal synthesis and colour mapping.
"""

import os
import sys
import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from harmonics.decomposition import decompose
from harmonics.diagnostics import DiagnosticKind, DiagnosticLevel, DimensionMismatchError
from harmonics.geometry import vertex_normals
from harmonics.laplacian import build_graph_laplacian
from harmonics.synthesis import (
    colour_map,
    displace_mesh,
    face_colour_map,
    harmonic_mesh,
    mode_colour_maps,
    nodal_values,
    synthesize,
    unit_directions,
)


def create_modes(mesh, count=None):
    _, eigenvectors = decompose(build_graph_laplacian(mesh), count)
    return eigenvectors


def test_single_mode_displacement(grid):
    eigenvectors = create_modes(grid, 6)
    directions = vertex_normals(grid)
    weights = np.zeros(6)
    weights[3] = 1.0

    displacements = synthesize(eigenvectors, weights, directions, 0.5)
    assert displacements.shape == (grid.vertex_count, 3)
    assert np.allclose(displacements[:, :2], 0.0)
    assert np.allclose(displacements[:, 2], 0.5 * eigenvectors[:, 3])


def test_directions_are_unitized(grid):
    eigenvectors = create_modes(grid, 4)
    weights = [0.2, -0.4, 1.0, 0.0]
    directions = vertex_normals(grid)

    assert np.allclose(
        synthesize(eigenvectors, weights, directions * 3.0, 1.0),
        synthesize(eigenvectors, weights, directions, 1.0),
    )
    assert np.allclose(unit_directions([[0, 0, 2.0], [0, 0, 0]]), [[0, 0, 1.0], [0, 0, 0]])


def test_weight_count_mismatch(grid):
    eigenvectors = create_modes(grid, 4)
    with pytest.raises(DimensionMismatchError):
        nodal_values(eigenvectors, [1.0, 2.0])
    with pytest.raises(DimensionMismatchError):
        synthesize(eigenvectors, [1.0, 2.0], vertex_normals(grid), 1.0)


def test_direction_count_mismatch(grid):
    eigenvectors = create_modes(grid, 4)
    with pytest.raises(DimensionMismatchError):
        synthesize(eigenvectors, np.ones(4), vertex_normals(grid)[:5], 1.0)


def test_displace_mesh_keeps_input(grid):
    original = grid.vertices.copy()
    moved = displace_mesh(grid, np.full((grid.vertex_count, 3), 0.1))
    assert np.allclose(grid.vertices, original)
    assert np.allclose(moved.vertices, original + 0.1)


def test_harmonic_mesh(grid):
    eigenvectors = create_modes(grid, 5)
    weights = [0.0, 0.0, 1.0, 0.0, -0.5]
    shape = harmonic_mesh(grid, eigenvectors, vertex_normals(grid), weights, 0.3)

    assert shape.diagnostics == []
    assert np.allclose(shape.nodal_values, eigenvectors @ np.array(weights))
    assert np.allclose(shape.mesh.vertices[:, 2], 0.3 * shape.nodal_values)
    assert shape.colours.min() == 0
    assert shape.colours.max() == 255


def test_harmonic_mesh_uniform_fallback(grid):
    eigenvectors = create_modes(grid, 5)
    shape = harmonic_mesh(grid, eigenvectors, vertex_normals(grid), [1.0, 2.0])

    assert np.array_equal(shape.weights, np.ones(5))
    assert len(shape.diagnostics) == 1
    assert shape.diagnostics[0].level == DiagnosticLevel.WARNING
    assert shape.diagnostics[0].kind == DiagnosticKind.DIMENSION_MISMATCH
    assert np.allclose(shape.nodal_values, eigenvectors.sum(axis=1))


def test_colour_map():
    assert np.array_equal(colour_map([0.0, 0.5, 1.0]), [0, 128, 255])
    assert np.array_equal(colour_map([-1.0, 1.0]), [0, 255])


def test_colour_map_constant_field():
    assert np.array_equal(colour_map([0.3, 0.3, 0.3]), [0, 0, 0])
    # A range that rounds to zero after scaling is treated as constant
    assert np.array_equal(colour_map([0.0, 0.0004]), [0, 0])


def test_face_colour_maps(two_triangles):
    eigenvectors = np.array([
        [1.0, 0.0],
        [1.0, 0.0],
        [1.0, 1.0],
        [1.0, -1.0]
    ])
    # Face averages of the second mode are 1/3 and 0
    assert np.array_equal(face_colour_map(two_triangles, eigenvectors, 1), [255, 0])

    maps = mode_colour_maps(two_triangles, eigenvectors)
    assert len(maps) == 2
    assert np.array_equal(maps[0], [0, 0])
