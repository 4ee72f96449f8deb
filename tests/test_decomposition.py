"""
Test script to verify the eigendecomposition of Laplacians.
"""

import os
import sys
import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from harmonics.boundary import apply_fixed_points
from harmonics.decomposition import decompose, extract_modes
from harmonics.diagnostics import DimensionMismatchError
from harmonics.laplacian import build_cotangent_laplacian, build_graph_laplacian


def test_unit_square_spectrum(unit_quad):
    eigenvalues, eigenvectors = decompose(build_graph_laplacian(unit_quad))
    assert np.allclose(eigenvalues, [0.0, 2.0, 2.0, 4.0])
    # The null vector is constant, up to sign
    assert np.allclose(np.abs(eigenvectors[:, 0]), 0.5)


def test_eigenpairs(grid):
    laplacian = build_cotangent_laplacian(grid)
    eigenvalues, eigenvectors = decompose(laplacian)

    assert eigenvalues.shape == (grid.vertex_count,)
    assert eigenvectors.shape == (grid.vertex_count, grid.vertex_count)
    assert np.all(np.diff(eigenvalues) >= -1e-10)
    assert np.allclose(laplacian @ eigenvectors, eigenvectors * eigenvalues)
    assert np.allclose(eigenvectors.T @ eigenvectors, np.eye(grid.vertex_count))


def test_count_clamped(tetrahedron):
    laplacian = build_graph_laplacian(tetrahedron)

    eigenvalues, eigenvectors = decompose(laplacian, 2)
    assert eigenvalues.shape == (2,)
    assert eigenvectors.shape == (4, 2)

    eigenvalues, eigenvectors = decompose(laplacian, 0)
    assert eigenvalues.shape == (1,)

    eigenvalues, eigenvectors = decompose(laplacian, 100)
    assert eigenvalues.shape == (4,)
    assert np.allclose(eigenvalues, [0.0, 4.0, 4.0, 4.0])


def test_fixed_vertices_have_small_displacements(small_grid):
    result = apply_fixed_points(build_graph_laplacian(small_grid), small_grid, small_grid.vertices[[0, 2, 6, 8]])
    eigenvalues, eigenvectors = decompose(result.laplacian, result.max_mode_count)

    assert eigenvalues.shape == (5,)
    # The low modes barely move the penalised corners
    assert np.all(np.abs(eigenvectors[[0, 2, 6, 8], :]) < 1e-3)


def test_non_square_matrix():
    with pytest.raises(DimensionMismatchError):
        decompose(np.zeros((3, 4)))


def test_extract_modes(tetrahedron):
    _, eigenvectors = decompose(build_graph_laplacian(tetrahedron))
    reduced = extract_modes(eigenvectors, [3, 0])
    assert reduced.shape == (4, 2)
    assert np.array_equal(reduced[:, 0], eigenvectors[:, 3])
    assert np.array_equal(reduced[:, 1], eigenvectors[:, 0])

    with pytest.raises(DimensionMismatchError):
        extract_modes(eigenvectors, [4])
