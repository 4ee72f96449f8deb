"""
Test script to verify the area calibration.
"""

import os
import sys
import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from harmonics.calibration import adjusted_scale, adjusted_weights, calibrate_area, mesh_area
from harmonics.decomposition import decompose
from harmonics.diagnostics import DiagnosticKind, DiagnosticLevel, InvalidTopologyError
from harmonics.geometry import vertex_normals
from harmonics.laplacian import build_graph_laplacian


SCALE = 0.2


def create_calibration_setup(mesh):
    """Flat target shape and a new shape made of two modes."""
    _, eigenvectors = decompose(build_graph_laplacian(mesh))
    target_weights = np.zeros(mesh.vertex_count)
    new_weights = np.zeros(mesh.vertex_count)
    new_weights[3] = 1.0
    new_weights[5] = -0.5
    return eigenvectors, vertex_normals(mesh), target_weights, new_weights


def test_mesh_area(grid, unit_quad):
    assert np.isclose(mesh_area(grid), 1.0)
    with pytest.raises(InvalidTopologyError):
        mesh_area(unit_quad)


def test_adjusted_weights():
    adjusted = adjusted_weights([1.0, -1.0, 0.5], [0.5, -0.5, 0.0], 2.0)
    assert np.allclose(adjusted, [1.5, -1.5, 1.0])

    # A negative factor moves every weight towards zero
    adjusted = adjusted_weights([0.0, 0.0], [0.4, -0.4], -0.5)
    assert np.allclose(adjusted, [0.2, -0.2])


def test_adjusted_scale():
    assert np.isclose(adjusted_scale(2.0, 1.0, 0.5), 1.5)
    assert np.isclose(adjusted_scale(1.0, 2.0, 0.5), 2.5)
    assert adjusted_scale(1.0, 1.0, 3.0) == 1.0


def test_calibration_converges(grid):
    eigenvectors, directions, target_weights, new_weights = create_calibration_setup(grid)
    result = calibrate_area(
        grid, eigenvectors, directions,
        target_weights, SCALE, new_weights, SCALE, percentage=2.0,
    )

    assert result.iterations < 100
    assert result.diagnostics == []
    assert result.area_difference == 2.0
    assert np.isclose(result.area, mesh_area(result.mesh))
    assert abs((result.area - 1.0) * 100.0 - 2.0) <= 0.5
    assert np.max(np.abs(result.weights)) <= 1.0 + 1e-12
    # Every weight keeps its sign
    assert result.weights[3] > 0
    assert result.weights[5] < 0


def test_calibration_percentage_rounded(grid):
    eigenvectors, directions, target_weights, new_weights = create_calibration_setup(grid)
    result = calibrate_area(
        grid, eigenvectors, directions,
        target_weights, SCALE, new_weights, SCALE, percentage=2.04,
    )
    assert result.area_difference == 2.0


def test_calibration_already_at_target(grid):
    eigenvectors, directions, _, new_weights = create_calibration_setup(grid)
    result = calibrate_area(
        grid, eigenvectors, directions,
        new_weights, SCALE, new_weights, SCALE, percentage=0.0,
    )

    assert result.iterations == 0
    assert result.area_difference == 0.0
    assert np.allclose(result.weights, new_weights)
    assert result.scale == SCALE


def test_calibration_iteration_limit(grid):
    eigenvectors, directions, target_weights, new_weights = create_calibration_setup(grid)
    result = calibrate_area(
        grid, eigenvectors, directions,
        target_weights, SCALE, new_weights, SCALE, percentage=80.0, max_iterations=3,
    )

    assert result.iterations == 3
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].level == DiagnosticLevel.REMARK
    assert result.diagnostics[0].kind == DiagnosticKind.ITERATION_LIMIT_REACHED


def test_calibration_requires_triangles(unit_quad):
    eigenvectors = np.eye(4)
    with pytest.raises(InvalidTopologyError):
        calibrate_area(unit_quad, eigenvectors, vertex_normals(unit_quad), np.zeros(4), 1.0, np.ones(4), 1.0)


def test_calibration_zero_target_area(two_triangles):
    collapsed = two_triangles.with_vertices(np.zeros((4, 3)))
    eigenvectors = np.eye(4)
    with pytest.raises(ValueError):
        calibrate_area(collapsed, eigenvectors, np.tile([0, 0, 1.0], (4, 1)), np.zeros(4), 1.0, np.ones(4), 1.0)
