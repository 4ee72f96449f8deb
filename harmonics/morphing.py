"""
Modal morphing between two harmonic shapes.

Each mode of the combined mode list is interpolated with its own coefficient,
and the scale factors with one extra coefficient:

    morph = sum_j ((1 - lambda_j) * w1_j + lambda_j * w2_j) * V[:, j]
    scale = (1 - lambda_s) * s1 + lambda_s * s2
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from data_types import HalfEdgeMesh

from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    DimensionMismatchError,
    report,
)
from .synthesis import displace_mesh, map_to_displacements

logger = logging.getLogger(__name__)


@dataclass
class MorphResult:
    mesh: HalfEdgeMesh
    mode_indices: list[int]
    intervals: list[tuple[float, float]]  # (weight in shape 1, weight in shape 2) per mode
    displacements: NDArray[np.float64]
    coefficients: NDArray[np.float64]  # per-mode coefficients followed by the scale coefficient
    diagnostics: list[Diagnostic] = field(default_factory=list)


def create_total_mode_list(indices1: Sequence[int], indices2: Sequence[int]) -> list[int]:
    """Distinct modes of shape 1 in order, followed by the modes of shape 2 not already listed."""
    modes = []
    for j in list(indices1) + list(indices2):
        if int(j) not in modes:
            modes.append(int(j))
    return modes


def align_weights(total_indices: Sequence[int], indices: Sequence[int], weights) -> NDArray[np.float64]:
    """
    Weights reordered onto ``total_indices``, with 0.0 for modes the shape does not use.

    A mode listed more than once contributes the sum of its weights.
    """
    weights = np.asarray(weights, dtype=np.float64).reshape(-1)
    indices = [int(i) for i in indices]
    if len(weights) != len(indices):
        raise DimensionMismatchError(f"Got {len(weights)} weights for {len(indices)} mode indices")

    total_indices = [int(i) for i in total_indices]
    aligned = np.zeros(len(total_indices))
    for mode, weight in zip(indices, weights):
        if mode in total_indices:
            aligned[total_indices.index(mode)] += weight
    return aligned


def validate_coefficients(coefficients, mode_count: int) -> tuple[NDArray[np.float64], list[Diagnostic]]:
    """
    Check the morph coefficients: one per mode plus one for the scale, all within [0, 1].

    Invalid input is replaced as a whole by coefficients of 1.0 and a warning is recorded.
    """
    coefficients = np.asarray(coefficients, dtype=np.float64).reshape(-1)
    diagnostics = []

    if np.any((coefficients < 0.0) | (coefficients > 1.0)):
        diagnostics.append(report(
            logger, DiagnosticLevel.WARNING, DiagnosticKind.INVALID_COEFFICIENT_VECTOR,
            "The morph coefficients are restricted to be within the range from 0.0 to 1.0. "
            "Coefficients set to 1.0 by default",
        ))
    if len(coefficients) != mode_count + 1:
        diagnostics.append(report(
            logger, DiagnosticLevel.WARNING, DiagnosticKind.INVALID_COEFFICIENT_VECTOR,
            f"The number of coefficients has to equal {mode_count + 1}. Coefficients set to 1.0 by default",
        ))

    if diagnostics:
        coefficients = np.ones(mode_count + 1)
    return coefficients, diagnostics


def morph_vector(eigenvectors: NDArray[np.float64], total_indices: Sequence[int], weights1, weights2, coefficients) -> NDArray[np.float64]:
    """Per-vertex morph values; only the first len(total_indices) coefficients are used."""
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    weights1 = np.asarray(weights1, dtype=np.float64).reshape(-1)
    weights2 = np.asarray(weights2, dtype=np.float64).reshape(-1)
    lambdas = np.asarray(coefficients, dtype=np.float64).reshape(-1)[:len(total_indices)]

    blended = (1.0 - lambdas) * weights1 + lambdas * weights2
    return eigenvectors[:, list(total_indices)] @ blended


def morph_scale(scale1: float, scale2: float, coefficient: float) -> float:
    return (1.0 - coefficient) * scale1 + coefficient * scale2


def morph(
    mesh: HalfEdgeMesh,
    directions,
    eigenvectors: NDArray[np.float64],
    indices1: Sequence[int],
    weights1,
    scale1: float,
    indices2: Sequence[int],
    weights2,
    scale2: float,
    coefficients,
) -> MorphResult:
    """
    Morph between two harmonic shapes defined on the same mesh and mode matrix.

    Args:
        mesh: Initial mesh both shapes displace
        directions: Displacement direction per vertex
        eigenvectors: Full mode matrix; mode indices refer to its columns
        indices1, weights1, scale1: Modes, weights and scale factor of shape 1
        indices2, weights2, scale2: Modes, weights and scale factor of shape 2
        coefficients: One coefficient per mode of the combined mode list, then one for the scale

    Returns:
        MorphResult: Morphed mesh, combined mode list and per-mode weight intervals

    Raises:
        DimensionMismatchError: If weights and indices disagree in length or a mode index
            is not a column of ``eigenvectors``
    """
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    total_indices = create_total_mode_list(indices1, indices2)
    for mode in total_indices:
        if mode < 0 or mode >= eigenvectors.shape[1]:
            raise DimensionMismatchError(f"Mode index {mode} is outside [0, {eigenvectors.shape[1]})")

    aligned1 = align_weights(total_indices, indices1, weights1)
    aligned2 = align_weights(total_indices, indices2, weights2)
    intervals = [(float(a), float(b)) for a, b in zip(aligned1, aligned2)]

    coefficients, diagnostics = validate_coefficients(coefficients, len(total_indices))

    values = morph_vector(eigenvectors, total_indices, aligned1, aligned2, coefficients)
    scale = morph_scale(scale1, scale2, coefficients[-1])
    displacements = map_to_displacements(values, directions, scale)

    logger.debug(f"Morphed {len(total_indices)} modes with scale {scale}")
    return MorphResult(
        mesh=displace_mesh(mesh, displacements),
        mode_indices=total_indices,
        intervals=intervals,
        displacements=displacements,
        coefficients=coefficients,
        diagnostics=diagnostics,
    )
