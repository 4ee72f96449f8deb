"""
Inverse manifold harmonics transform: back-calculate mode weights from a distance signal.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from data_types import HalfEdgeMesh

from . import config
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    DimensionMismatchError,
    report,
)
from .synthesis import map_to_displacements, unit_directions

logger = logging.getLogger(__name__)


class SelectionOption(IntEnum):
    MOST_SIGNIFICANT = 0  # k modes with the largest absolute weights
    FIRST = 1  # the first k modes


@dataclass
class RankResult:
    indices: list[int]
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class BackCalculation:
    mode_indices: list[int]
    weights: NDArray[np.float64]  # normalised weights of the selected modes
    scale: float
    rms: float
    all_weights: NDArray[np.float64]  # raw transform of the signal, one per mode
    diagnostics: list[Diagnostic] = field(default_factory=list)


def project(signal, eigenvectors: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Manifold Harmonics Transform: inner product of the signal with every mode.

    weights[j] = sum_i signal[i] * V[i, j]
    """
    signal = np.asarray(signal, dtype=np.float64).reshape(-1)
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    if len(signal) != eigenvectors.shape[0]:
        raise DimensionMismatchError(
            f"Signal has {len(signal)} values but the modes have {eigenvectors.shape[0]} rows"
        )
    return eigenvectors.T @ signal


def scale_factor(weights) -> float:
    """Largest absolute weight, max(|min(w)|, max(w))."""
    weights = np.asarray(weights, dtype=np.float64)
    if len(weights) == 0:
        return 0.0
    return float(max(abs(weights.min()), weights.max()))


def normalize(weights, round_output: bool = False) -> tuple[NDArray[np.float64], float]:
    """
    Normalise weights so the largest magnitude is 1.0.

    Returns:
        Tuple of (normalised weights, scale factor). A zero scale leaves the weights unchanged.
    """
    weights = np.array(weights, dtype=np.float64).reshape(-1)
    scale = scale_factor(weights)
    if scale != 0.0:
        weights = weights / scale
    if round_output:
        weights = np.round(weights, config.WEIGHT_DECIMALS)
    return weights, scale


def rank_significant(normalized_weights, k: int) -> RankResult:
    """
    Indices of the k largest-magnitude non-zero weights, most significant first.

    Ties go to the lowest mode index. If fewer than k non-zero weights exist, the
    shorter list is returned with a remark.
    """
    weights_abs = np.abs(np.array(normalized_weights, dtype=np.float64).reshape(-1))
    indices = []
    diagnostics = []

    while len(indices) < k:
        if len(weights_abs) == 0 or weights_abs.max() == 0.0:
            diagnostics.append(report(
                logger, DiagnosticLevel.REMARK, DiagnosticKind.TOO_FEW_NONZERO_WEIGHTS,
                f"Only {len(indices)} non-zero weights were found instead of the specified {k}",
            ))
            break
        index_max = int(np.argmax(weights_abs))
        indices.append(index_max)
        weights_abs[index_max] = 0.0

    return RankResult(indices, diagnostics)


def compute_rms(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], mode_indices, weights, scale: float, directions, signal) -> float:
    """
    Root mean square deviation between the reconstruction from the selected modes and
    the positions given by applying the full signal along the directions.
    """
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    mode_indices = list(mode_indices)
    weights = np.asarray(weights, dtype=np.float64).reshape(-1)
    if len(weights) != len(mode_indices):
        raise DimensionMismatchError(
            f"Got {len(weights)} weights for {len(mode_indices)} mode indices"
        )

    values = eigenvectors[:, mode_indices] @ weights
    reconstructed = mesh.vertices + map_to_displacements(values, directions, scale)
    target = mesh.vertices + unit_directions(directions) * np.asarray(signal, dtype=np.float64).reshape(-1, 1)

    deviations = np.linalg.norm(reconstructed - target, axis=1)
    return float(np.sqrt(np.mean(deviations ** 2)))


def back_calculate(
    mesh: HalfEdgeMesh,
    signal,
    eigenvectors: NDArray[np.float64],
    directions,
    count: int,
    selection=SelectionOption.MOST_SIGNIFICANT,
    round_output: bool = True,
) -> BackCalculation:
    """
    Back-calculate the weights and modes approximating a target distance signal.

    Args:
        mesh: The initial mesh the signal was measured from
        signal: Signed distance per vertex along ``directions``
        eigenvectors: Mode matrix of the initial mesh
        directions: Displacement direction per vertex (typically vertex normals)
        count: Number of modes to use, clamped to [1, number of modes]
        selection: Most significant modes or the first ``count`` modes
        round_output: Round the weights and the scale factor to 2 decimals

    Returns:
        BackCalculation: Selected mode indices, their normalised weights, the scale factor and the RMS
    """
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    count = min(max(int(count), 1), eigenvectors.shape[1])
    selection = SelectionOption(min(max(int(selection), 0), 1))

    all_weights = project(signal, eigenvectors)
    normalized, scale = normalize(all_weights, round_output)

    diagnostics = []
    if selection == SelectionOption.MOST_SIGNIFICANT:
        ranked = rank_significant(normalized, count)
        mode_indices = ranked.indices
        diagnostics.extend(ranked.diagnostics)
    else:
        mode_indices = list(range(count))

    weights = normalized[mode_indices]
    if round_output:
        scale = round(scale, config.WEIGHT_DECIMALS)

    rms = compute_rms(mesh, eigenvectors, mode_indices, weights, scale, directions, signal)
    logger.info(f"Back-calculated {len(mode_indices)} modes with scale {scale} (RMS {rms:.6f})")
    return BackCalculation(mode_indices, weights, scale, rms, all_weights, diagnostics)
