"""
Forward manifold harmonics transform: weights over modes -> per-vertex displacements.
"""

import logging
from dataclasses import dataclass, field

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

logger = logging.getLogger(__name__)


@dataclass
class HarmonicShape:
    mesh: HalfEdgeMesh
    weights: NDArray[np.float64]
    scale: float
    nodal_values: NDArray[np.float64]
    displacements: NDArray[np.float64]
    colours: NDArray[np.int64]
    diagnostics: list[Diagnostic] = field(default_factory=list)


def nodal_values(eigenvectors: NDArray[np.float64], weights) -> NDArray[np.float64]:
    """Linear combination of the modes, one value per vertex."""
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    weights = np.asarray(weights, dtype=np.float64).reshape(-1)
    if len(weights) != eigenvectors.shape[1]:
        raise DimensionMismatchError(
            f"The number of weights must equal {eigenvectors.shape[1]}, got {len(weights)}"
        )
    return eigenvectors @ weights


def unit_directions(directions) -> NDArray[np.float64]:
    """Normalise direction vectors; zero-length directions stay zero."""
    directions = np.array(directions, dtype=np.float64).reshape(-1, 3)
    lengths = np.linalg.norm(directions, axis=1)
    nonzero = lengths > 0
    directions[nonzero] /= lengths[nonzero, np.newaxis]
    return directions


def map_to_displacements(values: NDArray[np.float64], directions, scale: float) -> NDArray[np.float64]:
    """Displacement of each vertex along its unit direction by value * scale."""
    values = np.asarray(values, dtype=np.float64).reshape(-1)
    directions = unit_directions(directions)
    if len(directions) != len(values):
        raise DimensionMismatchError(
            f"Expected {len(values)} displacement directions, got {len(directions)}"
        )
    return directions * (values * scale)[:, np.newaxis]


def synthesize(eigenvectors: NDArray[np.float64], weights, directions, scale: float) -> NDArray[np.float64]:
    """
    Per-vertex 3D displacements for a weighted sum of modes.

    Raises:
        DimensionMismatchError: If len(weights) differs from the number of modes
    """
    return map_to_displacements(nodal_values(eigenvectors, weights), directions, scale)


def displace_mesh(mesh: HalfEdgeMesh, displacements: NDArray[np.float64]) -> HalfEdgeMesh:
    """New mesh with the same topology and displaced vertices. The input mesh is not modified."""
    return mesh.with_vertices(mesh.vertices + np.asarray(displacements, dtype=np.float64))


def colour_map(values) -> NDArray[np.int64]:
    """
    Map values linearly to greyscale levels 0-255 over their min-max range.

    Values are scaled by COLOUR_PRESCALE first; if the scaled range rounds to zero
    (constant field) every level is 0.
    """
    scaled = np.asarray(values, dtype=np.float64).reshape(-1) * config.COLOUR_PRESCALE
    colours = np.zeros(len(scaled), dtype=np.int64)
    if len(scaled) == 0:
        return colours

    value_min = scaled.min()
    domain_range = scaled.max() - value_min
    if np.rint(domain_range) != 0:
        colours = np.rint((scaled - value_min) / domain_range * config.COLOUR_MAX).astype(np.int64)
    return colours


def face_colour_map(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], mode: int) -> NDArray[np.int64]:
    """Greyscale level per face from the average mode value over the face corners."""
    mode_values = np.asarray(eigenvectors, dtype=np.float64)[:, mode]
    face_averages = np.array([mode_values[list(face)].mean() for face in mesh.faces])
    return colour_map(face_averages)


def mode_colour_maps(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64]) -> list[NDArray[np.int64]]:
    """Face colour maps for every mode (column) of the eigenvector matrix."""
    return [face_colour_map(mesh, eigenvectors, mode) for mode in range(np.shape(eigenvectors)[1])]


def harmonic_mesh(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], directions, weights, scale: float = 1.0) -> HarmonicShape:
    """
    Create a harmonic shape from a linear combination of the modes.

    If the number of weights does not match the number of modes, uniform weights of 1.0
    are used instead and a warning is recorded.
    """
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    mode_count = eigenvectors.shape[1]
    diagnostics = []

    weights = np.asarray(weights, dtype=np.float64).reshape(-1)
    if len(weights) != mode_count:
        diagnostics.append(report(
            logger, DiagnosticLevel.WARNING, DiagnosticKind.DIMENSION_MISMATCH,
            f"The number of weights must equal {mode_count}. Uniform weights are set as default",
        ))
        weights = np.ones(mode_count)

    values = nodal_values(eigenvectors, weights)
    displacements = map_to_displacements(values, directions, scale)
    return HarmonicShape(
        mesh=displace_mesh(mesh, displacements),
        weights=weights,
        scale=scale,
        nodal_values=values,
        displacements=displacements,
        colours=colour_map(values),
        diagnostics=diagnostics,
    )
