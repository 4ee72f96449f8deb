"""
Dirichlet-style boundary conditions imposed on a Laplacian by diagonal penalties.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from data_types import HalfEdgeMesh

from . import config
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    NoFixedVerticesFoundError,
    report,
)

logger = logging.getLogger(__name__)


@dataclass
class BoundaryResult:
    laplacian: NDArray[np.float64]
    fixed_indices: list[int]
    stiffness: float
    max_mode_count: int  # number of unconstrained vertices
    diagnostics: list[Diagnostic] = field(default_factory=list)


def impose_boundary_conditions(laplacian: NDArray[np.float64], fixed_indices, stiffness: float) -> NDArray[np.float64]:
    """
    Return a copy of the Laplacian with the diagonal of every fixed vertex set to ``stiffness``.

    Off-diagonal entries are left unchanged, so fixity is approximate (penalty method).
    """
    constrained = np.array(laplacian, dtype=np.float64, copy=True)
    for i in fixed_indices:
        constrained[i, i] = stiffness
    return constrained


def is_unit_millimetre(mesh: HalfEdgeMesh) -> bool:
    """Guess millimetre units: any vertex further than MILLIMETRE_THRESHOLD from the origin."""
    if mesh.vertex_count == 0:
        return False
    return bool(np.any(np.linalg.norm(mesh.vertices, axis=1) > config.MILLIMETRE_THRESHOLD))


def find_fixed_vertex_indices(mesh: HalfEdgeMesh, fixed_points, millimetre: Optional[bool] = None) -> list[int]:
    """
    Indices of the mesh vertices coinciding with the given points.

    Coordinates are compared after rounding to 3 decimals (1 decimal for millimetre models).
    Every vertex matching a point is returned, in the order of the points.
    """
    if millimetre is None:
        millimetre = is_unit_millimetre(mesh)
    decimals = config.MILLIMETRE_DECIMALS if millimetre else config.METRE_DECIMALS

    vertex_lookup = {}
    for index, position in enumerate(np.round(mesh.vertices, decimals)):
        vertex_lookup.setdefault(tuple(position), []).append(index)

    fixed_indices = []
    for point in np.round(np.asarray(fixed_points, dtype=np.float64).reshape(-1, 3), decimals):
        fixed_indices.extend(vertex_lookup.get(tuple(point), []))
    return fixed_indices


def apply_fixed_points(laplacian: NDArray[np.float64], mesh: HalfEdgeMesh, fixed_points) -> BoundaryResult:
    """
    Fix the vertices located at ``fixed_points``.

    All points matched: stiffness FULL_FIXITY_STIFFNESS. Only some matched: a warning and
    the softer PARTIAL_FIXITY_STIFFNESS.

    Raises:
        NoFixedVerticesFoundError: If no point matches a vertex
    """
    fixed_points = np.asarray(fixed_points, dtype=np.float64).reshape(-1, 3)
    fixed_indices = find_fixed_vertex_indices(mesh, fixed_points)
    diagnostics = []

    if not fixed_indices:
        raise NoFixedVerticesFoundError("No corresponding fixed vertices exist in the mesh")

    if len(fixed_indices) != len(fixed_points):
        diagnostics.append(report(
            logger, DiagnosticLevel.WARNING, DiagnosticKind.PARTIAL_FIXED_VERTICES,
            f"Only {len(fixed_indices)} fixed vertices were found in the mesh out of the specified {len(fixed_points)}",
        ))
        stiffness = config.PARTIAL_FIXITY_STIFFNESS
    else:
        stiffness = config.FULL_FIXITY_STIFFNESS

    return BoundaryResult(
        laplacian=impose_boundary_conditions(laplacian, fixed_indices, stiffness),
        fixed_indices=fixed_indices,
        stiffness=stiffness,
        max_mode_count=mesh.vertex_count - len(fixed_indices),
        diagnostics=diagnostics,
    )
