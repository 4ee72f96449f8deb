"""
Area calibration: move a new set of mode weights towards or away from a target set until
the displaced mesh reaches a requested surface area difference from the target shape.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from data_types import HalfEdgeMesh

from . import config
from .analysis import normalize, scale_factor
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    DimensionMismatchError,
    InvalidTopologyError,
    report,
)
from .geometry import triangle_areas
from .synthesis import displace_mesh, synthesize

logger = logging.getLogger(__name__)


@dataclass
class CalibrationResult:
    mesh: HalfEdgeMesh
    area: float
    area_difference: float  # percent, relative to the target area
    weights: NDArray[np.float64]
    scale: float
    iterations: int
    diagnostics: list[Diagnostic] = field(default_factory=list)


def mesh_area(mesh: HalfEdgeMesh) -> float:
    """Total surface area of a triangulated mesh."""
    if not mesh.is_triangulated():
        raise InvalidTopologyError("The mesh has to be triangulated")
    return float(np.sum(triangle_areas(mesh)))


def adjusted_weights(target_weights, new_weights, factor: float) -> NDArray[np.float64]:
    """
    Move every new weight by |target - new| * factor, away from zero for a positive factor.

    Negative weights move in the negative direction so the sign of each weight is kept;
    zero weights move like positive ones.
    """
    target_weights = np.asarray(target_weights, dtype=np.float64).reshape(-1)
    new_weights = np.asarray(new_weights, dtype=np.float64).reshape(-1)
    if len(target_weights) != len(new_weights):
        raise DimensionMismatchError(
            f"Got {len(target_weights)} target weights and {len(new_weights)} new weights"
        )

    distance = np.abs(target_weights - new_weights) * factor
    return np.where(new_weights < 0, new_weights - distance, new_weights + distance)


def adjusted_scale(target_scale: float, new_scale: float, factor: float) -> float:
    return new_scale + abs(target_scale - new_scale) * factor


def _area_difference(area: float, target_area: float, decimals: int) -> float:
    return round((area - target_area) * 100.0 / target_area, decimals)


def calibrate_area(
    mesh: HalfEdgeMesh,
    eigenvectors: NDArray[np.float64],
    directions,
    target_weights,
    target_scale: float,
    new_weights,
    new_scale: float,
    percentage: float = 1.0,
    max_iterations: int = config.CALIBRATION_MAX_ITERATIONS,
    progress: bool = False,
) -> CalibrationResult:
    """
    Adjust ``new_weights`` and ``new_scale`` so the shape they produce has ``percentage``
    percent more area than the shape produced by the target weights.

    The adjustment factor advances in steps of 0.1 (negative when the area has to shrink).
    Whenever a step overshoots the requested percentage it is undone and halved. The area
    difference is compared at 1 decimal; the search stops on an exact match or after
    ``max_iterations`` steps, in which case the last state is returned with a remark.

    Args:
        mesh: Initial triangulated mesh the modes were computed for
        eigenvectors: Mode matrix, one column per weight
        directions: Displacement direction per vertex
        target_weights: Weights of the reference shape
        target_scale: Scale factor of the reference shape
        new_weights: Weights of the shape to calibrate
        new_scale: Scale factor of the shape to calibrate
        percentage: Requested area difference in percent, rounded to 1 decimal
        max_iterations: Iteration cap
        progress: Show a tqdm progress bar

    Returns:
        CalibrationResult: Adjusted mesh, its area, weights, scale and iteration count.
        Weights exceeding a magnitude of 1.0 are renormalised into the scale.

    Raises:
        InvalidTopologyError: If the mesh is not triangulated
        DimensionMismatchError: If a weight list does not match the number of modes
        ValueError: If the target shape has zero area
    """
    if not mesh.is_triangulated():
        raise InvalidTopologyError("The mesh has to be triangulated")
    percentage = round(float(percentage), 1)

    target_weights = np.asarray(target_weights, dtype=np.float64).reshape(-1)
    new_weights = np.asarray(new_weights, dtype=np.float64).reshape(-1)

    target_mesh = displace_mesh(mesh, synthesize(eigenvectors, target_weights, directions, target_scale))
    target_area = mesh_area(target_mesh)
    if target_area == 0.0:
        raise ValueError("The target shape has zero area")

    current_mesh = displace_mesh(mesh, synthesize(eigenvectors, new_weights, directions, new_scale))
    current_area = mesh_area(current_mesh)
    area_difference = _area_difference(current_area, target_area, 0)

    factor = 0.0
    step_size = config.CALIBRATION_INITIAL_STEP
    reverse = 1
    if area_difference > percentage:
        step_size *= -1
        reverse = -1

    weights = new_weights.copy()
    scale = float(new_scale)
    diagnostics = []

    iteration = 0
    pbar = tqdm(total=max_iterations, desc="Area calibration", disable=not progress)
    while area_difference != percentage and iteration < max_iterations:
        factor += step_size

        weights = adjusted_weights(target_weights, new_weights, factor)
        scale = adjusted_scale(target_scale, new_scale, factor)

        current_mesh = displace_mesh(mesh, synthesize(eigenvectors, weights, directions, scale))
        current_area = mesh_area(current_mesh)
        area_difference = _area_difference(current_area, target_area, 1)

        # Overshoot: step back and refine
        if area_difference * reverse > percentage * reverse:
            factor -= step_size
            step_size /= 2

        iteration += 1
        pbar.update(1)
        pbar.set_postfix(difference=area_difference)
        logger.debug(f"Iteration {iteration}: factor {factor:.6f}, area difference {area_difference}%")

        if iteration == max_iterations:
            diagnostics.append(report(
                logger, DiagnosticLevel.REMARK, DiagnosticKind.ITERATION_LIMIT_REACHED,
                "Maximum number of iterations has been reached",
            ))
    pbar.close()

    # Fold weights above magnitude 1.0 back into the scale
    weight_scale = scale_factor(weights)
    if weight_scale > 1.0:
        weights, _ = normalize(weights)
        scale *= weight_scale

    logger.info(f"Calibrated area after {iteration} iterations: {current_area:.6f} ({area_difference}% from target)")
    return CalibrationResult(
        mesh=current_mesh,
        area=current_area,
        area_difference=area_difference,
        weights=weights,
        scale=scale,
        iterations=iteration,
        diagnostics=diagnostics,
    )
