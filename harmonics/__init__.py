from .analysis import (
    BackCalculation,
    SelectionOption,
    back_calculate,
    compute_rms,
    normalize,
    project,
    rank_significant,
    scale_factor,
)
from .boundary import apply_fixed_points, find_fixed_vertex_indices, impose_boundary_conditions
from .calibration import CalibrationResult, calibrate_area, mesh_area
from .decomposition import decompose, extract_modes
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    DimensionMismatchError,
    HarmonicsError,
    InvalidTopologyError,
    NoFixedVerticesFoundError,
    error_diagnostic,
)
from .features import ExtremumCount, ModeFeatures, count_extrema, detect_features
from .geometry import vertex_normals
from .laplacian import AreaOption, build_cotangent_laplacian, build_graph_laplacian
from .morphing import MorphResult, morph
from .synthesis import HarmonicShape, colour_map, harmonic_mesh, mode_colour_maps, synthesize

__all__ = [
    "AreaOption",
    "BackCalculation",
    "CalibrationResult",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLevel",
    "DimensionMismatchError",
    "ExtremumCount",
    "HarmonicShape",
    "HarmonicsError",
    "InvalidTopologyError",
    "ModeFeatures",
    "MorphResult",
    "NoFixedVerticesFoundError",
    "SelectionOption",
    "apply_fixed_points",
    "back_calculate",
    "build_cotangent_laplacian",
    "build_graph_laplacian",
    "calibrate_area",
    "colour_map",
    "compute_rms",
    "count_extrema",
    "decompose",
    "detect_features",
    "error_diagnostic",
    "extract_modes",
    "find_fixed_vertex_indices",
    "harmonic_mesh",
    "impose_boundary_conditions",
    "mesh_area",
    "mode_colour_maps",
    "morph",
    "normalize",
    "project",
    "rank_significant",
    "scale_factor",
    "synthesize",
    "vertex_normals",
]
