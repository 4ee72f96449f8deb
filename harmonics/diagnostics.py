"""
Diagnostics and exceptions for the harmonic operations.

Operations that cannot produce a trustworthy result raise a ``HarmonicsError``.
Recoverable conditions are returned as ``Diagnostic`` entries alongside the result
and logged at the matching level.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from data_types.errors import HarmonicsError, InvalidTopologyError


class DiagnosticLevel(Enum):
    ERROR = "error"
    WARNING = "warning"
    REMARK = "remark"


class DiagnosticKind(Enum):
    INVALID_TOPOLOGY = "invalid_topology"
    DIMENSION_MISMATCH = "dimension_mismatch"
    NO_FIXED_VERTICES = "no_fixed_vertices"
    PARTIAL_FIXED_VERTICES = "partial_fixed_vertices"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"
    INVALID_COEFFICIENT_VECTOR = "invalid_coefficient_vector"
    TOO_FEW_NONZERO_WEIGHTS = "too_few_nonzero_weights"


_LOG_LEVELS = {
    DiagnosticLevel.ERROR: logging.ERROR,
    DiagnosticLevel.WARNING: logging.WARNING,
    DiagnosticLevel.REMARK: logging.INFO,
}


@dataclass(frozen=True)
class Diagnostic:
    level: DiagnosticLevel
    kind: DiagnosticKind
    message: str


def report(logger: logging.Logger, level: DiagnosticLevel, kind: DiagnosticKind, message: str) -> Diagnostic:
    """Log a diagnostic message on ``logger`` and return it as a ``Diagnostic``."""
    logger.log(_LOG_LEVELS[level], message)
    return Diagnostic(level, kind, message)


class DimensionMismatchError(HarmonicsError):
    """Weights, mode matrices or per-vertex lists have incompatible sizes."""


class NoFixedVerticesFoundError(HarmonicsError):
    """None of the requested fixed points correspond to a mesh vertex."""


_ERROR_KINDS = {
    InvalidTopologyError: DiagnosticKind.INVALID_TOPOLOGY,
    DimensionMismatchError: DiagnosticKind.DIMENSION_MISMATCH,
    NoFixedVerticesFoundError: DiagnosticKind.NO_FIXED_VERTICES,
}


def error_diagnostic(error: HarmonicsError) -> Diagnostic:
    """ERROR-level diagnostic describing a raised ``HarmonicsError``."""
    for error_type, kind in _ERROR_KINDS.items():
        if isinstance(error, error_type):
            return Diagnostic(DiagnosticLevel.ERROR, kind, str(error))
    raise ValueError(f"No diagnostic kind for {type(error).__name__}")
