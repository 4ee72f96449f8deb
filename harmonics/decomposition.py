"""
Eigendecomposition of symmetric Laplacians into vibration modes.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .diagnostics import DimensionMismatchError

logger = logging.getLogger(__name__)


def decompose(laplacian: NDArray[np.float64], count: Optional[int] = None) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Full dense eigendecomposition of a symmetric matrix.

    Args:
        laplacian: Symmetric n x n matrix
        count: Number of eigenpairs to keep, clamped to [1, n]. All are kept if None.

    Returns:
        Tuple of (eigenvalues, eigenvectors)
        - eigenvalues: Array of shape (count,), ascending
        - eigenvectors: Array of shape (n, count), one mode per column
    """
    laplacian = np.asarray(laplacian, dtype=np.float64)
    if laplacian.ndim != 2 or laplacian.shape[0] != laplacian.shape[1]:
        raise DimensionMismatchError(f"Expected a square matrix, got shape {laplacian.shape}")

    n = laplacian.shape[0]
    if count is None:
        count = n
    count = min(max(int(count), 1), n)

    eigenvalues, eigenvectors = np.linalg.eigh(laplacian)
    logger.debug(f"Decomposed {n}x{n} matrix, keeping {count} eigenpairs")
    return eigenvalues[:count], eigenvectors[:, :count]


def extract_modes(eigenvectors: NDArray[np.float64], indices: Sequence[int]) -> NDArray[np.float64]:
    """Reduced mode matrix holding the columns given by ``indices``, in that order."""
    eigenvectors = np.asarray(eigenvectors, dtype=np.float64)
    indices = np.asarray(indices, dtype=np.int64)
    if np.any(indices < 0) or np.any(indices >= eigenvectors.shape[1]):
        raise DimensionMismatchError(
            f"Mode indices must lie in [0, {eigenvectors.shape[1]}), got {indices.tolist()}"
        )
    return eigenvectors[:, indices]
