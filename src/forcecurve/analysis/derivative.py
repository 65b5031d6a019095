"""Finite-difference derivative estimation for force curves"""
import numpy as np

from ..constants import (
    DERIVATIVE_STEP_MM,
    DERIVATIVE_BLUR_RADIUS,
    DERIVATIVE_PRECISION,
)
from ..core.simplifier import deduplicate_points, resample_uniform
from ..models import empty_points
from ..utils.signal_processing import apply_box_blur, finite_difference


def estimate_derivative(points: np.ndarray) -> np.ndarray:
    """
    Estimate d(force)/dx of a point sequence.

    Points are merged by displacement, resampled onto a uniform grid, and
    differenced pairwise. Each slope is placed at the left point of its pair,
    then the slopes are blurred and rounded.

    The result is itself a point sequence, so applying the function twice
    estimates acceleration.

    Args:
        points: Array of shape (N, 2)

    Returns:
        Array of shape (M - 1, 2) where M is the resampled length, or an
        empty array when fewer than two distinct displacements exist
    """
    unique = deduplicate_points(points, sort=True)
    if len(unique) < 2:
        return empty_points()

    grid = resample_uniform(unique, DERIVATIVE_STEP_MM)
    slopes = finite_difference(grid[:, 0], grid[:, 1])
    slopes = apply_box_blur(slopes, DERIVATIVE_BLUR_RADIUS)

    # Rounding keeps plateaus flat so they cannot produce extrema
    slopes = np.round(slopes, DERIVATIVE_PRECISION)

    return np.column_stack([grid[:-1, 0], slopes])
