"""Point reduction for stored curves and for derivative estimation"""
import logging

import numpy as np

from ..constants import RENDER_SIMPLIFY_TOLERANCE
from ..models import as_points, empty_points
from ..utils.geometry import ramer_douglas_peucker_mask

logger = logging.getLogger(__name__)


def deduplicate_points(points: np.ndarray, sort: bool = True) -> np.ndarray:
    """
    Collapse samples sharing a displacement into one point with the mean force.

    Args:
        points: Array of shape (N, 2)
        sort: Order the result by displacement. When False the result keeps
            the order in which each displacement first occurs.

    Returns:
        Array of shape (M, 2), M <= N
    """
    points = as_points(points)
    if len(points) == 0:
        return empty_points()

    unique_x, first_index, inverse = np.unique(points[:, 0], return_index=True, return_inverse=True)
    inverse = inverse.ravel()
    sums = np.bincount(inverse, weights=points[:, 1])
    counts = np.bincount(inverse)
    result = np.column_stack([unique_x, sums / counts])

    if not sort:
        result = result[np.argsort(first_index, kind='stable')]

    return result


def resample_uniform(points: np.ndarray, step: float) -> np.ndarray:
    """
    Linearly interpolate a sorted, deduplicated sequence onto a uniform grid.

    The grid spans exactly [min x, max x]; its spacing is the closest value to
    ``step`` that divides the span evenly.

    Args:
        points: Array of shape (N, 2) sorted by strictly increasing x
        step: Target grid spacing in mm

    Returns:
        Resampled array of shape (M, 2)
    """
    points = as_points(points)
    if len(points) < 2:
        return points.copy()

    x_start, x_end = points[0, 0], points[-1, 0]
    n_samples = max(int(round((x_end - x_start) / step)) + 1, 2)
    grid = np.linspace(x_start, x_end, n_samples)

    return np.column_stack([grid, np.interp(grid, points[:, 0], points[:, 1])])


def simplify_polyline(points: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Ramer-Douglas-Peucker simplification of an (x, force) polyline.

    The endpoints and the samples holding the minimum and maximum
    displacement always survive, so the displacement range is preserved.

    Args:
        points: Array of shape (N, 2)
        tolerance: Maximum perpendicular deviation of a dropped point

    Returns:
        Ordered subsequence of the input
    """
    points = as_points(points)
    if len(points) < 3:
        return points.copy()

    anchors = (int(np.argmin(points[:, 0])), int(np.argmax(points[:, 0])))
    keep = ramer_douglas_peucker_mask(points, tolerance, anchors=anchors)
    return points[keep]


def simplify_stroke(points: np.ndarray, tolerance: float = RENDER_SIMPLIFY_TOLERANCE) -> np.ndarray:
    """
    Reduce a stroke for storage and rendering.

    Duplicate displacements are merged without reordering, then the polyline
    is simplified.

    Args:
        points: Stroke samples in acquisition order
        tolerance: RDP tolerance

    Returns:
        Simplified stroke, never longer than the input
    """
    reduced = simplify_polyline(deduplicate_points(points, sort=False), tolerance)
    logger.debug(f"Simplified stroke from {len(points)} to {len(reduced)} points")
    return reduced
