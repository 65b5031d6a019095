"""Local extremum detection on point sequences"""
import numpy as np

from ..models import as_points


def _scan_extrema(points: np.ndarray, direction: int) -> np.ndarray:
    """
    Shared scan for maxima (direction=1) and minima (direction=-1).

    A strict move in ``direction`` makes the newly reached point the
    candidate; a strict reversal commits it. Equal neighbours leave the
    candidate untouched.
    """
    points = as_points(points)
    forces = points[:, 1] * direction

    found = []
    candidate = None
    for i in range(len(forces) - 1):
        if forces[i + 1] > forces[i]:
            candidate = i + 1
        elif forces[i + 1] < forces[i] and candidate is not None:
            found.append(candidate)
            candidate = None

    return points[found]


def find_local_maxima(points: np.ndarray) -> np.ndarray:
    """
    Find local force maxima.

    Args:
        points: Array of shape (N, 2)

    Returns:
        Ordered subsequence of ``points``. The first and last samples are
        never reported.
    """
    return _scan_extrema(points, 1)


def find_local_minima(points: np.ndarray) -> np.ndarray:
    """Find local force minima, mirror image of find_local_maxima"""
    return _scan_extrema(points, -1)
