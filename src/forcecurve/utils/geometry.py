"""Geometric calculations for polyline simplification"""
import numpy as np
from typing import Iterable, Optional


def perpendicular_distances(points: np.ndarray, start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """
    Distance from each point to the infinite line through start and end.

    Args:
        points: Array of shape (N, 2)
        start: Line anchor (2,)
        end: Second line anchor (2,)

    Returns:
        Array of N distances. Falls back to the euclidean distance to
        ``start`` when both anchors coincide.
    """
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    direction = end - start
    norm = np.hypot(direction[0], direction[1])

    offsets = points - start
    if norm == 0:
        return np.hypot(offsets[:, 0], offsets[:, 1])

    cross = direction[0] * offsets[:, 1] - direction[1] * offsets[:, 0]
    return np.abs(cross) / norm


def ramer_douglas_peucker_mask(points: np.ndarray,
                               tolerance: float,
                               anchors: Optional[Iterable[int]] = None) -> np.ndarray:
    """
    Ramer-Douglas-Peucker simplification as a keep-mask.

    The first and last points are always kept, as is every index listed in
    ``anchors``. A point is dropped when its perpendicular distance to the
    chord of its enclosing kept segment is not greater than ``tolerance``.

    Args:
        points: Array of shape (N, 2)
        tolerance: Maximum perpendicular deviation of a dropped point
        anchors: Extra indices that must survive simplification

    Returns:
        Boolean mask of length N, True for kept points
    """
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    n_points = len(points)
    keep = np.zeros(n_points, dtype=bool)
    if n_points == 0:
        return keep

    fixed = {0, n_points - 1}
    if anchors is not None:
        fixed.update(int(i) for i in anchors if 0 <= int(i) < n_points)
    fixed = sorted(fixed)
    keep[fixed] = True

    stack = [(a, b) for a, b in zip(fixed[:-1], fixed[1:]) if b - a > 1]
    while stack:
        first, last = stack.pop()
        inner = points[first + 1:last]
        distances = perpendicular_distances(inner, points[first], points[last])

        farthest = int(np.argmax(distances))
        if distances[farthest] > tolerance:
            split = first + 1 + farthest
            keep[split] = True
            if split - first > 1:
                stack.append((first, split))
            if last - split > 1:
                stack.append((split, last))

    return keep
