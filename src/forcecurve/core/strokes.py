"""Splitting of a raw press into downstroke and upstroke"""
from typing import Tuple

import numpy as np

from ..models import as_points


def find_stroke_boundary(samples: np.ndarray) -> int:
    """Index of the first sample with the maximum displacement (0 when empty)"""
    samples = as_points(samples)
    if len(samples) == 0:
        return 0
    return int(np.argmax(samples[:, 0]))


def partition_strokes(samples: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split acquisition-ordered samples at the travel maximum.

    The maximum-displacement sample opens the upstroke, so concatenating the
    two strokes gives back the input unchanged.

    Args:
        samples: Array of shape (N, 2) in acquisition order

    Returns:
        Tuple of (downstroke, upstroke) arrays
    """
    samples = as_points(samples)
    index = find_stroke_boundary(samples)
    return samples[:index].copy(), samples[index:].copy()
