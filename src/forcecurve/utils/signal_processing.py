"""Signal processing utilities for force curve analysis"""
import numpy as np
from scipy.ndimage import uniform_filter1d

from ..constants import DERIVATIVE_BLUR_PASSES


def apply_box_blur(data: np.ndarray, radius: int, passes: int = DERIVATIVE_BLUR_PASSES) -> np.ndarray:
    """
    Blur a 1D signal with repeated moving averages.

    Each pass is a box filter of width ``2 * radius + 1``; edge values are
    repeated past the ends of the signal. Three passes give a fast
    approximation of a gaussian kernel.

    Args:
        data: 1D array of values
        radius: Box filter radius in samples (0 disables blurring)
        passes: Number of box filter iterations

    Returns:
        Blurred array with the same shape as the input
    """
    result = np.asarray(data, dtype=float).copy()
    if radius <= 0 or len(result) < 2:
        return result

    for _ in range(passes):
        result = uniform_filter1d(result, size=2 * radius + 1, mode='nearest')

    return result


def finite_difference(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Slope between each consecutive pair of samples.

    Args:
        x: 1D array of strictly increasing positions
        y: 1D array of values at those positions

    Returns:
        Array of length ``len(x) - 1`` with ``dy/dx`` for each pair
    """
    if len(x) < 2:
        return np.empty(0, dtype=float)

    return np.diff(y) / np.diff(x)
