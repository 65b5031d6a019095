"""Detection of bottom-out and tactile feature points on a downstroke"""
import numpy as np
import logging
from typing import Optional, Tuple
from .derivative import estimate_derivative
from .extremum_detector import find_local_maxima, find_local_minima
from ..core.simplifier import simplify_polyline
from ..models import Point, ZERO_POINT, CurveMetadata, as_points
from ..constants import (
    ACCELERATION_SIMPLIFY_TOLERANCE,
    TACTILE_MIN_GAP_MM,
    TACTILE_THRESHOLD_RATIO,
    TACTILE_THRESHOLD_MAX_FORCE
)

logger = logging.getLogger(__name__)


class FeatureExtractor:
    """Derive characteristic points and the tactile classification of a press"""

    def __init__(self,
                 acceleration_tolerance: float = ACCELERATION_SIMPLIFY_TOLERANCE,
                 tactile_min_gap: float = TACTILE_MIN_GAP_MM,
                 threshold_ratio: float = TACTILE_THRESHOLD_RATIO,
                 threshold_max_force: float = TACTILE_THRESHOLD_MAX_FORCE):
        """
        Initialize feature extractor.

        Args:
            acceleration_tolerance: RDP tolerance applied to the acceleration curve
            tactile_min_gap: Minimum separation of a tactile peak from bottom-out (mm)
            threshold_ratio: Fraction of bottom-out force needed as tactile gap
            threshold_max_force: Upper bound of the tactile gap threshold (gf)
        """
        self.acceleration_tolerance = acceleration_tolerance
        self.tactile_min_gap = tactile_min_gap
        self.threshold_ratio = threshold_ratio
        self.threshold_max_force = threshold_max_force

    def find_bottom_out_displacement(self, downstroke: np.ndarray) -> Optional[float]:
        """
        Locate the end-of-travel deceleration spike.

        The last local maximum of the simplified acceleration curve marks
        bottom-out; earlier maxima belong to tactile bumps.

        Args:
            downstroke: Raw downstroke samples

        Returns:
            Bottom-out displacement (mm), or None if acceleration has no maximum
        """
        velocity = estimate_derivative(downstroke)
        acceleration = estimate_derivative(velocity)
        simplified = simplify_polyline(acceleration, self.acceleration_tolerance)

        maxima = find_local_maxima(simplified)
        if len(maxima) == 0:
            logger.debug(f"No acceleration maximum among {len(acceleration)} samples")
            return None

        return float(maxima[:, 0].max())

    def find_bottom_out(self, downstroke: np.ndarray) -> Tuple[Optional[float], Point]:
        """
        Locate the bottom-out sample.

        Args:
            downstroke: Raw downstroke samples

        Returns:
            Tuple of (bottom-out displacement, first downstroke sample at or
            past it). Falls back to (None, ZERO_POINT).
        """
        downstroke = as_points(downstroke)
        displacement = self.find_bottom_out_displacement(downstroke)
        if displacement is None:
            return None, ZERO_POINT

        reached = downstroke[downstroke[:, 0] >= displacement]
        if len(reached) == 0:
            return None, ZERO_POINT

        return displacement, Point.from_sequence(reached[0])

    def find_tactile_points(self,
                            downstroke: np.ndarray,
                            bottom_out_displacement: float) -> Tuple[Point, Point]:
        """
        Find the tactile peak and trough.

        Candidate peaks are local maxima ending at least ``tactile_min_gap``
        before bottom-out. Each is paired with the lowest local minimum after
        it and the pair with the largest force drop wins.

        Args:
            downstroke: Raw downstroke samples
            bottom_out_displacement: Output of find_bottom_out_displacement

        Returns:
            Tuple of (tactile_max, tactile_min), ZERO_POINT for both when no
            pair exists
        """
        downstroke = as_points(downstroke)
        maxima = find_local_maxima(downstroke)
        maxima = maxima[maxima[:, 0] < bottom_out_displacement - self.tactile_min_gap]
        minima = find_local_minima(downstroke)

        best = None
        best_gap = -np.inf
        for peak in maxima:
            following = minima[minima[:, 0] > peak[0]]
            if len(following) == 0:
                continue

            trough = following[int(np.argmin(following[:, 1]))]
            gap = peak[1] - trough[1]
            if gap > best_gap:
                best = (Point.from_sequence(peak), Point.from_sequence(trough))
                best_gap = gap

        if best is None:
            return ZERO_POINT, ZERO_POINT

        return best

    def tactile_threshold(self, bottom_out_force: float) -> float:
        """Minimum peak-to-trough gap for a tactile classification"""
        return min(bottom_out_force * self.threshold_ratio, self.threshold_max_force)

    def is_tactile(self, tactile_max: Point, tactile_min: Point, bottom_out: Point) -> bool:
        """Classify a peak/trough pair against the bottom-out force"""
        if tactile_max == ZERO_POINT and tactile_min == ZERO_POINT:
            return False
        gap = tactile_max.force - tactile_min.force
        return bool(gap >= self.tactile_threshold(bottom_out.force))

    def extract(self, downstroke: np.ndarray) -> CurveMetadata:
        """
        Run bottom-out detection, tactile pairing and classification.

        Args:
            downstroke: Raw downstroke samples in acquisition order

        Returns:
            CurveMetadata, the zero fallback when no feature is detectable
        """
        downstroke = as_points(downstroke)
        displacement, bottom_out = self.find_bottom_out(downstroke)
        if displacement is None:
            logger.debug("Bottom-out not detected, using zero fallback")
            return CurveMetadata()

        tactile_max, tactile_min = self.find_tactile_points(downstroke, displacement)
        is_tactile = self.is_tactile(tactile_max, tactile_min, bottom_out)

        logger.debug(
            f"Bottom-out at {bottom_out.x:.3f} mm / {bottom_out.force:.1f} gf, "
            f"tactile gap {tactile_max.force - tactile_min.force:.1f} gf "
            f"-> {'tactile' if is_tactile else 'linear'}"
        )

        return CurveMetadata(
            bottom_out=bottom_out,
            tactile_max=tactile_max,
            tactile_min=tactile_min,
            is_tactile=is_tactile
        )


def tactile_threshold(bottom_out_force: float) -> float:
    """Tactile gap threshold with the calibrated defaults"""
    return FeatureExtractor().tactile_threshold(bottom_out_force)


def extract_metadata(downstroke: np.ndarray) -> CurveMetadata:
    """Extract CurveMetadata with the calibrated defaults"""
    return FeatureExtractor().extract(downstroke)
