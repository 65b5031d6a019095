"""
Unit tests for bottom-out and tactile feature extraction.

Covers the sparse reference curves, dense synthetic tactile and linear
switches, threshold behaviour and the zero fallbacks.
"""

import pytest
import numpy as np
from src.forcecurve.analysis.feature_extractor import (
    FeatureExtractor,
    extract_metadata,
    tactile_threshold
)
from src.forcecurve.models import Point, ZERO_POINT, CurveMetadata


class TestTactileThreshold:
    """Test threshold formula min(f * 0.2, 5)"""

    def test_light_switch(self):
        """Light switches use 20% of bottom-out force"""
        assert tactile_threshold(10.0) == pytest.approx(2.0)

    def test_heavy_switch_capped(self):
        """Threshold is capped at 5 gf"""
        assert tactile_threshold(82.0) == pytest.approx(5.0)
        assert tactile_threshold(200.0) == pytest.approx(5.0)

    def test_monotonic_in_gap(self):
        """Raising the gap at fixed bottom-out never flips tactile to linear"""
        extractor = FeatureExtractor()
        bottom_out = Point(2.0, 60.0)
        previous = False

        for gap in np.linspace(0.5, 20.0, 40):
            current = extractor.is_tactile(Point(0.5, 30.0 + gap), Point(1.0, 30.0), bottom_out)
            assert not (previous and not current)
            previous = current

        assert previous

    def test_zero_pair_not_tactile(self):
        """The zero fallback pair is never tactile"""
        extractor = FeatureExtractor()
        assert not extractor.is_tactile(ZERO_POINT, ZERO_POINT, ZERO_POINT)


class TestSparseScenarios:
    """Test the seven-sample reference downstrokes"""

    def test_tactile_reference(self, tactile_downstroke_sparse):
        """Bump at 0.5 mm with trough at 1.0 mm classifies as tactile"""
        metadata = extract_metadata(tactile_downstroke_sparse)

        assert metadata.tactile_max == Point(0.5, 30.0)
        assert metadata.tactile_min == Point(1.0, 20.0)
        assert metadata.is_tactile
        assert metadata.bottom_out in (Point(2.0, 80.0), Point(2.2, 82.0))

    def test_monotonic_reference(self, monotonic_downstroke_sparse):
        """No local maximum means no tactile pair"""
        metadata = extract_metadata(monotonic_downstroke_sparse)

        assert metadata.tactile_max == ZERO_POINT
        assert metadata.tactile_min == ZERO_POINT
        assert not metadata.is_tactile


class TestDenseScenarios:
    """Test densely sampled synthetic switches"""

    def test_linear_switch(self, linear_downstroke):
        """Linear switch: bottom-out at the stiffness change, not tactile"""
        metadata = extract_metadata(linear_downstroke)

        assert metadata.bottom_out.x == pytest.approx(3.6, abs=0.02)
        assert metadata.bottom_out.force == pytest.approx(89.0, abs=2.0)
        assert metadata.tactile_max == ZERO_POINT
        assert not metadata.is_tactile

    def test_tactile_switch(self, tactile_downstroke):
        """Tactile switch: late bottom-out, bump and trough found"""
        metadata = extract_metadata(tactile_downstroke)

        assert metadata.bottom_out.x == pytest.approx(3.6, abs=0.02)
        assert metadata.tactile_max.x == pytest.approx(0.8)
        assert metadata.tactile_max.force == pytest.approx(50.0)
        assert metadata.tactile_min.x == pytest.approx(1.2)
        assert metadata.tactile_min.force == pytest.approx(40.0)
        assert metadata.is_tactile

    def test_point_ordering(self, tactile_downstroke):
        """Peak precedes bottom-out and trough follows peak"""
        metadata = extract_metadata(tactile_downstroke)

        assert metadata.tactile_max.x < metadata.bottom_out.x
        assert metadata.tactile_min.x > metadata.tactile_max.x

    def test_bottom_out_is_raw_sample(self, tactile_downstroke):
        """Bottom-out is a row of the input downstroke"""
        metadata = extract_metadata(tactile_downstroke)
        matches = np.all(np.isclose(tactile_downstroke, metadata.bottom_out), axis=1)

        assert matches.any()

    def test_small_bump_on_heavy_switch_is_linear(self):
        """A 2 gf ripple on a 90 gf switch stays below the 5 gf threshold"""
        x = np.round(np.arange(0, 381) * 0.01, 2)
        force = np.interp(x, [0.0, 0.8, 1.2, 3.6, 3.8], [40.0, 52.0, 50.0, 90.0, 190.0])
        metadata = extract_metadata(np.column_stack([x, force]))

        assert metadata.tactile_max.force == pytest.approx(52.0)
        assert not metadata.is_tactile

    def test_bump_too_close_to_bottom_out_ignored(self):
        """Maxima within the minimum gap of bottom-out are not tactile peaks"""
        x = np.round(np.arange(0, 381) * 0.01, 2)
        force = np.interp(x, [0.0, 3.3, 3.4, 3.6, 3.8], [35.0, 80.0, 70.0, 80.0, 180.0])
        metadata = extract_metadata(np.column_stack([x, force]))

        assert metadata.tactile_max == ZERO_POINT
        assert not metadata.is_tactile


class TestFallbacks:
    """Test degenerate inputs"""

    def test_empty_downstroke(self):
        """No samples degrade to the zero metadata"""
        assert extract_metadata(np.empty((0, 2))) == CurveMetadata()

    def test_two_samples(self):
        """Too few samples for an acceleration maximum"""
        metadata = extract_metadata([[0.0, 0.0], [1.0, 10.0]])

        assert metadata.bottom_out == ZERO_POINT
        assert not metadata.is_tactile

    def test_constant_displacement(self):
        """Samples at a single displacement have no derivative"""
        metadata = extract_metadata([[1.0, 0.0], [1.0, 5.0], [1.0, 10.0]])
        assert metadata == CurveMetadata()


class TestCalibrationParameters:
    """Test that constructor parameters override the calibrated defaults"""

    def test_min_gap_parameter(self, tactile_downstroke):
        """A minimum gap larger than the bump distance suppresses the pair"""
        metadata = FeatureExtractor(tactile_min_gap=3.0).extract(tactile_downstroke)

        assert metadata.tactile_max == ZERO_POINT
        assert not metadata.is_tactile

    def test_threshold_parameters(self, tactile_downstroke):
        """A higher cap can reclassify a tactile curve as linear"""
        metadata = FeatureExtractor(threshold_ratio=0.5, threshold_max_force=20.0).extract(tactile_downstroke)

        assert metadata.tactile_max.force == pytest.approx(50.0)
        assert not metadata.is_tactile
