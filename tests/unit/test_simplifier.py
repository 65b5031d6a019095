"""
Unit tests for deduplication, resampling and polyline simplification.
"""

import pytest
import numpy as np
from src.forcecurve.core.simplifier import (
    deduplicate_points,
    resample_uniform,
    simplify_polyline,
    simplify_stroke
)


class TestDeduplicate:
    """Test merging of samples sharing a displacement"""

    def test_mean_force_sorted(self):
        """Duplicates collapse to their mean force, sorted by x"""
        points = [[1.0, 2.0], [0.0, 1.0], [1.0, 4.0]]
        np.testing.assert_allclose(deduplicate_points(points), [[0.0, 1.0], [1.0, 3.0]])

    def test_first_occurrence_order(self):
        """sort=False keeps the order in which each x first appears"""
        points = [[1.0, 2.0], [0.0, 1.0], [1.0, 4.0]]
        np.testing.assert_allclose(deduplicate_points(points, sort=False), [[1.0, 3.0], [0.0, 1.0]])

    def test_no_duplicates_unchanged(self):
        """Distinct displacements pass through"""
        points = np.array([[0.0, 1.0], [0.5, 2.0], [1.0, 3.0]])
        np.testing.assert_allclose(deduplicate_points(points), points)

    def test_empty(self):
        assert deduplicate_points(np.empty((0, 2))).shape == (0, 2)


class TestResample:
    """Test uniform grid interpolation"""

    def test_grid_spacing(self):
        """Linear data is reproduced on a uniform grid"""
        resampled = resample_uniform([[0.0, 0.0], [1.0, 10.0]], 0.25)

        np.testing.assert_allclose(resampled[:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])
        np.testing.assert_allclose(resampled[:, 1], [0.0, 2.5, 5.0, 7.5, 10.0])

    def test_range_preserved(self):
        """Grid spans exactly [min x, max x]"""
        points = [[0.13, 1.0], [0.4, 3.0], [2.07, 8.0]]
        resampled = resample_uniform(points, 0.005)

        assert resampled[0, 0] == pytest.approx(0.13)
        assert resampled[-1, 0] == pytest.approx(2.07)
        assert np.allclose(np.diff(resampled[:, 0]), np.diff(resampled[:, 0])[0])

    def test_short_input_copied(self):
        """Fewer than two points are returned unchanged"""
        np.testing.assert_allclose(resample_uniform([[1.0, 2.0]], 0.1), [[1.0, 2.0]])


class TestSimplifyPolyline:
    """Test Ramer-Douglas-Peucker reduction"""

    def test_collinear_reduced_to_endpoints(self):
        """Collinear interior points are removed"""
        points = [[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0]]
        np.testing.assert_allclose(simplify_polyline(points, 0.1), [[0.0, 0.0], [3.0, 3.0]])

    def test_peak_kept(self):
        """A deviation above tolerance survives"""
        points = [[0.0, 0.0], [1.0, 5.0], [2.0, 0.0]]
        np.testing.assert_allclose(simplify_polyline(points, 0.1), points)

    def test_small_noise_removed(self):
        """Deviations below tolerance are dropped"""
        points = [[0.0, 0.0], [1.0, 0.05], [2.0, 0.0]]
        assert len(simplify_polyline(points, 0.1)) == 2

    def test_extreme_displacement_kept(self):
        """The maximum-x sample survives even when collinear"""
        points = [[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [1.5, 1.5]]
        simplified = simplify_polyline(points, 0.1)

        assert simplified[:, 0].max() == 2.0
        assert simplified[:, 0].min() == 0.0


class TestSimplifyStroke:
    """Test the rendering reduction guarantees"""

    def test_length_never_grows(self, tactile_press):
        """Output is never longer than the input"""
        assert len(simplify_stroke(tactile_press)) <= len(tactile_press)

    def test_range_preserved(self, tactile_press):
        """Output min/max x equal input min/max x"""
        simplified = simplify_stroke(tactile_press)

        assert simplified[:, 0].min() == tactile_press[:, 0].min()
        assert simplified[:, 0].max() == tactile_press[:, 0].max()

    def test_noisy_stroke(self):
        """Guarantees hold on noisy, irregular data"""
        rng = np.random.default_rng(42)
        x = np.sort(rng.uniform(0, 4, 500))
        points = np.column_stack([x, 20 * x + rng.normal(0, 0.5, 500)])
        simplified = simplify_stroke(points)

        assert len(simplified) <= len(points)
        assert simplified[:, 0].min() == x.min()
        assert simplified[:, 0].max() == x.max()

    def test_linear_stroke_reduced(self, linear_downstroke):
        """Piecewise linear data collapses to its knots"""
        simplified = simplify_stroke(linear_downstroke)
        assert len(simplified) < 10

    def test_empty_stroke(self):
        assert simplify_stroke(np.empty((0, 2))).shape == (0, 2)
