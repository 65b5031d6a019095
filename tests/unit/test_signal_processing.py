"""
Unit tests for signal processing and derivative estimation.

Tests the box blur, finite differences and the derivative estimator built
on them.
"""

import pytest
import numpy as np
from src.forcecurve.utils.signal_processing import apply_box_blur, finite_difference
from src.forcecurve.analysis.derivative import estimate_derivative
from src.forcecurve.constants import DERIVATIVE_STEP_MM


class TestBoxBlur:
    """Test repeated moving average"""

    def test_constant_unchanged(self):
        """Blurring a constant signal leaves it constant"""
        np.testing.assert_allclose(apply_box_blur(np.full(20, 7.0), 2), np.full(20, 7.0))

    def test_single_pass_impulse(self):
        """One pass spreads an impulse over 2r+1 samples"""
        data = np.zeros(11)
        data[5] = 3.0
        blurred = apply_box_blur(data, 1, passes=1)

        np.testing.assert_allclose(blurred[4:7], [1.0, 1.0, 1.0])
        assert abs(blurred[3]) < 1e-12 and abs(blurred[7]) < 1e-12

    def test_symmetric(self):
        """Blur of a centred impulse is symmetric"""
        data = np.zeros(31)
        data[15] = 1.0
        blurred = apply_box_blur(data, 2)

        np.testing.assert_allclose(blurred, blurred[::-1], atol=1e-12)

    def test_radius_zero_copies(self):
        """Radius 0 disables blurring"""
        data = np.array([1.0, 5.0, 2.0])
        blurred = apply_box_blur(data, 0)

        np.testing.assert_array_equal(blurred, data)
        assert blurred is not data

    def test_edges_repeated(self):
        """Edge values extend past the ends, so a ramp keeps its endpoints close"""
        blurred = apply_box_blur(np.array([0.0, 0.0, 0.0, 10.0, 10.0, 10.0]), 1, passes=1)
        assert blurred[0] == 0.0
        assert blurred[-1] == 10.0


class TestFiniteDifference:
    """Test pairwise slopes"""

    def test_slopes(self):
        np.testing.assert_allclose(finite_difference(np.array([0.0, 1.0, 3.0]), np.array([0.0, 2.0, 8.0])), [2.0, 3.0])

    def test_too_short(self):
        assert len(finite_difference(np.array([1.0]), np.array([1.0]))) == 0


class TestEstimateDerivative:
    """Test derivative estimation on force curves"""

    def test_linear_slope(self):
        """Derivative of a line is its slope everywhere"""
        x = np.linspace(0, 1, 101)
        velocity = estimate_derivative(np.column_stack([x, 3.0 * x + 2.0]))

        np.testing.assert_allclose(velocity[:, 1], 3.0, atol=1e-6)

    def test_output_grid(self):
        """Output sits on the resampling grid, indexed at the left point"""
        x = np.linspace(0, 1, 101)
        velocity = estimate_derivative(np.column_stack([x, x]))

        assert len(velocity) == int(round(1.0 / DERIVATIVE_STEP_MM))
        assert velocity[0, 0] == 0.0
        assert velocity[-1, 0] == pytest.approx(1.0 - DERIVATIVE_STEP_MM)

    def test_second_derivative_of_line(self):
        """Applying the estimator twice gives zero acceleration for a line"""
        x = np.linspace(0, 2, 201)
        acceleration = estimate_derivative(estimate_derivative(np.column_stack([x, 5.0 * x])))

        np.testing.assert_allclose(acceleration[:, 1], 0.0, atol=1e-6)

    def test_quadratic_interior(self):
        """Interior slope of x^2 tracks 2x"""
        x = np.linspace(0, 2, 401)
        velocity = estimate_derivative(np.column_stack([x, x ** 2]))
        interior = velocity[50:-50]

        np.testing.assert_allclose(interior[:, 1], 2 * interior[:, 0], atol=0.02)

    def test_irregular_sampling(self):
        """Duplicate and uneven samples still give the slope of a line"""
        x = np.array([0.0, 0.1, 0.1, 0.35, 0.4, 0.9, 1.0])
        velocity = estimate_derivative(np.column_stack([x, 4.0 * x]))

        np.testing.assert_allclose(velocity[:, 1], 4.0, atol=1e-6)

    def test_empty_and_degenerate(self):
        """Fewer than two distinct displacements yield no derivative"""
        assert estimate_derivative(np.empty((0, 2))).shape == (0, 2)
        assert estimate_derivative([[1.0, 2.0]]).shape == (0, 2)
        assert estimate_derivative([[1.0, 2.0], [1.0, 3.0]]).shape == (0, 2)
