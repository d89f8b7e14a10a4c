"""Tests for the inverse normal CDF."""

import numpy as np
import pytest

from sobol_qmc.rng.normal import inverse_normal_cdf


class TestInverseNormalCDF:
    """Test inverse_normal_cdf function."""

    def test_median(self):
        """Test that inverse_normal_cdf(0.5) = 0."""
        result = inverse_normal_cdf(0.5)
        assert abs(result) < 1e-9

    def test_symmetry(self):
        """Test symmetry: Φ⁻¹(1-u) = -Φ⁻¹(u) across all three regions."""
        for u in [0.001, 0.02, 0.1, 0.25, 0.4]:
            assert abs(inverse_normal_cdf(u) + inverse_normal_cdf(1.0 - u)) < 1e-9

    @pytest.mark.parametrize("u,expected", [
        (0.975, 1.959963985),
        (0.025, -1.959963985),
        (0.8413447461, 1.0),
        (0.01, -2.326347874),
        (0.999, 3.090232306),
    ])
    def test_known_values(self, u, expected):
        """Test against tabulated quantiles."""
        assert inverse_normal_cdf(u) == pytest.approx(expected, abs=1e-6)

    def test_clipped_extremes(self):
        """Test that 0 and 1 map to large finite values."""
        result = inverse_normal_cdf(np.array([0.0, 1.0]))
        assert np.all(np.isfinite(result))
        assert result[0] < -6.0
        assert result[1] > 6.0

    def test_array_input(self):
        """Test shape preservation and monotonicity."""
        u = np.linspace(0.01, 0.99, 99).reshape(9, 11)
        result = inverse_normal_cdf(u)
        assert result.shape == (9, 11)
        assert np.all(np.diff(result.ravel()) > 0)

    def test_invalid_input(self):
        """Test that probabilities outside [0, 1] raise errors."""
        with pytest.raises(ValueError, match="probabilities must be in"):
            inverse_normal_cdf(-0.1)

        with pytest.raises(ValueError, match="probabilities must be in"):
            inverse_normal_cdf(1.1)
