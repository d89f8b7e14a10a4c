"""
Inverse standard normal CDF for mapping Sobol points to Gaussian variates.
"""

import numpy as np

# Acklam rational approximation coefficients
_A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
_C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)

_P_LOW = 0.02425
_P_HIGH = 1.0 - _P_LOW
_EPS = 1e-10


def _horner(coeffs, x):
    result = np.zeros_like(x) + coeffs[0]
    for c in coeffs[1:]:
        result = result * x + c
    return result


def _tail(p: np.ndarray) -> np.ndarray:
    q = np.sqrt(-2.0 * np.log(p))
    return _horner(_C, q) / (_horner(_D, q) * q + 1.0)


def inverse_normal_cdf(u):
    """
    Map probabilities in [0, 1] to standard normal quantiles.

    Uses Peter Acklam's rational approximation (relative error below 1.15e-9).
    Inputs are clipped to ``[1e-10, 1 - 1e-10]`` so the Sobol origin point
    (all zeros) maps to a large but finite negative value.

    Parameters
    ----------
    u : float or np.ndarray
        Probabilities in [0, 1]

    Returns
    -------
    np.ndarray
        Standard normal quantiles, same shape as ``u``
    """
    u = np.asarray(u, dtype=np.float64)
    if np.any(u < 0) or np.any(u > 1):
        raise ValueError("probabilities must be in [0, 1]")

    u = np.clip(u, _EPS, 1.0 - _EPS)
    z = np.empty_like(u)

    low = u < _P_LOW
    high = u > _P_HIGH
    central = ~(low | high)

    if np.any(low):
        z[low] = _tail(u[low])
    if np.any(high):
        z[high] = -_tail(1.0 - u[high])
    if np.any(central):
        q = u[central] - 0.5
        r = q * q
        z[central] = _horner(_A, r) * q / (_horner(_B, r) * r + 1.0)

    return z
