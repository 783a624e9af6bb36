"""
Rounding and IEEE-754 arithmetic helpers.

The regulatory formulas divide by station surfaces and take logarithms of
quantities that can be zero.  Those degenerate inputs must yield inf/nan,
as the formulas literally prescribe, rather than raise: plain Python
floats raise ZeroDivisionError and ValueError, so these helpers route the
operation through numpy float64 with warnings silenced.

All functions are pure and return built-in floats.
"""

import math

import numpy as np

from fishindex import config


def round_half_away(value, decimals=None):
    """Round ``value`` half away from zero.

    Python's round() and numpy.round() both round half to even
    (0.5 → 0, 2.5 → 2); the index methodology rounds half away from
    zero (0.5 → 1, 2.5 → 3, -2.5 → -3).

    Parameters
    ----------
    value : float or None
    decimals : int, optional
        Defaults to config.INDEX_DECIMALS (3).

    Returns
    -------
    float or None
        None and non-finite values are returned unchanged.
    """
    if decimals is None:
        decimals = config.INDEX_DECIMALS
    if value is None:
        return None
    value = float(value)
    if not math.isfinite(value):
        return value
    scale = 10.0 ** decimals
    scaled = value * scale
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / scale


def divide(numerator, denominator):
    """IEEE division: x/0 → ±inf, 0/0 → nan."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def ln(value):
    """Natural log: ln(0) → -inf, ln(<0) → nan, ln(inf) → inf."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.log(np.float64(value)))


def log10(value):
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.log10(np.float64(value)))


def sqrt(value):
    with np.errstate(invalid="ignore"):
        return float(np.sqrt(np.float64(value)))


def is_close(a, b, tolerance=None):
    """True when |a - b| is below the engine tolerance (1e-6)."""
    if tolerance is None:
        tolerance = config.FLOAT_TOLERANCE
    return abs(a - b) < tolerance
