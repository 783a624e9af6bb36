"""
Removal-method abundance estimation from multi-pass depletion sampling.

METHODOLOGY:
Electrofishing a closed stretch several times removes a decreasing catch
per pass.  Plotting the catch of each pass (y) against the cumulative
catch up to that pass (x) gives a roughly straight, descending line whose
x-intercept estimates the total population (Zippin 1958).
Citation: Zippin, C. (1958). The removal method of population estimation.
          J. Wildlife Management, 22(1), 82-90.

The line is fitted by batch gradient descent on min/max-normalised points
with a fixed schedule (config.REGRESSION_*).  The schedule is part of the
method: results are intentionally reproducible rather than exact OLS.

Two-pass surveys use the closed form of Seber & Le Cren (1967),
N = C / (1 - (c2/c1)²).
Citation: Seber, G.A.F. & Le Cren, E.D. (1967). Estimating population
          parameters from catches large relative to the population.
          J. Animal Ecology, 36(3), 631-643.

Fallback policy: when no descending line can be fitted (all catches
equal, a single point, or a non-negative slope) the estimate is the sum
of the observed catches.
"""

import math

import numpy as np

from fishindex import config
from fishindex.domain.niseci import depletion_points
from fishindex.exceptions import NegativeEstimateError, SameValuesError
from fishindex.formulas.numeric import is_close, round_half_away
from fishindex.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)


def _bounds(points):
    xs = np.array([p[0] for p in points], dtype=np.float64)
    ys = np.array([p[1] for p in points], dtype=np.float64)
    return xs, ys, xs.min(), xs.max(), ys.min(), ys.max()


def normalize_points(points):
    """Scale both coordinates of ``points`` to [0, 1].

    Raises
    ------
    SameValuesError
        If every y value is equal (including a single point).
    """
    xs, ys, min_x, max_x, min_y, max_y = _bounds(points)
    if is_close(max_y, min_y):
        raise SameValuesError("all catches are equal")
    with np.errstate(divide="ignore", invalid="ignore"):
        return (xs - min_x) / (max_x - min_x), (ys - min_y) / (max_y - min_y)


def fit_removal_line(points, iterations=None, learning_rate=None):
    """Fit y = slope·x + intercept to depletion points by gradient descent.

    Parameters
    ----------
    points : sequence of (x, y)
        (cumulative catch, catch of the pass) pairs.
    iterations : int, optional
        Defaults to config.REGRESSION_ITERATIONS (10000).
    learning_rate : float, optional
        Defaults to config.REGRESSION_LEARNING_RATE (0.001).

    Returns
    -------
    tuple[float, float]
        ``(slope, intercept)`` in the original (denormalised) scale.

    Raises
    ------
    SameValuesError
        If all y values are equal.
    """
    if iterations is None:
        iterations = config.REGRESSION_ITERATIONS
    if learning_rate is None:
        learning_rate = config.REGRESSION_LEARNING_RATE

    x_norm, y_norm = normalize_points(points)
    n = len(x_norm)

    m = config.REGRESSION_INITIAL_SLOPE
    b = config.REGRESSION_INITIAL_INTERCEPT
    for _ in range(iterations):
        residual = y_norm - (m * x_norm + b)
        m_gradient = -(2.0 / n) * np.sum(x_norm * residual)
        b_gradient = -(2.0 / n) * np.sum(residual)
        m = m - m_gradient * learning_rate
        b = b - b_gradient * learning_rate

    _, _, min_x, max_x, min_y, max_y = _bounds(points)
    slope = m * (max_y - min_y) / (max_x - min_x)
    intercept = b * (max_y - min_y) + min_y - slope * min_x
    return float(slope), float(intercept)


def estimate_from_regression(points):
    """Estimate total abundance as the x-intercept of the fitted line.

    Parameters
    ----------
    points : sequence of (x, y)

    Returns
    -------
    int
        The truncated x-intercept, or the sum of catches when the line
        cannot be fitted or does not descend.

    Raises
    ------
    NegativeEstimateError
        If the x-intercept is negative.
    """
    catch_sum = int(sum(p[1] for p in points))
    try:
        slope, intercept = fit_removal_line(points)
    except SameValuesError:
        log.debug("Equal catches on every pass, using catch sum %d", catch_sum)
        return catch_sum

    if is_close(slope, 0.0) or slope > 0:
        log.debug("Non-descending removal line (slope=%.6g), using catch sum %d",
                  slope, catch_sum)
        return catch_sum

    estimate = math.trunc(-intercept / slope)
    if estimate < 0:
        raise NegativeEstimateError(f"negative estimated quantity {estimate}")
    return estimate


def estimate_two_pass(first, second):
    """Closed-form two-pass removal estimate.

    Returns the catch sum when either pass caught nothing, when both
    caught the same number, or when the formula gives a non-positive
    result (second catch larger than the first).
    """
    total = first + second
    if first == second or first == 0 or second == 0:
        return total

    ratio = second / first
    estimate = int(round_half_away(total / (1.0 - ratio ** 2), 0))
    if estimate > 0:
        return estimate
    log.debug("Two-pass estimate %d not positive, using catch sum %d",
              estimate, total)
    return total


def estimate_population(pass_counts):
    """Estimate the abundance of one species from its catch per pass.

    Parameters
    ----------
    pass_counts : dict[int, int]
        Individuals caught per capture pass (1-based, gaps allowed).

    Returns
    -------
    int

    Raises
    ------
    NegativeEstimateError
        If the removal regression yields a negative estimate.
    """
    if len(pass_counts) == 1:
        return next(iter(pass_counts.values()))
    if set(pass_counts) == {1, 2}:
        return estimate_two_pass(pass_counts[1], pass_counts[2])
    return estimate_from_regression(depletion_points(pass_counts))
