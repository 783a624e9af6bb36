"""
Tests for fishindex/formulas/regression.py.

Covers the removal-method line fit, its fallbacks to the catch sum, the
two-pass closed form and the dispatch in estimate_population().
"""

import pytest

from fishindex.domain.niseci import depletion_points
from fishindex.exceptions import NegativeEstimateError, SameValuesError
from fishindex.formulas.regression import (
    estimate_from_regression,
    estimate_population,
    estimate_two_pass,
    fit_removal_line,
    normalize_points,
)


# ── Depletion points ────────────────────────────────────────────────────


class TestDepletionPoints:

    def test_cumulative_catch(self):
        assert depletion_points({1: 20, 2: 15, 3: 10}) == [(20, 20), (35, 15), (45, 10)]

    def test_missing_pass_counts_as_zero(self):
        assert depletion_points({1: 5, 3: 2}) == [(5, 5), (5, 0), (7, 2)]

    def test_empty(self):
        assert depletion_points({}) == []


# ── Line fit ────────────────────────────────────────────────────────────


class TestFitRemovalLine:

    def test_exact_line_recovered(self):
        """Points already on the initial normalised line need no descent."""
        slope, intercept = fit_removal_line([(1, 100), (2, 75), (3, 50)])
        assert slope == pytest.approx(-25.0)
        assert intercept == pytest.approx(125.0)

    def test_equal_catches_raise(self):
        with pytest.raises(SameValuesError):
            fit_removal_line([(10, 5), (15, 5), (20, 5)])

    def test_single_point_raises(self):
        with pytest.raises(SameValuesError):
            normalize_points([(10, 10)])

    def test_normalised_range(self):
        xs, ys = normalize_points([(20, 20), (35, 15), (45, 10)])
        assert xs.min() == 0.0 and xs.max() == 1.0
        assert ys.min() == 0.0 and ys.max() == 1.0


class TestEstimateFromRegression:

    def test_x_intercept(self):
        assert estimate_from_regression([(1, 100), (2, 75), (3, 50)]) == 5

    def test_equal_catches_fall_back_to_sum(self):
        assert estimate_from_regression(depletion_points({1: 50, 2: 50, 3: 50})) == 150

    def test_increasing_catches_fall_back_to_sum(self):
        assert estimate_from_regression(depletion_points({1: 50, 2: 75, 3: 100})) == 225

    def test_negative_intercept_raises(self):
        with pytest.raises(NegativeEstimateError):
            estimate_from_regression([(-10, 5), (-5, 0)])

    def test_four_pass_depletion(self):
        """70/60/20/10 is a clear depletion; the estimate exceeds the 160 caught."""
        assert estimate_from_regression(depletion_points({1: 70, 2: 60, 3: 20, 4: 10})) == 190


# ── Two-pass closed form ────────────────────────────────────────────────


class TestEstimateTwoPass:

    @pytest.mark.parametrize("first,second,expected", [
        (30, 12, 50),
        (30, 15, 60),
        (15, 30, 45),   # formula negative → catch sum
        (30, 30, 60),   # equal catches → catch sum
        (0, 5, 5),
        (5, 0, 5),
    ])
    def test_estimates(self, first, second, expected):
        assert estimate_two_pass(first, second) == expected


# ── Dispatch ────────────────────────────────────────────────────────────


class TestEstimatePopulation:

    def test_single_pass_is_the_catch(self):
        assert estimate_population({1: 17}) == 17

    def test_single_later_pass_is_the_catch(self):
        assert estimate_population({3: 9}) == 9

    def test_two_passes_use_closed_form(self):
        assert estimate_population({1: 30, 2: 15}) == 60

    def test_non_contiguous_passes_use_regression(self):
        """Passes 1 and 3 are not the {1, 2} closed-form case."""
        assert estimate_population({1: 50, 3: 50}) == 100

    def test_three_passes_use_regression(self):
        assert estimate_population({1: 50, 2: 50, 3: 50}) == 150

    def test_four_passes_use_regression(self):
        assert estimate_population({1: 70, 2: 60, 3: 20, 4: 10}) == 190

    def test_increasing_catches_use_catch_sum(self):
        assert estimate_population({1: 50, 2: 75, 3: 100}) == 225
