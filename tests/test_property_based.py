"""
Property-based tests using Hypothesis for the formula and engine modules.

These tests verify invariants that must hold for ALL valid inputs, not
just the hand-computed examples of the other test modules.

Run with: pytest tests/test_property_based.py -v
"""

import math

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from fishindex.domain import Area, NiseciRecord, NiseciSample, NiseciSpecies, NiseciStatus
from fishindex.domain.niseci import depletion_points
from fishindex.engines.niseci import combine_niseci
from fishindex.engines.niseci_x3 import calculate_x3
from fishindex.formulas.classification import classify_niseci_status, niseci_rqe
from fishindex.formulas.numeric import round_half_away
from fishindex.formulas.regression import estimate_two_pass
from fishindex.formulas.structure import (
    classify_structure,
    count_length_classes,
    criterion_a,
    criterion_b,
)

THRESHOLDS = (3, 6, 9, 12)
RATIOS = (0.5, 0.67, 1.5, 2.0)

class_counts = st.tuples(*[st.integers(min_value=0, max_value=200)] * 5)
unit = st.floats(min_value=0.0, max_value=1.0, allow_nan=False)


# ── Rounding properties ─────────────────────────────────────────────────


class TestRoundingProperties:

    @given(value=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False))
    def test_within_half_unit(self, value):
        assert abs(round_half_away(value) - value) <= 0.0005 + 1e-9

    @given(value=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False))
    def test_symmetric_around_zero(self, value):
        assert round_half_away(-value) == -round_half_away(value)

    @given(value=st.integers(min_value=-10**6, max_value=10**6))
    def test_half_ties_go_away_from_zero(self, value):
        tie = value + 0.5 if value >= 0 else value - 0.5
        assert abs(round_half_away(tie, 0)) == abs(value) + 1


# ── Structure properties ────────────────────────────────────────────────


class TestStructureProperties:

    @given(lengths=st.lists(st.integers(min_value=0, max_value=1000), max_size=200))
    def test_every_individual_gets_a_class(self, lengths):
        assert sum(count_length_classes(lengths, THRESHOLDS)) == len(lengths)

    @given(counts=class_counts)
    def test_criteria_are_total(self, counts):
        assert criterion_a(counts) in (1, 2, 3)
        crit_b, ratio = criterion_b(counts, RATIOS)
        assert crit_b in (1, 2, 3)
        assert (ratio is None) == (counts[1] + counts[2] == 0)

    @given(counts=class_counts)
    def test_score_is_one_of_three_levels(self, counts):
        assert classify_structure(counts, RATIOS).score in (0.0, 0.5, 1.0)


# ── Abundance properties ────────────────────────────────────────────────


class TestAbundanceProperties:

    @given(first=st.integers(min_value=0, max_value=500),
           second=st.integers(min_value=0, max_value=500))
    def test_two_pass_never_below_catch(self, first, second):
        assert estimate_two_pass(first, second) >= first + second

    @given(passes=st.dictionaries(st.integers(min_value=1, max_value=6),
                                  st.integers(min_value=0, max_value=100),
                                  min_size=1))
    def test_depletion_points_end_at_total_catch(self, passes):
        points = depletion_points(passes)
        assert len(points) == max(passes)
        assert points[-1][0] == sum(passes.values())


# ── Index properties ────────────────────────────────────────────────────


class TestIndexProperties:

    @given(x1=unit, x2=unit, x3=unit)
    def test_niseci_in_unit_interval(self, x1, x2, x3):
        value = combine_niseci(x1, x2, x3)
        assert 0.0 <= value <= 1.0

    @given(x1=unit, x2=unit, a=unit, b=unit)
    @settings(max_examples=50)
    def test_niseci_monotonic_in_x3(self, x1, x2, a, b):
        assume(a <= b)
        assert combine_niseci(x1, x2, a) <= combine_niseci(x1, x2, b)

    @given(a=st.floats(min_value=0.001, max_value=1.0),
           b=st.floats(min_value=0.001, max_value=1.0))
    def test_status_monotonic(self, a, b):
        assume(a <= b)
        order = list(NiseciStatus)[::-1]  # BAD … HIGH
        for area in Area:
            low = classify_niseci_status(niseci_rqe(a), area)
            high = classify_niseci_status(niseci_rqe(b), area)
            assert order.index(low) <= order.index(high)

    @given(value=st.floats(min_value=1e-6, max_value=1.0))
    def test_rqe_finite_for_positive_index(self, value):
        assert math.isfinite(niseci_rqe(value))


# ── Alien-impact properties ─────────────────────────────────────────────


@st.composite
def native_only_samples(draw):
    """Random samples of native species, with no alien individual."""
    species = [
        NiseciSpecies(
            species_id=str(i),
            name=f"native {i}",
            native_class=draw(st.sampled_from([1, 2])),
            alien_class=0,
            expected=draw(st.booleans()),
            length_thresholds=THRESHOLDS,
            ratio_thresholds=RATIOS,
            density_thresholds=(3.0, 5.0),
        )
        for i in range(draw(st.integers(min_value=1, max_value=4)))
    ]
    records = draw(st.lists(
        st.builds(
            NiseciRecord,
            species=st.sampled_from(species),
            capture_pass=st.integers(min_value=1, max_value=4),
            length_mm=st.integers(min_value=0, max_value=500),
            weight_g=st.floats(min_value=0.1, max_value=2000.0),
        ),
        max_size=60,
    ))
    return NiseciSample(records)


class TestAlienImpactProperties:

    @given(sample=native_only_samples())
    @settings(max_examples=50)
    def test_no_aliens_is_unimpacted(self, sample):
        x3 = calculate_x3(sample)
        assert x3.value == 1.0
        assert x3.a is None
        assert x3.b is None
