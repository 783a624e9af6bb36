"""
Tests for fishindex/engines/niseci_x1.py (presence of expected natives).
"""

import math

import pytest

from fishindex.domain import NiseciRecord, NiseciSample
from fishindex.engines.niseci_x1 import calculate_x1


@pytest.fixture
def reference(make_species):
    """Two expected class-1, two expected class-2 and one unexpected native."""
    return [
        make_species("A", native_class=1),
        make_species("B", native_class=1),
        make_species("C", native_class=2),
        make_species("D", native_class=2),
        make_species("E", native_class=1, expected=False),
    ]


def _sample(reference, *ids):
    by_id = {s.species_id: s for s in reference}
    return NiseciSample(NiseciRecord(by_id[i], 1, 10, 5.0) for i in ids)


class TestCalculateX1:

    def test_one_of_each_class(self, reference):
        # (1.2 + 0.8) / (2.4 + 1.6)
        assert calculate_x1(_sample(reference, "A", "C"), reference) == 0.5

    def test_primary_only(self, reference):
        assert calculate_x1(_sample(reference, "A"), reference) == 0.3

    def test_all_expected_found(self, reference):
        assert calculate_x1(_sample(reference, "A", "B", "C", "D"), reference) == 1.0

    def test_repeated_individuals_count_once(self, reference):
        assert calculate_x1(_sample(reference, "A", "A", "A", "C"), reference) == 0.5

    def test_unexpected_species_ignored(self, reference):
        assert calculate_x1(_sample(reference, "E"), reference) == 0.0

    def test_alien_species_ignored(self, reference, make_species):
        alien = make_species("X", native_class=0, alien_class=2, expected=True)
        sample = NiseciSample([NiseciRecord(alien, 1, 10, 5.0)])
        assert calculate_x1(sample, reference + [alien]) == 0.0

    def test_duplicate_reference_ids_counted_once(self, make_species):
        a = make_species("A", native_class=1)
        reference = [a, a, make_species("C", native_class=2)]
        sample = NiseciSample([NiseciRecord(a, 1, 10, 5.0)])
        # 1.2 / (1.2 + 0.8)
        assert calculate_x1(sample, reference) == 0.6

    def test_custom_weights(self, reference):
        sample = _sample(reference, "A", "B")
        assert calculate_x1(sample, reference) == 0.6
        assert calculate_x1(sample, reference, primary_weight=1.0,
                            secondary_weight=1.0) == 0.5

    def test_no_expected_natives_is_nan(self):
        assert math.isnan(calculate_x1(NiseciSample([]), []))
