"""
Tests for fishindex/engines/niseci_x3.py (impact of alien species).

Short-circuits first (no aliens, aliens outnumbering natives, structured
type-1 aliens), then the tiered ``a`` term and the structure-weighted
``b`` term of the general case.
"""

import pytest

from fishindex.domain import AlienClass, NiseciSample
from fishindex.engines import niseci_x3
from fishindex.engines.niseci_x3 import (
    AlienPopulationInfo,
    AlienSummary,
    calculate_x3,
    criterion_a_value,
    criterion_b_value,
    summarize_aliens,
)
from fishindex.exceptions import IndexComputationError


@pytest.fixture
def make_alien(make_species):
    def _make(species_id, alien_type):
        return make_species(species_id, native_class=0, alien_class=alien_type,
                            expected=False)
    return _make


@pytest.fixture
def natives(ciaccio, make_species, catch):
    """Factory: 10 individuals of each of ``n`` expected native species."""
    def _natives(n=1):
        species = [ciaccio] + [make_species(str(i), native_class=1)
                               for i in range(2, n + 1)]
        records = []
        for s in species:
            records += catch(s, 1, 4, 10)
        return records
    return _natives


def _summary(by_type_counts, total, natives=1):
    by_type = {t: AlienPopulationInfo() for t in niseci_x3.ALIEN_TYPES}
    for alien_type, kwargs in by_type_counts.items():
        by_type[alien_type] = AlienPopulationInfo(**kwargs)
    return AlienSummary(by_type, total, natives)


# ── Short-circuits ──────────────────────────────────────────────────────


class TestShortCircuits:

    def test_no_aliens(self, moderate_sample):
        result = calculate_x3(moderate_sample)
        assert result.value == 1.0
        assert result.a is None and result.b is None

    def test_aliens_not_fewer_than_natives(self, make_alien, catch, natives):
        alien = make_alien("A2", 2)
        sample = NiseciSample(natives(1)[:5] + catch(alien, 1, 5, 5))
        assert calculate_x3(sample).value == 0.0

    def test_structured_type_1_population(self, make_alien, catch, natives):
        alien = make_alien("T1", 1)
        structured = (catch(alien, 1, 5, 10) + catch(alien, 1, 4, 10)
                      + catch(alien, 1, 3, 10) + catch(alien, 2, 2, 15))
        sample = NiseciSample(natives(5) + structured)
        result = calculate_x3(sample)
        assert result.value == 0.0
        assert result.species == {}


# ── General case ────────────────────────────────────────────────────────


class TestGeneralCase:

    @pytest.mark.parametrize("alien_type,n_natives,a,value", [
        (1, 1, 0.5, 0.75),    # unstructured type 1
        (2, 1, 0.5, 0.75),    # type 2 >= natives
        (2, 2, 0.75, 0.875),  # type 2 < natives
        (3, 1, 0.75, 0.875),  # type 3 >= natives
        (3, 2, 0.85, 0.925),  # type 3 < natives
    ])
    def test_destructured_alien(self, make_alien, catch, natives,
                                alien_type, n_natives, a, value):
        alien = make_alien("AL", alien_type)
        sample = NiseciSample(natives(n_natives) + catch(alien, 1, 5, 3))
        result = calculate_x3(sample)
        assert result.a == a
        assert result.b == 1.0
        assert result.value == value

    def test_moderately_structured_alien(self, make_alien, catch, natives):
        alien = make_alien("A2", 2)
        moderate = (catch(alien, 1, 5, 10) + catch(alien, 1, 4, 10)
                    + catch(alien, 1, 3, 10) + catch(alien, 2, 4, 10)
                    + catch(alien, 2, 1, 5))
        sample = NiseciSample(natives(5) + moderate)
        result = calculate_x3(sample)
        # a: 1 type-2 species < 5 natives → 0.75; b: 0.5 · 1/1
        assert (result.a, result.b, result.value) == (0.75, 0.5, 0.625)

    def test_species_entries_have_no_density(self, make_alien, catch, natives):
        sample = NiseciSample(natives(1) + catch(make_alien("A2", 2), 1, 5, 3))
        entry = calculate_x3(sample).species["A2"]
        assert entry.age_classes == (0, 0, 0, 0, 3)
        assert (entry.criterion_a, entry.criterion_b) == (3, 3)
        assert entry.estimated_density is None

    def test_summary_counts(self, make_alien, catch, natives):
        sample = NiseciSample(natives(2) + catch(make_alien("A1", 1), 1, 5, 2)
                              + catch(make_alien("A3", 3), 1, 5, 2))
        summary = summarize_aliens(sample)
        assert summary.total_alien_species == 2
        assert summary.expected_native_species == 2
        assert summary.info(AlienClass.TYPE_1).total_species == 1
        assert summary.info(AlienClass.TYPE_2).total_species == 0
        assert summary.destructured == 2

    def test_classification_errors_collected_across_types(self, make_alien, catch,
                                                          natives, monkeypatch):
        def failing(counts, ratio_thresholds):
            raise IndexComputationError("criterion A or B outside 1/2/3")

        monkeypatch.setattr(niseci_x3, "classify_structure", failing)
        sample = NiseciSample(natives(2) + catch(make_alien("A1", 1), 1, 5, 2)
                              + catch(make_alien("A2", 2), 1, 5, 2))
        with pytest.raises(IndexComputationError) as exc_info:
            calculate_x3(sample)
        assert exc_info.value.errors == [
            "species A1: criterion A or B outside 1/2/3",
            "species A2: criterion A or B outside 1/2/3",
        ]


# ── a and b terms ───────────────────────────────────────────────────────


class TestCriterionTerms:

    def test_type_3_rule_has_no_presence_check(self):
        """No type-3 species and no natives still selects the type-3 value."""
        assert criterion_a_value(_summary({}, 0, natives=0)) == 0.75

    def test_default_a(self):
        assert criterion_a_value(_summary({}, 0, natives=2)) == 1.0

    def test_structured_type_1_not_penalised_by_first_rule(self):
        summary = _summary({AlienClass.TYPE_1: dict(total_species=1, best_score=1.0,
                                                    structured=1)}, 1, natives=2)
        assert criterion_a_value(summary) == 1.0

    @pytest.mark.parametrize("moderate,destructured,total,expected", [
        (1, 1, 2, 0.75),
        (0, 1, 1, 1.0),
        (1, 0, 1, 0.5),
        (2, 0, 4, 0.25),
        (0, 0, 3, 0.0),
    ])
    def test_b(self, moderate, destructured, total, expected):
        summary = _summary({AlienClass.TYPE_2: dict(
            total_species=total, moderately_structured=moderate,
            destructured=destructured)}, total)
        assert criterion_b_value(summary) == pytest.approx(expected)

    def test_b_sums_over_types(self):
        summary = _summary({
            AlienClass.TYPE_1: dict(total_species=1, moderately_structured=1),
            AlienClass.TYPE_3: dict(total_species=1, destructured=1),
        }, 2)
        assert criterion_b_value(summary) == pytest.approx(0.75)
