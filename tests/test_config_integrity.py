"""
Tests for configuration integrity.

Verifies that:
1. Weights and score tables cover every case the engines look up
2. Classification thresholds are ordered
3. The HFBI species table and reference conditions are complete
"""

import math

import pytest

from fishindex import config
from fishindex.domain import HFBI_SPECIES, EcologicalGroup
from fishindex.formulas.hfbi_reference import ReferenceCondition


class TestNiseciConstants:

    def test_x1_weights_favour_primary_species(self):
        assert config.X1_WEIGHT_PRIMARY > config.X1_WEIGHT_SECONDARY > 0

    def test_x2_weights_sum_to_one(self):
        assert config.X2_WEIGHT_STRUCTURE + config.X2_WEIGHT_DENSITY == pytest.approx(1.0)

    def test_score_table_complete(self):
        pairs = {(a, b) for a in (1, 2, 3) for b in (1, 2, 3)}
        assert set(config.STRUCTURE_SCORE_TABLE) == pairs
        assert set(config.STRUCTURE_SCORE_TABLE.values()) == {0.0, 0.5, 1.0}

    def test_density_scores_ordered(self):
        assert config.DENSITY_SCORE_LOW < config.DENSITY_SCORE_MEDIUM < config.DENSITY_SCORE_HIGH

    def test_x3_a_values_in_unit_interval(self):
        values = [config.X3_A_TYPE1_UNSTRUCTURED, config.X3_A_TYPE2_DOMINANT,
                  config.X3_A_TYPE2_MINORITY, config.X3_A_TYPE3_DOMINANT,
                  config.X3_A_TYPE3_MINORITY, config.X3_A_DEFAULT]
        assert all(0 < v <= 1 for v in values)

    def test_rqe_constants_exact(self):
        assert config.RQE_NISECI_ADDEND == 2.0 / math.sqrt(math.pi)
        assert config.RQE_NISECI_DIVISOR == 1.0603

    def test_status_thresholds_ordered(self):
        assert (config.NISECI_STATUS_HIGH
                > config.NISECI_STATUS_GOOD_MEDITERRANEAN
                > config.NISECI_STATUS_GOOD_ALPINE
                > config.NISECI_STATUS_MODERATE
                > config.NISECI_STATUS_POOR > 0)

    def test_regression_schedule(self):
        assert config.REGRESSION_ITERATIONS > 0
        assert 0 < config.REGRESSION_LEARNING_RATE < 1


class TestHfbiConstants:

    def test_weights_cover_reference_metrics(self):
        assert set(config.HFBI_METRIC_WEIGHTS) == set(ReferenceCondition._fields)

    def test_status_thresholds_ordered(self):
        assert (config.HFBI_STATUS_EXCELLENT > config.HFBI_STATUS_GOOD
                > config.HFBI_STATUS_SUFFICIENT > config.HFBI_STATUS_POOR)

    def test_species_table(self):
        assert len(HFBI_SPECIES) == 31
        for species in HFBI_SPECIES:
            trophic = species.trophic
            total = (trophic.microbenthivore + trophic.macrobenthivore
                     + trophic.hyperbenthivore + trophic.herbivore
                     + trophic.detritivore + trophic.planktivore + trophic.omnivore)
            assert total <= 1.0 + 1e-9, species.name
            assert species.group in EcologicalGroup

    def test_only_known_duplicate_code(self):
        codes = [s.code for s in HFBI_SPECIES]
        duplicates = {c for c in codes if codes.count(c) > 1}
        assert duplicates == {"DIC"}
