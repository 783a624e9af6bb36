"""
NISECI x2: population structure and density of the sampled species.

For every selected species found in the sample:

    x2_a  population-structure score (1.0 / 0.5 / 0.0), see
          fishindex.formulas.structure
    x2_b  density score: the removal-method abundance estimate divided by
          the station surface, compared with the species' two density
          thresholds (> t2 → 1.0, > t1 → 0.5, otherwise 0.0)

    x2 = (0.6·Σx2_a + 0.4·Σx2_b) / number of selected species sampled

The same computation runs on three species selections: expected natives
(the x2 that enters NISECI), unexpected natives and aliens (both reported
for information only).  When no selected species was sampled x2 is None.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from fishindex import config
from fishindex.domain.niseci import SpeciesIntermediates
from fishindex.exceptions import IndexComputationError
from fishindex.formulas.numeric import divide, round_half_away
from fishindex.formulas.regression import estimate_population
from fishindex.formulas.structure import classify_structure, count_length_classes
from fishindex.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)


class SpeciesSelection(str, Enum):
    EXPECTED = "expected"
    UNEXPECTED = "unexpected"
    ALIEN = "alien"

    def matches(self, species):
        if self is SpeciesSelection.ALIEN:
            return species.alien_class > 0
        wanted = self is SpeciesSelection.EXPECTED
        return species.expected == wanted and species.is_native


@dataclass
class X2Metrics:
    """Outcome of one x2 run.  ``value`` None means nothing was selected."""

    value: Optional[float]
    structure_sum: float = 0.0
    density_sum: float = 0.0
    species: dict = field(default_factory=dict)


def group_records(sample, selection):
    """Group the selected records by species id, in first-seen order.

    Returns
    -------
    dict[str, list[NiseciRecord]]
    """
    groups = {}
    for record in sample:
        if selection.matches(record.species):
            groups.setdefault(record.species.species_id, []).append(record)
    return groups


def density_score(density, thresholds, high=None, medium=None, low=None):
    """Score an estimated density against a species' (t1, t2) thresholds."""
    if high is None:
        high = config.DENSITY_SCORE_HIGH
    if medium is None:
        medium = config.DENSITY_SCORE_MEDIUM
    if low is None:
        low = config.DENSITY_SCORE_LOW

    t1, t2 = thresholds
    if density > t2:
        return high
    if density > t1:
        return medium
    return low


def _structure_pass(groups):
    total = 0.0
    per_species = {}
    errors = []
    for species_id, records in groups.items():
        species = records[0].species
        counts = count_length_classes((r.length_mm for r in records),
                                      species.length_thresholds)
        try:
            classification = classify_structure(counts, species.ratio_thresholds)
        except IndexComputationError as exc:
            errors.extend(f"species {species_id}: {e}" for e in exc.errors)
            continue
        total += classification.score
        per_species[species_id] = (counts, classification)

    if errors:
        raise IndexComputationError(errors)
    return total, per_species


def _density_pass(groups, surface):
    total = 0.0
    per_species = {}
    errors = []
    for species_id, records in groups.items():
        species = records[0].species
        pass_counts = {}
        for r in records:
            pass_counts[r.capture_pass] = pass_counts.get(r.capture_pass, 0) + 1
        try:
            quantity = estimate_population(pass_counts)
        except IndexComputationError as exc:
            errors.extend(f"species {species_id}: {e}" for e in exc.errors)
            continue
        density = divide(quantity, surface)
        score = density_score(density, species.density_thresholds)
        total += score
        per_species[species_id] = (quantity, density, score)

    if errors:
        raise IndexComputationError(errors)
    return total, per_species


def calculate_x2(sample, station, selection=SpeciesSelection.EXPECTED):
    """Compute x2 over one species selection.

    Parameters
    ----------
    sample : NiseciSample
    station : NiseciStation
        Provides the sampled surface for the density estimate.
    selection : SpeciesSelection

    Returns
    -------
    X2Metrics

    Raises
    ------
    IndexComputationError
        Listing every species whose structure could not be classified or,
        if all structures were fine, every species whose abundance
        estimate failed.
    """
    groups = group_records(sample, selection)
    structure_sum, structures = _structure_pass(groups)
    density_sum, densities = _density_pass(groups, station.surface)

    species = {}
    for species_id, (counts, classification) in structures.items():
        quantity, density, score = densities[species_id]
        species[species_id] = SpeciesIntermediates(
            age_classes=counts,
            criterion_a=classification.criterion_a,
            criterion_b=classification.criterion_b,
            ratio=classification.ratio,
            estimated_density=density,
            estimated_quantity=quantity,
            x2_b=score,
        )

    if not groups:
        log.debug("No %s species sampled, x2 undefined", selection.value)
        return X2Metrics(None, structure_sum, density_sum, species)

    value = divide(
        config.X2_WEIGHT_STRUCTURE * structure_sum
        + config.X2_WEIGHT_DENSITY * density_sum,
        len(groups),
    )
    return X2Metrics(round_half_away(value), structure_sum, density_sum, species)
