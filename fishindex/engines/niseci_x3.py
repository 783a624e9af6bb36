"""
NISECI x3: impact of alien species.

    no alien individual sampled           → x3 = 1.0
    alien individuals >= native ones      → x3 = 0.0
    a structured type-1 alien population  → x3 = 0.0
    otherwise                             → x3 = 0.5·(a + b)

``a`` is a tiered lookup on how many species of each alien type were
sampled compared with the expected native species found; ``b`` weighs the
share of moderately structured (0.5) and destructured (1.0) alien
populations.  Alien types 1..3 are in increasing order of severity.
"""

from dataclasses import dataclass, field
from typing import Optional

from fishindex import config
from fishindex.domain.niseci import AlienClass, SpeciesIntermediates
from fishindex.exceptions import IndexComputationError
from fishindex.formulas.numeric import divide, is_close, round_half_away
from fishindex.formulas.structure import classify_structure, count_length_classes
from fishindex.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)

ALIEN_TYPES = (AlienClass.TYPE_1, AlienClass.TYPE_2, AlienClass.TYPE_3)


@dataclass
class AlienPopulationInfo:
    """Structure statistics of the sampled species of one alien type."""

    total_species: int = 0
    best_score: float = 0.0
    structured: int = 0
    moderately_structured: int = 0
    destructured: int = 0
    # species id → (age-class counts, StructureClassification)
    classifications: dict = field(default_factory=dict)


@dataclass
class AlienSummary:
    by_type: dict
    total_alien_species: int
    expected_native_species: int

    def info(self, alien_type):
        return self.by_type[alien_type]

    @property
    def moderately_structured(self):
        return sum(i.moderately_structured for i in self.by_type.values())

    @property
    def destructured(self):
        return sum(i.destructured for i in self.by_type.values())


@dataclass
class X3Metrics:
    """Outcome of x3.  ``a`` and ``b`` are None on a short-circuit."""

    value: float
    a: Optional[float] = None
    b: Optional[float] = None
    species: dict = field(default_factory=dict)


def alien_length_classes(sample):
    """Length-class counts of every sampled alien species, per alien type.

    Returns
    -------
    dict[AlienClass, dict[str, tuple]]
    """
    lengths = {t: {} for t in ALIEN_TYPES}
    thresholds = {}
    for record in sample:
        species = record.species
        if species.alien_class not in lengths:
            continue
        lengths[species.alien_class].setdefault(species.species_id, []).append(
            record.length_mm)
        thresholds[species.species_id] = species.length_thresholds
    return {
        t: {sid: count_length_classes(ls, thresholds[sid]) for sid, ls in by_id.items()}
        for t, by_id in lengths.items()
    }


def population_info(class_counts, ratio_thresholds):
    """Classify each species of one alien type and tally the scores.

    Parameters
    ----------
    class_counts : dict[str, tuple]
        Age-class counts per species id.
    ratio_thresholds : dict[str, tuple]
        Adult/juvenile thresholds per species id.

    Raises
    ------
    IndexComputationError
        Listing every species whose structure could not be classified.
    """
    info = AlienPopulationInfo(total_species=len(class_counts))
    errors = []
    for species_id, counts in class_counts.items():
        try:
            classification = classify_structure(counts, ratio_thresholds[species_id])
        except IndexComputationError as exc:
            errors.extend(f"species {species_id}: {e}" for e in exc.errors)
            continue
        score = classification.score
        info.best_score = max(info.best_score, score)
        if is_close(score, 1.0):
            info.structured += 1
        if is_close(score, 0.5):
            info.moderately_structured += 1
        if is_close(score, 0.0):
            info.destructured += 1
        info.classifications[species_id] = (counts, classification)

    if errors:
        raise IndexComputationError(errors)
    return info


def summarize_aliens(sample):
    """Build the per-type alien population summary of a sample."""
    by_type_counts = alien_length_classes(sample)
    ratio_thresholds = {
        r.species.species_id: r.species.ratio_thresholds
        for r in sample if r.species.is_alien
    }

    by_type = {}
    errors = []
    for alien_type, counts in by_type_counts.items():
        try:
            by_type[alien_type] = population_info(counts, ratio_thresholds)
        except IndexComputationError as exc:
            errors.extend(exc.errors)
    if errors:
        raise IndexComputationError(errors)

    return AlienSummary(
        by_type=by_type,
        total_alien_species=sum(len(c) for c in by_type_counts.values()),
        expected_native_species=sample.expected_native_species_count(),
    )


def criterion_a_value(summary):
    """Tiered ``a`` term of x3 (first matching rule wins)."""
    natives = summary.expected_native_species
    type_1 = summary.info(AlienClass.TYPE_1)
    type_2 = summary.info(AlienClass.TYPE_2).total_species
    type_3 = summary.info(AlienClass.TYPE_3).total_species

    if type_1.total_species > 0 and type_1.best_score < 1.0:
        return config.X3_A_TYPE1_UNSTRUCTURED
    if type_2 != 0 and type_2 >= natives:
        return config.X3_A_TYPE2_DOMINANT
    if type_2 != 0 and type_2 < natives:
        return config.X3_A_TYPE2_MINORITY
    # No "present" check here: with no type-3 species and no expected
    # native species sampled this rule still fires.
    if type_3 >= natives:
        return config.X3_A_TYPE3_DOMINANT
    if type_3 != 0 and type_3 < natives:
        return config.X3_A_TYPE3_MINORITY
    return config.X3_A_DEFAULT


def criterion_b_value(summary):
    """``b`` = 0.5·(moderately structured / aliens) + destructured / aliens."""
    total = summary.total_alien_species
    return (0.5 * divide(summary.moderately_structured, total)
            + divide(summary.destructured, total))


def calculate_x3(sample):
    """Compute x3 for a NISECI sample.

    Returns
    -------
    X3Metrics
        Per-species entries are only filled on the ``0.5·(a + b)`` path.

    Raises
    ------
    IndexComputationError
        If an alien species' structure could not be classified.
    """
    counts = sample.count_aliens_and_natives()
    if counts.aliens == 0:
        log.debug("No alien individuals, x3 = 1.0")
        return X3Metrics(1.0)
    if counts.aliens >= counts.natives:
        log.debug("Aliens (%d) >= natives (%d), x3 = 0.0",
                  counts.aliens, counts.natives)
        return X3Metrics(0.0)

    summary = summarize_aliens(sample)
    if is_close(summary.info(AlienClass.TYPE_1).best_score, 1.0):
        log.debug("Structured type-1 alien population, x3 = 0.0")
        return X3Metrics(0.0)

    a = criterion_a_value(summary)
    b = criterion_b_value(summary)

    species = {}
    for alien_type in ALIEN_TYPES:
        for species_id, (age_classes, c) in summary.info(alien_type).classifications.items():
            species.setdefault(species_id, SpeciesIntermediates(
                age_classes=age_classes,
                criterion_a=c.criterion_a,
                criterion_b=c.criterion_b,
                ratio=c.ratio,
            ))

    return X3Metrics(round_half_away(0.5 * (a + b)), a, b, species)
