"""
The six HFBI metrics.

Biomasses are grams per transect, turned into a density per 100 m² by
dividing by the transect surface.  Every metric is a natural-log
transform rounded at 3 decimals:

    bn     ln(B / N + 1)                      mean weight of an individual
    bbent  ln(benthivore biomass density + 1)
    dbent  ln((S_bent − 1) / ln(B_bent) + 1)  benthivore diversity
    ddom   ln((S90 − 1) / B90 + 1)            dominance
    dhzp   ln((S_hzp − 0.2) / ln(B_hzp) + 1)  hyperbenthivore diversity
    dmig   ln((S_mig − 1) / ln(B_mig) + 1)    migratory diversity

Only species of the lagoon groups (diadromous, migratory marine and
estuarine resident) contribute to bbent, dbent and dhzp; dmig counts the
diadromous and migratory marine ones.  Degenerate surfaces and empty
samples are not errors: they give inf or nan.
"""

from fishindex import config
from fishindex.domain.hfbi import LAGOON_GROUPS, MIGRATORY_GROUPS
from fishindex.formulas.numeric import divide, is_close, ln, round_half_away


def _density(biomass, surface):
    return divide(biomass, surface) * config.HFBI_DENSITY_SURFACE


def _diversity(richness_term, biomass_density):
    return round_half_away(ln(divide(richness_term, ln(biomass_density)) + 1.0))


def calc_bn(sample):
    """Mean individual weight index.  An empty sample gives nan."""
    biomass = 0.0
    individuals = 0
    for record in sample:
        biomass += record.weight_g
        individuals += record.individuals
    return round_half_away(ln(divide(biomass, individuals) + 1.0))


def calc_bbent(sample, station):
    """Benthivore biomass index.

    Returns 0.0 when no lagoon-group biomass is benthivore.
    """
    biomass = 0.0
    for record in sample:
        if record.species.group in LAGOON_GROUPS:
            biomass += record.weight_g * record.species.trophic.benthivore

    if is_close(biomass, 0.0):
        return 0.0
    return round_half_away(ln(_density(biomass, station.surface) + 1.0))


def calc_dbent(sample, station):
    """Benthivore diversity index.

    S_bent is the sum of the benthivore diet fractions of the lagoon-group
    records and B_bent their benthivore-weighted biomass density.  Returns
    0.0 when S_bent is 0 and 0.01 when it is 0.2.
    """
    richness = 0.0
    biomass_density = 0.0
    for record in sample:
        if record.species.group not in LAGOON_GROUPS:
            continue
        fraction = record.species.trophic.benthivore
        biomass_density += _density(record.weight_g, station.surface) * fraction
        richness += fraction

    if is_close(richness, 0.0):
        return 0.0
    if is_close(richness, config.HFBI_DIVERSITY_SINGULARITY):
        return config.HFBI_DIVERSITY_SINGULARITY_VALUE
    return _diversity(richness - 1.0, biomass_density)


def calc_s90_b90(sample, station, fraction=None):
    """Dominance statistics of a sample.

    Records are walked in input order, summing weights until the running
    total exceeds ``fraction`` (default 0.9) of the total biomass.

    Returns
    -------
    tuple[int, float]
        S90, the number of records consumed, and B90, the log-transformed
        density of the 90 % biomass.
    """
    if fraction is None:
        fraction = config.HFBI_DOMINANCE_FRACTION

    total = sum(record.weight_g for record in sample)
    biomass_90 = total * fraction

    s90 = 0
    running = 0.0
    for record in sample:
        running += record.weight_g
        s90 += 1
        if running > biomass_90:
            break

    b90 = ln(_density(biomass_90, station.surface) + 1.0)
    return s90, b90


def calc_ddom(sample, station):
    """Dominance index ln((S90 − 1) / B90 + 1)."""
    s90, b90 = calc_s90_b90(sample, station)
    return round_half_away(ln(divide(s90 - 1.0, b90) + 1.0))


def calc_bhzp(sample, station):
    """Hyperbenthivore biomass density of the lagoon-group records."""
    biomass = 0.0
    for record in sample:
        if record.species.group in LAGOON_GROUPS:
            biomass += record.weight_g * record.species.trophic.hyperbenthivore
    return _density(biomass, station.surface)


def calc_dhzp(sample, station):
    """Hyperbenthivore diversity index.

    Returns 0.0 when the summed hyperbenthivore fraction is 0 and 0.01
    when it is 0.2.
    """
    richness = sum(
        record.species.trophic.hyperbenthivore
        for record in sample
        if record.species.group in LAGOON_GROUPS
    )
    if is_close(richness, 0.0):
        return 0.0
    if is_close(richness, config.HFBI_DIVERSITY_SINGULARITY):
        return config.HFBI_DIVERSITY_SINGULARITY_VALUE
    return _diversity(richness - config.HFBI_DIVERSITY_SINGULARITY,
                      calc_bhzp(sample, station))


def calc_bmig(sample, station):
    """Biomass density of the diadromous and migratory marine records."""
    biomass = sum(
        record.weight_g
        for record in sample
        if record.species.group in MIGRATORY_GROUPS
    )
    return _density(biomass, station.surface)


def calc_dmig(sample, station):
    """Migratory diversity index.

    S_mig counts distinct species codes.  Returns 0.0 with no migratory
    species and 0.01 with exactly one.
    """
    codes = {
        record.species.code
        for record in sample
        if record.species.group in MIGRATORY_GROUPS
    }
    if not codes:
        return 0.0
    if len(codes) == 1:
        return config.HFBI_DIVERSITY_SINGULARITY_VALUE
    return _diversity(len(codes) - 1.0, calc_bmig(sample, station))
