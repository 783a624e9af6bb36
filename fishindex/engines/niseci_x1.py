"""
NISECI x1: presence of the expected native species.

    x1 = (1.2·n_i + 0.8·n_a) / (1.2·m_i + 0.8·m_a)

n_i / n_a count the distinct expected species sampled with native class 1
(high ecological importance) and 2; m_i / m_a count the same classes over
the whole expected-community reference list.
"""

from fishindex import config
from fishindex.domain.niseci import NativeClass
from fishindex.formulas.numeric import divide, round_half_away


def _count_by_native_class(species_list):
    """Count distinct expected species per native class 1 and 2."""
    seen = set()
    primary = 0
    secondary = 0
    for species in species_list:
        if not species.expected or species.species_id in seen:
            continue
        seen.add(species.species_id)
        if species.native_class == NativeClass.PRIMARY:
            primary += 1
        elif species.native_class == NativeClass.SECONDARY:
            secondary += 1
    return primary, secondary


def calculate_x1(sample, reference, primary_weight=None, secondary_weight=None):
    """Weighted share of expected native species found in the sample.

    Parameters
    ----------
    sample : NiseciSample
    reference : sequence of NiseciSpecies
        The expected-community reference list.
    primary_weight, secondary_weight : float, optional
        Default to config.X1_WEIGHT_PRIMARY (1.2) and
        config.X1_WEIGHT_SECONDARY (0.8).

    Returns
    -------
    float
        Rounded at 3 decimals.  A reference list without expected native
        species gives nan (nothing sampled) or inf.
    """
    if primary_weight is None:
        primary_weight = config.X1_WEIGHT_PRIMARY
    if secondary_weight is None:
        secondary_weight = config.X1_WEIGHT_SECONDARY

    n_i, n_a = _count_by_native_class(r.species for r in sample)
    m_i, m_a = _count_by_native_class(reference)

    x1 = divide(primary_weight * n_i + secondary_weight * n_a,
                primary_weight * m_i + secondary_weight * m_a)
    return round_half_away(x1)
