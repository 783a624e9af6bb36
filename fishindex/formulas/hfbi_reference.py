"""
HFBI reference conditions.

Each (lagoon type, season, habitat) combination has a reference value for
every HFBI metric; a station's metric divided by its reference value is
the metric's ecological quality ratio.  Lagoon types differ only in bn
and bbent; season and habitat determine the remaining four values.

The table is a process-wide constant and is exposed read-only.
"""

from collections import namedtuple
from types import MappingProxyType

from fishindex.domain.hfbi import Habitat, LagoonType, Season

ReferenceCondition = namedtuple(
    "ReferenceCondition", ["bn", "ddom", "dmig", "bbent", "dbent", "dhzp"]
)

_SP, _AU = Season.SPRING, Season.AUTUMN
_VEG, _NVEG = Habitat.VEGETATED, Habitat.NON_VEGETATED

REFERENCE_CONDITIONS = MappingProxyType({
    # ── M-AT-1 ──
    (LagoonType.M_AT_1, _SP, _NVEG): ReferenceCondition(2.232, 2.052, 3.212, 6.537, 3.768, 2.856),
    (LagoonType.M_AT_1, _AU, _NVEG): ReferenceCondition(1.932, 2.268, 2.014, 6.867, 2.944, 2.570),
    (LagoonType.M_AT_1, _SP, _VEG): ReferenceCondition(2.232, 1.784, 3.212, 7.242, 3.153, 2.369),
    (LagoonType.M_AT_1, _AU, _VEG): ReferenceCondition(1.932, 2.001, 2.014, 7.572, 2.329, 2.083),
    # ── M-AT-2 ──
    (LagoonType.M_AT_2, _SP, _NVEG): ReferenceCondition(2.539, 2.052, 3.212, 5.221, 3.768, 2.856),
    (LagoonType.M_AT_2, _AU, _NVEG): ReferenceCondition(2.238, 2.268, 2.014, 5.551, 2.944, 2.570),
    (LagoonType.M_AT_2, _SP, _VEG): ReferenceCondition(2.539, 1.784, 3.212, 5.925, 3.153, 2.369),
    (LagoonType.M_AT_2, _AU, _VEG): ReferenceCondition(2.238, 2.001, 2.014, 6.255, 2.329, 2.083),
    # ── M-AT-3 ──
    (LagoonType.M_AT_3, _SP, _NVEG): ReferenceCondition(2.217, 2.052, 3.212, 4.561, 3.768, 2.856),
    (LagoonType.M_AT_3, _AU, _NVEG): ReferenceCondition(1.917, 2.268, 2.014, 4.891, 2.944, 2.570),
    (LagoonType.M_AT_3, _SP, _VEG): ReferenceCondition(2.217, 1.784, 3.212, 5.265, 3.153, 2.369),
    (LagoonType.M_AT_3, _AU, _VEG): ReferenceCondition(1.917, 2.001, 2.014, 5.595, 2.329, 2.083),
})


def get_reference_condition(lagoon_type, season, habitat, table=None):
    """Return the reference condition for a station, or None if absent."""
    if table is None:
        table = REFERENCE_CONDITIONS
    return table.get((lagoon_type, season, habitat))
