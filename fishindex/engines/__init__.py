"""Index engines: NISECI sub-indices and aggregator, HFBI metrics and aggregator."""

from fishindex.engines.niseci import (
    calculate_niseci,
    classify_niseci,
    combine_niseci,
    evaluate_niseci,
)
from fishindex.engines.niseci_x1 import calculate_x1
from fishindex.engines.niseci_x2 import SpeciesSelection, X2Metrics, calculate_x2
from fishindex.engines.niseci_x3 import X3Metrics, calculate_x3
from fishindex.engines.hfbi import (
    calculate_hfbi,
    calculate_mmi,
    classify_hfbi,
    evaluate_hfbi,
    hfbi_from_mmi,
)
from fishindex.engines.hfbi_metrics import (
    calc_bbent,
    calc_bn,
    calc_dbent,
    calc_ddom,
    calc_dhzp,
    calc_dmig,
)

__all__ = [
    "calculate_niseci",
    "classify_niseci",
    "combine_niseci",
    "evaluate_niseci",
    "calculate_x1",
    "SpeciesSelection",
    "X2Metrics",
    "calculate_x2",
    "X3Metrics",
    "calculate_x3",
    "calculate_hfbi",
    "classify_hfbi",
    "calculate_mmi",
    "evaluate_hfbi",
    "hfbi_from_mmi",
    "calc_bbent",
    "calc_bn",
    "calc_dbent",
    "calc_ddom",
    "calc_dhzp",
    "calc_dmig",
]
