"""
Pure computational building blocks shared by the index engines.

config.py keeps the regulatory constants; this package holds the
arithmetic: rounding, the removal-method abundance estimator, the
population-structure classification, the HFBI reference conditions and
the ecological status classifiers.
"""

from fishindex.formulas.numeric import (
    divide,
    is_close,
    ln,
    log10,
    round_half_away,
    sqrt,
)
from fishindex.formulas.regression import (
    estimate_from_regression,
    estimate_population,
    estimate_two_pass,
    fit_removal_line,
)
from fishindex.formulas.structure import (
    StructureClassification,
    classify_structure,
    count_length_classes,
    criterion_a,
    criterion_b,
    structure_score,
)
from fishindex.formulas.hfbi_reference import (
    REFERENCE_CONDITIONS,
    ReferenceCondition,
    get_reference_condition,
)
from fishindex.formulas.classification import (
    classify_hfbi_status,
    classify_niseci_status,
    niseci_rqe,
)
