"""
Population-structure classification shared by NISECI x2 and x3.

Individuals of a species are bucketed into 5 length classes (age-class
proxies).  Two ordinal criteria summarise the buckets:

    Criterion A: how many of the 5 classes are populated
        >= 4 → 1, 3 → 2, otherwise → 3
    Criterion B: adult/juvenile balance r = (cl4 + cl5) / (cl2 + cl3)
        no juveniles (cl2 + cl3 = 0) → 3
        r < t1 → 3, r <= t2 → 2, r <= t3 → 1, r <= t4 → 2, otherwise → 3

and config.STRUCTURE_SCORE_TABLE maps the (A, B) pair to a score of
1.0 (structured), 0.5 (moderately structured) or 0.0 (destructured).

All functions are pure.
"""

from collections import namedtuple

from fishindex import config
from fishindex.exceptions import IndexComputationError
from fishindex.formulas.numeric import divide

N_LENGTH_CLASSES = 5

StructureClassification = namedtuple(
    "StructureClassification",
    ["criterion_a", "criterion_b", "ratio", "score"],
)


def length_class(length_mm, thresholds):
    """Return the 1-based length class of an individual.

    Boundaries are strict: a length equal to threshold k falls in class
    k + 1.  Class 5 catches everything at or above the 4th threshold.
    """
    for i, threshold in enumerate(thresholds):
        if length_mm < threshold:
            return i + 1
    return len(thresholds) + 1


def count_length_classes(lengths, thresholds):
    """Count individuals per length class.

    Returns
    -------
    tuple[int, int, int, int, int]
    """
    counts = [0] * N_LENGTH_CLASSES
    for length in lengths:
        counts[length_class(length, thresholds) - 1] += 1
    return tuple(counts)


def criterion_a(class_counts):
    """Completeness of the length-class distribution (1 best, 3 worst)."""
    populated = sum(1 for n in class_counts if n > 0)
    if populated >= config.CRITERION_A_FULL_CLASSES:
        return 1
    if populated == config.CRITERION_A_PARTIAL_CLASSES:
        return 2
    return 3


def criterion_b(class_counts, ratio_thresholds):
    """Adult/juvenile balance (1 best, 3 worst).

    Returns
    -------
    tuple[int, float | None]
        The criterion and the adult/juvenile ratio (None when there are
        no juveniles).
    """
    _, cl2, cl3, cl4, cl5 = class_counts
    juveniles = cl2 + cl3
    if juveniles == 0:
        return 3, None

    ratio = divide(cl4 + cl5, juveniles)
    t1, t2, t3, t4 = ratio_thresholds
    if ratio < t1:
        return 3, ratio
    if ratio <= t2:
        return 2, ratio
    if ratio <= t3:
        return 1, ratio
    if ratio <= t4:
        return 2, ratio
    return 3, ratio


def structure_score(crit_a, crit_b, score_table=None):
    """Look up the population-structure score of an (A, B) pair.

    Raises
    ------
    IndexComputationError
        If the pair is not in the table.
    """
    if score_table is None:
        score_table = config.STRUCTURE_SCORE_TABLE
    try:
        return score_table[(crit_a, crit_b)]
    except KeyError:
        raise IndexComputationError(
            f"criterion A or B outside 1/2/3: criterion_a={crit_a}, "
            f"criterion_b={crit_b}"
        ) from None


def classify_structure(class_counts, ratio_thresholds):
    """Classify the population structure of one species.

    Parameters
    ----------
    class_counts : tuple of 5 int
        Individuals per length class.
    ratio_thresholds : tuple of 4 float
        The species' increasing adult/juvenile thresholds.

    Returns
    -------
    StructureClassification
        ``(criterion_a, criterion_b, ratio, score)``.
    """
    crit_a = criterion_a(class_counts)
    crit_b, ratio = criterion_b(class_counts, ratio_thresholds)
    return StructureClassification(crit_a, crit_b, ratio,
                                   structure_score(crit_a, crit_b))
