"""
NISECI aggregator.

Runs the sub-indices in order (x1, x2 on expected natives, x2 on
unexpected natives, x2 on aliens, x3) and combines them:

    base   = 0.1·√x1 + 0.1·√x2 + 0.8·x1·x2
    NISECI = base − 0.1·(1 − x3)·base

rounded at 3 decimals.  When x2 is undefined (no expected native species
sampled) NISECI is None, but every other intermediate is still returned.
The first failing sub-index aborts the computation; its messages are
prefixed with the stage that failed.
"""

from fishindex.domain.niseci import NiseciIntermediates, NiseciResult
from fishindex.engines.niseci_x1 import calculate_x1
from fishindex.engines.niseci_x2 import SpeciesSelection, calculate_x2
from fishindex.engines.niseci_x3 import calculate_x3
from fishindex.exceptions import IndexComputationError
from fishindex.formulas.classification import classify_niseci_status, niseci_rqe
from fishindex.formulas.numeric import round_half_away, sqrt
from fishindex.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)

_X2_STAGES = (
    (SpeciesSelection.EXPECTED, "Error during x2 computation"),
    (SpeciesSelection.UNEXPECTED, "Error during x2 computation for unexpected species"),
    (SpeciesSelection.ALIEN, "Error during x2 computation for alien species"),
)


def combine_niseci(x1, x2, x3):
    """Combine the three sub-indices into NISECI.

    Returns None when ``x2`` is None.
    """
    if x2 is None:
        return None
    base = 0.1 * sqrt(x1) + 0.1 * sqrt(x2) + 0.8 * x1 * x2
    return round_half_away(base - 0.1 * (1.0 - x3) * base)


def _check_non_negative(x1, x2):
    errors = []
    if x1 < 0:
        errors.append(f"x1 is negative: {x1}")
    if x2 is not None and x2 < 0:
        errors.append(f"x2 is negative: {x2}")
    if errors:
        raise IndexComputationError(errors)


def calculate_niseci(sample, reference, station):
    """Compute NISECI and its intermediates.

    Parameters
    ----------
    sample : NiseciSample
    reference : sequence of NiseciSpecies
    station : NiseciStation

    Returns
    -------
    tuple[float | None, NiseciIntermediates]

    Raises
    ------
    IndexComputationError
        From the first sub-index that failed, or when x1 or x2 is
        negative.
    """
    x1 = calculate_x1(sample, reference)

    x2_runs = []
    for selection, stage in _X2_STAGES:
        try:
            x2_runs.append(calculate_x2(sample, station, selection))
        except IndexComputationError as exc:
            raise exc.prefixed(stage) from exc

    try:
        x3 = calculate_x3(sample)
    except IndexComputationError as exc:
        raise exc.prefixed("Error during x3 computation") from exc

    expected = x2_runs[0]
    _check_non_negative(x1, expected.value)

    species = {}
    for run in x2_runs:
        species.update(run.species)
    for species_id, entry in x3.species.items():
        species.setdefault(species_id, entry)

    intermediates = NiseciIntermediates(
        x1=x1,
        x2=expected.value,
        x3=x3.value,
        x2_a=expected.structure_sum,
        x2_b=expected.density_sum,
        x3_a=x3.a,
        x3_b=x3.b,
        species=species,
    )

    niseci = combine_niseci(x1, expected.value, x3.value)
    if niseci is None:
        log.debug("x2 undefined for station %s, NISECI undefined",
                  station.station_code)
    return niseci, intermediates


def classify_niseci(value, intermediates, area):
    """Attach the RQE and the ecological status to a computed NISECI.

    An undefined NISECI (None) yields no RQE and no status.

    Returns
    -------
    NiseciResult
    """
    rqe = niseci_rqe(value)
    return NiseciResult(value, rqe, classify_niseci_status(rqe, area), intermediates)


def evaluate_niseci(sample, reference, station):
    """Compute NISECI together with its RQE and ecological status.

    Returns
    -------
    NiseciResult
    """
    value, intermediates = calculate_niseci(sample, reference, station)
    return classify_niseci(value, intermediates, station.area)
