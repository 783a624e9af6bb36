"""
HFBI aggregator.

Each metric is divided by its reference value for the station's lagoon
type, season and habitat (its RQE).  The weighted mean of the six RQEs is
the multimetric index

    MMI  = Σ w_m · RQE_m / Σ w_m
    HFBI = (MMI − 0.167) / 0.150

both rounded at 3 decimals.  A station whose reference condition is
missing cannot be evaluated.
"""

from fishindex import config
from fishindex.domain.hfbi import HfbiIntermediates, HfbiResult
from fishindex.engines.hfbi_metrics import (
    calc_bbent,
    calc_bn,
    calc_dbent,
    calc_ddom,
    calc_dhzp,
    calc_dmig,
)
from fishindex.exceptions import IndexComputationError
from fishindex.formulas.classification import classify_hfbi_status
from fishindex.formulas.hfbi_reference import get_reference_condition
from fishindex.formulas.numeric import divide, round_half_away
from fishindex.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)


def compute_metrics(sample, station):
    """Return the six HFBI metrics keyed by name."""
    return {
        "bbent": calc_bbent(sample, station),
        "bn": calc_bn(sample),
        "dbent": calc_dbent(sample, station),
        "ddom": calc_ddom(sample, station),
        "dhzp": calc_dhzp(sample, station),
        "dmig": calc_dmig(sample, station),
    }


def multimetric_index(metrics, reference, weights=None):
    """Weighted mean of the metric RQEs.

    Parameters
    ----------
    metrics : dict[str, float]
    reference : ReferenceCondition
    weights : dict[str, float], optional
        Defaults to config.HFBI_METRIC_WEIGHTS.

    Returns
    -------
    tuple[float, dict[str, float]]
        The rounded MMI and the unrounded RQE of each metric.
    """
    if weights is None:
        weights = config.HFBI_METRIC_WEIGHTS

    rqe = {name: divide(metrics[name], getattr(reference, name)) for name in weights}
    weighted = sum(weights[name] * rqe[name] for name in weights)
    mmi = round_half_away(divide(weighted, sum(weights.values())))
    return mmi, rqe


def hfbi_from_mmi(mmi, offset=None, scale=None):
    """Rescale an MMI into HFBI, rounded at 3 decimals."""
    if offset is None:
        offset = config.HFBI_MMI_OFFSET
    if scale is None:
        scale = config.HFBI_MMI_SCALE
    return round_half_away(divide(mmi - offset, scale))


def calculate_mmi(sample, station):
    """Compute the six metrics and the MMI of a lagoon station.

    Returns
    -------
    HfbiIntermediates

    Raises
    ------
    IndexComputationError
        If no reference condition exists for the station.
    """
    reference = get_reference_condition(station.lagoon_type, station.season,
                                        station.habitat)
    if reference is None:
        raise IndexComputationError(
            "reference conditions not found for "
            f"{station.lagoon_type.value} / {station.season.value} / "
            f"{station.habitat.value}"
        )

    metrics = compute_metrics(sample, station)
    mmi, rqe = multimetric_index(metrics, reference)
    log.debug("Station %s metrics=%s mmi=%s", station.station_code, metrics, mmi)
    return HfbiIntermediates(mmi=mmi, rqe=rqe, **metrics)


def calculate_hfbi(sample, station):
    """Compute HFBI and its intermediates.

    Returns
    -------
    tuple[float, HfbiIntermediates]
    """
    intermediates = calculate_mmi(sample, station)
    return hfbi_from_mmi(intermediates.mmi), intermediates


def classify_hfbi(value, intermediates):
    """Attach the ecological status to a computed HFBI."""
    return HfbiResult(value, classify_hfbi_status(value), intermediates)


def evaluate_hfbi(sample, station):
    """Compute HFBI together with its ecological status."""
    value, intermediates = calculate_hfbi(sample, station)
    return classify_hfbi(value, intermediates)
