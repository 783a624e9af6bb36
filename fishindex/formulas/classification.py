"""
Ecological status classification for NISECI and HFBI.

All functions are pure (no I/O, no side effects).
"""

from fishindex import config
from fishindex.domain.hfbi import HfbiStatus
from fishindex.domain.niseci import Area, NiseciStatus
from fishindex.formulas.numeric import divide, log10, round_half_away


def niseci_rqe(niseci):
    """Convert a NISECI value into its ecological quality ratio.

    RQE = (log10(NISECI) + 2/sqrt(pi)) / 1.0603, rounded half away from
    zero at 2 decimals.

    Parameters
    ----------
    niseci : float or None
        None (index undefined) propagates.

    Returns
    -------
    float or None
        A zero NISECI gives -inf.
    """
    if niseci is None:
        return None
    rqe = divide(log10(niseci) + config.RQE_NISECI_ADDEND,
                 config.RQE_NISECI_DIVISOR)
    return round_half_away(rqe, config.RQE_DECIMALS)


def classify_niseci_status(rqe, area, high_threshold=None, good_threshold=None,
                           moderate_threshold=None, poor_threshold=None):
    """Classify a NISECI RQE into an ecological status class.

    Left-inclusive boundaries:
        rqe >= 0.8            → HIGH
        rqe >= good threshold → GOOD (0.52 alpine, 0.6 Mediterranean)
        rqe >= 0.4            → MODERATE
        rqe >= 0.2            → POOR
        otherwise             → BAD

    Parameters
    ----------
    rqe : float or None
    area : Area
        Selects the default "good" threshold.
    high_threshold, good_threshold, moderate_threshold, poor_threshold : float, optional
        Override the config.NISECI_STATUS_* defaults.

    Returns
    -------
    NiseciStatus or None
        None when the RQE is None (index undefined).
    """
    if high_threshold is None:
        high_threshold = config.NISECI_STATUS_HIGH
    if good_threshold is None:
        good_threshold = (
            config.NISECI_STATUS_GOOD_ALPINE
            if area == Area.ALPINE
            else config.NISECI_STATUS_GOOD_MEDITERRANEAN
        )
    if moderate_threshold is None:
        moderate_threshold = config.NISECI_STATUS_MODERATE
    if poor_threshold is None:
        poor_threshold = config.NISECI_STATUS_POOR

    if rqe is None:
        return None
    if rqe >= high_threshold:
        return NiseciStatus.HIGH
    if rqe >= good_threshold:
        return NiseciStatus.GOOD
    if rqe >= moderate_threshold:
        return NiseciStatus.MODERATE
    if rqe >= poor_threshold:
        return NiseciStatus.POOR
    return NiseciStatus.BAD


def classify_hfbi_status(hfbi):
    """Classify a raw HFBI value.

        hfbi >= 0.94 → EXCELLENT
        hfbi >= 0.55 → GOOD
        hfbi >= 0.33 → SUFFICIENT
        hfbi >= 0.11 → POOR
        otherwise    → BAD (including NaN)

    Returns None only when ``hfbi`` is None.
    """
    if hfbi is None:
        return None
    if hfbi >= config.HFBI_STATUS_EXCELLENT:
        return HfbiStatus.EXCELLENT
    if hfbi >= config.HFBI_STATUS_GOOD:
        return HfbiStatus.GOOD
    if hfbi >= config.HFBI_STATUS_SUFFICIENT:
        return HfbiStatus.SUFFICIENT
    if hfbi >= config.HFBI_STATUS_POOR:
        return HfbiStatus.POOR
    return HfbiStatus.BAD
