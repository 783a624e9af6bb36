"""
Generic step executor.

Each step of an index run provides its work function and metadata;
``run_step()`` times it, logs a structured summary and turns exceptions
into an error StepResult so that the caller can stop the chain cleanly.
"""

import traceback
from typing import Callable, TypeVar

import pandas as pd
import pandera.errors as pa_errors

from fishindex.exceptions import IndexComputationError, IngestionError
from fishindex.logging_config import StepTimer, get_pipeline_logger, log_step_summary
from fishindex.pipeline_types import StepResult, StepStatus

T = TypeVar("T")

log = get_pipeline_logger(__name__)

_DEFAULT_EXPECTED = (
    IndexComputationError,
    IngestionError,
    pa_errors.SchemaErrors,
    FileNotFoundError,
    ValueError,
    KeyError,
    pd.errors.EmptyDataError,
)


def _problem_list(exc):
    """Every message carried by ``exc``, or its string form."""
    errors = getattr(exc, "errors", None)
    if isinstance(errors, list):
        return [str(e) for e in errors]
    return [str(exc)]


def run_step(
    step_name: str,
    fn: Callable[..., T],
    *args,
    input_summary: dict | None = None,
    output_summary_fn: Callable[[T], dict] | None = None,
    log_context: dict | None = None,
    expected_exceptions: tuple[type[Exception], ...] = _DEFAULT_EXPECTED,
    **kwargs,
) -> tuple[StepResult, T | None]:
    """Execute a step with standardised error handling and timing.

    Parameters
    ----------
    step_name : str
        Name stored in the StepResult.
    fn : Callable
        The work function.  Called as ``fn(*args, **kwargs)``.
    input_summary : dict, optional
        Metadata about inputs.
    output_summary_fn : callable, optional
        Receives *fn*'s return value and produces an output-summary dict.
        Skipped when *fn* raises or returns None.
    log_context : dict, optional
        ``index_name`` and ``station_code`` of the run, added to the
        structured step summary.
    expected_exceptions : tuple
        Exception types reported as known failures; their messages are
        stored in ``StepResult.warnings``.

    Returns
    -------
    tuple[StepResult, T | None]
    """
    result_data = None
    error_tb = None
    problems = []

    with StepTimer() as timer:
        try:
            result_data = fn(*args, **kwargs)
        except expected_exceptions as exc:
            error_tb = traceback.format_exc()
            problems = _problem_list(exc)
            log.error("%s failed: %s", step_name, exc)
        except Exception as exc:
            error_tb = traceback.format_exc()
            problems = [f"{type(exc).__name__}: {exc}"]
            log.error("%s failed unexpectedly", step_name, exc_info=True)

    if error_tb:
        log_step_summary(
            log, step_name, StepStatus.ERROR.value,
            input_summary=input_summary or {},
            timing_seconds=timer.elapsed,
            warnings_list=problems,
            **(log_context or {}),
        )
        return StepResult(
            step_name=step_name,
            status=StepStatus.ERROR.value,
            input_summary=input_summary or {},
            error=error_tb,
            warnings=problems,
            timing_seconds=timer.elapsed,
        ), None

    out_summary = {}
    if output_summary_fn is not None and result_data is not None:
        out_summary = output_summary_fn(result_data)

    log_step_summary(
        log, step_name, StepStatus.SUCCESS.value,
        input_summary=input_summary or {},
        output_summary=out_summary,
        timing_seconds=timer.elapsed,
        **(log_context or {}),
    )
    return StepResult(
        step_name=step_name,
        status=StepStatus.SUCCESS.value,
        input_summary=input_summary or {},
        output_summary=out_summary,
        timing_seconds=timer.elapsed,
    ), result_data
