#!/usr/bin/env python3
"""
Index runner with validation gates.

Computes NISECI or HFBI for one station as a chain of steps:

    read_inputs → validate_schemas → build_records → compute_index
    → classify_status

Each step reports a StepResult; the first failing step stops the chain.
The full IndexRunResult (value, RQE, status, intermediates and step
provenance) is saved as JSON.

Usage:
    # NISECI (river) station
    python3 -m fishindex.pipeline_runner niseci \\
        --reference riferimento.csv --sample campionamento.csv \\
        --station anagrafica.csv --delimiter ';'

    # HFBI (lagoon) station, aborting on schema violations
    python3 -m fishindex.pipeline_runner hfbi \\
        --sample campionamento.csv --station anagrafica.csv --strict-validation
"""

import argparse
import json
import os
import sys
import time

from fishindex import config
from fishindex.engines.hfbi import calculate_hfbi, classify_hfbi
from fishindex.engines.niseci import calculate_niseci, classify_niseci
from fishindex.ingest import (
    build_hfbi_sample,
    build_hfbi_station,
    build_niseci_sample,
    build_niseci_station,
    build_reference,
    read_input_csv,
)
from fishindex.logging_config import get_pipeline_logger, set_run_id, setup_logging
from fishindex.pipeline_types import IndexRunResult
from fishindex.schemas import (
    HfbiSampleSchema,
    HfbiStationSchema,
    NiseciReferenceSchema,
    NiseciSampleSchema,
    NiseciStationSchema,
    validate_schema,
)
from fishindex.step_runner import run_step

log = get_pipeline_logger(__name__)


# ── Step bodies ─────────────────────────────────────────────────────────

def validate_frames(checks, strict=False):
    """Validate several frames, returning all warnings.

    Parameters
    ----------
    checks : list of (DataFrame, DataFrameSchema, str)
    strict : bool
        Raise on the first frame that fails.
    """
    warnings_list = []
    for df, schema, name in checks:
        warnings_list.extend(validate_schema(df, schema, name, strict=strict))
    for w in warnings_list:
        log.warning(w)
    return warnings_list


def _build_niseci_records(reference_df, sample_df, station_df):
    reference = build_reference(reference_df)
    return reference, build_niseci_sample(sample_df, reference), build_niseci_station(station_df)


def _build_hfbi_records(sample_df, station_df):
    return build_hfbi_sample(sample_df), build_hfbi_station(station_df)


def _enum_value(member):
    return member.value if member is not None else None


def _finish(result, start_time):
    result.total_time_seconds = time.time() - start_time
    if result.failed_steps:
        log.warning("%s run stopped at %s", result.index_name,
                    result.failed_steps[0].step_name)
    return result


def _validation_step(result, checks, strict, log_context):
    step, warnings_list = run_step(
        "validate_schemas", validate_frames, checks, strict,
        input_summary={name: len(df) if df is not None else 0
                       for df, _, name in checks},
        output_summary_fn=lambda w: {"schema_warnings": len(w)},
        log_context=log_context,
    )
    if step.ok:
        step.warnings = warnings_list
    result.step_results.append(step)
    return step.ok


# ── Pipelines ───────────────────────────────────────────────────────────

def run_niseci_pipeline(reference_df, sample_df, station_df, strict_validation=False):
    """Compute NISECI for one station.

    Parameters
    ----------
    reference_df, sample_df, station_df : pd.DataFrame
        Expected-community reference, captured individuals and the
        one-row station description.
    strict_validation : bool
        Abort on schema violations instead of logging them.

    Returns
    -------
    IndexRunResult
        ``value`` None with all steps successful means NISECI is
        undefined for this sample.
    """
    result = IndexRunResult(index_name="NISECI")
    start_time = time.time()
    log_context = {"index_name": result.index_name}

    checks = [
        (reference_df, NiseciReferenceSchema, "niseci_reference"),
        (sample_df, NiseciSampleSchema, "niseci_sample"),
        (station_df, NiseciStationSchema, "niseci_station"),
    ]
    if not _validation_step(result, checks, strict_validation, log_context):
        return _finish(result, start_time)

    step, built = run_step(
        "build_records", _build_niseci_records, reference_df, sample_df, station_df,
        output_summary_fn=lambda b: {"reference_species": len(b[0]),
                                     "individuals": len(b[1])},
        log_context=log_context,
    )
    result.step_results.append(step)
    if not step.ok:
        return _finish(result, start_time)
    reference, sample, station = built
    result.station = station.to_dict()
    log_context["station_code"] = station.station_code

    step, computed = run_step(
        "compute_index", calculate_niseci, sample, reference, station,
        output_summary_fn=lambda c: {"niseci": c[0], "x1": c[1].x1,
                                     "x2": c[1].x2, "x3": c[1].x3},
        log_context=log_context,
    )
    result.step_results.append(step)
    if not step.ok:
        return _finish(result, start_time)
    result.value, intermediates = computed
    result.intermediates = intermediates.to_dict()

    step, outcome = run_step(
        "classify_status", classify_niseci, result.value, intermediates, station.area,
        output_summary_fn=lambda o: {"rqe": o.rqe, "status": _enum_value(o.status)},
        log_context=log_context,
    )
    result.step_results.append(step)
    if step.ok:
        result.rqe = outcome.rqe
        result.status = _enum_value(outcome.status)
    return _finish(result, start_time)


def run_hfbi_pipeline(sample_df, station_df, strict_validation=False):
    """Compute HFBI for one lagoon station.

    Returns
    -------
    IndexRunResult
        ``rqe`` stays None: HFBI reports one RQE per metric in the
        intermediates instead.
    """
    result = IndexRunResult(index_name="HFBI")
    start_time = time.time()
    log_context = {"index_name": result.index_name}

    checks = [
        (sample_df, HfbiSampleSchema, "hfbi_sample"),
        (station_df, HfbiStationSchema, "hfbi_station"),
    ]
    if not _validation_step(result, checks, strict_validation, log_context):
        return _finish(result, start_time)

    step, built = run_step(
        "build_records", _build_hfbi_records, sample_df, station_df,
        output_summary_fn=lambda b: {"catches": len(b[0])},
        log_context=log_context,
    )
    result.step_results.append(step)
    if not step.ok:
        return _finish(result, start_time)
    sample, station = built
    result.station = station.to_dict()
    log_context["station_code"] = station.station_code

    step, computed = run_step(
        "compute_index", calculate_hfbi, sample, station,
        output_summary_fn=lambda c: {"hfbi": c[0], "mmi": c[1].mmi},
        log_context=log_context,
    )
    result.step_results.append(step)
    if not step.ok:
        return _finish(result, start_time)
    result.value, intermediates = computed
    result.intermediates = intermediates.to_dict()

    step, outcome = run_step(
        "classify_status", classify_hfbi, result.value, intermediates,
        output_summary_fn=lambda o: {"status": _enum_value(o.status)},
        log_context=log_context,
    )
    result.step_results.append(step)
    if step.ok:
        result.status = _enum_value(outcome.status)
    return _finish(result, start_time)


# ── Main entry point ────────────────────────────────────────────────────

def save_index_result(result, output_dir):
    """Save the IndexRunResult as JSON for provenance.

    A zero station surface or an empty catch gives inf/NaN values, which
    are written as the non-standard ``Infinity``/``NaN`` tokens that
    Python's json module (and load_index_result) reads back.
    """
    os.makedirs(output_dir, exist_ok=True)
    result_path = os.path.join(output_dir, "index_run.json")
    with open(result_path, "w") as f:
        json.dump(result.to_dict(), f, indent=2, default=str, allow_nan=True)
    log.info("Index result saved: %s", result_path)
    return result_path


def load_index_result(path):
    """Read an ``index_run.json`` written by save_index_result()."""
    with open(path) as f:
        return IndexRunResult.from_dict(json.load(f))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Compute the NISECI or HFBI fish-community index of a station"
    )
    parser.add_argument(
        "index",
        choices=["niseci", "hfbi"],
        help="Which index to compute",
    )
    parser.add_argument(
        "--reference",
        default=None,
        help="Expected-community reference CSV (NISECI only)",
    )
    parser.add_argument(
        "--sample",
        required=True,
        help="Sample CSV",
    )
    parser.add_argument(
        "--station",
        required=True,
        help="Station description CSV (one row)",
    )
    parser.add_argument(
        "--delimiter",
        default=config.DEFAULT_CSV_DELIMITER,
        help="Field delimiter of the input CSVs (default: ',')",
    )
    parser.add_argument(
        "--output-dir",
        default=config.DEFAULT_OUTPUT_DIR,
        dest="output_dir",
        help="Output directory",
    )
    parser.add_argument(
        "--strict-validation",
        action="store_true",
        default=False,
        dest="strict_validation",
        help="Abort on schema validation failures (default: warn only)",
    )
    args = parser.parse_args(argv)
    if args.index == "niseci" and not args.reference:
        parser.error("--reference is required for niseci")
    return args


def _read_inputs(args):
    paths = [args.sample, args.station]
    if args.index == "niseci":
        paths.insert(0, args.reference)
    return [read_input_csv(p, args.delimiter) for p in paths]


def main(argv=None):
    args = parse_args(argv)

    run_id = set_run_id()
    setup_logging(run_dir=args.output_dir)
    log.info("Index runner: %s (run_id=%s)", args.index, run_id)

    read_step, frames = run_step(
        "read_inputs", _read_inputs, args,
        input_summary={"delimiter": args.delimiter},
        output_summary_fn=lambda fs: {"rows": [len(f) for f in fs]},
    )
    if not read_step.ok:
        result = IndexRunResult(index_name=args.index.upper())
    elif args.index == "niseci":
        result = run_niseci_pipeline(*frames, strict_validation=args.strict_validation)
    else:
        result = run_hfbi_pipeline(*frames, strict_validation=args.strict_validation)
    result.step_results.insert(0, read_step)

    save_index_result(result, args.output_dir)

    if result.failed_steps:
        for step in result.failed_steps:
            for problem in step.warnings:
                print(f"{step.step_name}: {problem}", file=sys.stderr)
        return 1

    print(f"{result.index_name} = {result.value} (status: {result.status})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
