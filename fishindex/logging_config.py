"""
Logging setup shared by the index engines, ingestion and CLI.

Console output is human-readable; file output is JSON Lines so that a
station computation can be audited after the fact.  Modules obtain their
logger through get_pipeline_logger() and never call logging.basicConfig().

Usage:
    from fishindex.logging_config import get_pipeline_logger
    log = get_pipeline_logger(__name__)
"""

import json
import logging
import os
import time
import uuid
from logging.handlers import RotatingFileHandler


# Identifier of the current run, attached to every record by RunIdFilter.
_run_id = None

# Structured fields copied from ``extra=`` into the JSON entry.
_STRUCTURED_FIELDS = (
    "step_name",
    "index_name",
    "station_code",
    "input_summary",
    "output_summary",
    "timing_seconds",
    "warnings",
)


def get_run_id():
    """Return the current run_id, generating one if needed."""
    global _run_id
    if _run_id is None:
        _run_id = uuid.uuid4().hex[:8]
    return _run_id


def set_run_id(run_id=None):
    """Set (or regenerate) the run_id."""
    global _run_id
    _run_id = run_id or uuid.uuid4().hex[:8]
    return _run_id


class RunIdFilter(logging.Filter):
    """Inject run_id into every log record."""

    def filter(self, record):
        record.run_id = get_run_id()
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON Lines."""

    def format(self, record):
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S.") +
                         f"{int(record.msecs):03d}",
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "run_id": getattr(record, "run_id", None),
            "message": record.getMessage(),
        }
        for key in _STRUCTURED_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Short human-readable console format."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


_configured = False
_run_dir_handler = None


def setup_logging(run_dir=None, console_level=None, file_level=logging.DEBUG,
                  log_dir=None):
    """Configure the root logger with console and file handlers.

    Safe to call more than once: handlers are only installed the first
    time, and the per-run handler only once per process.

    Parameters
    ----------
    run_dir : str, optional
        Directory for a per-run ``index_run.jsonl`` log.
    console_level : int, optional
        Console level. Default: FISHINDEX_LOG_LEVEL env var, else WARNING.
    file_level : int
        Level of the file handlers. Default: DEBUG.
    log_dir : str, optional
        Directory of the rotating ``fishindex.log``. Default: FISHINDEX_LOG_DIR
        env var, else ``./logs``.
    """
    global _configured, _run_dir_handler

    if console_level is None:
        env_level = os.environ.get("FISHINDEX_LOG_LEVEL", "WARNING").upper()
        console_level = getattr(logging, env_level, logging.WARNING)

    root = logging.getLogger()

    if not _configured:
        root.setLevel(logging.DEBUG)
        root.addFilter(RunIdFilter())

        console = logging.StreamHandler()
        console.setLevel(console_level)
        console.setFormatter(ConsoleFormatter())
        console.addFilter(RunIdFilter())
        root.addHandler(console)

        if log_dir is None:
            log_dir = os.environ.get(
                "FISHINDEX_LOG_DIR", os.path.join(os.getcwd(), "logs")
            )
        os.makedirs(log_dir, exist_ok=True)
        rotating = RotatingFileHandler(
            os.path.join(log_dir, "fishindex.log"),
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
        )
        rotating.setLevel(file_level)
        rotating.setFormatter(JsonFormatter())
        rotating.addFilter(RunIdFilter())
        root.addHandler(rotating)

        _configured = True

    if run_dir and _run_dir_handler is None:
        os.makedirs(run_dir, exist_ok=True)
        fh = logging.FileHandler(os.path.join(run_dir, "index_run.jsonl"))
        fh.setLevel(file_level)
        fh.setFormatter(JsonFormatter())
        fh.addFilter(RunIdFilter())
        root.addHandler(fh)
        _run_dir_handler = fh


def reset_logging():
    """Remove all handlers and filters from the root logger.

    Used by the test-suite so every test starts from a clean state.
    """
    global _configured, _run_dir_handler, _run_id

    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    for f in root.filters[:]:
        root.removeFilter(f)

    _configured = False
    _run_dir_handler = None
    _run_id = None


def get_pipeline_logger(name, run_dir=None):
    """Return a named logger, configuring logging with defaults if needed.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__``).
    run_dir : str, optional
        Passed to setup_logging() if not yet configured.

    Returns
    -------
    logging.Logger
    """
    if not _configured:
        setup_logging(run_dir=run_dir)
    return logging.getLogger(name)


def log_step_summary(
    logger,
    step_name,
    status="success",
    input_summary=None,
    output_summary=None,
    timing_seconds=None,
    warnings_list=None,
    index_name=None,
    station_code=None,
):
    """Log one structured line summarising a step.

    Successful steps are logged at INFO, failed steps at ERROR.  The
    index and station, when known, are carried into the JSON entry so
    that the lines of one station can be filtered out of a shared log.

    Parameters
    ----------
    logger : logging.Logger
    step_name : str
    status : str
        "success" or "error".
    input_summary : dict, optional
    output_summary : dict, optional
    timing_seconds : float, optional
    warnings_list : list[str], optional
    index_name : str, optional
        "NISECI" or "HFBI".
    station_code : str, optional
    """
    parts = [f"[{step_name}] {status}"]
    if station_code:
        parts.insert(0, f"{station_code}:")
    if timing_seconds is not None:
        parts.append(f"({timing_seconds * 1000:.1f} ms)")
    if output_summary:
        parts.append(f"output={output_summary}")
    if warnings_list:
        parts.append(f"problems={len(warnings_list)}")

    extra = {"step_name": step_name}
    if index_name:
        extra["index_name"] = index_name
    if station_code:
        extra["station_code"] = station_code
    if input_summary:
        extra["input_summary"] = input_summary
    if output_summary:
        extra["output_summary"] = output_summary
    if timing_seconds is not None:
        extra["timing_seconds"] = timing_seconds
    if warnings_list:
        extra["warnings"] = warnings_list

    level = logging.ERROR if status == "error" else logging.INFO
    logger.log(level, " ".join(parts), extra=extra)


class StepTimer:
    """Context manager measuring wall-clock time of a block.

    Usage:
        with StepTimer() as t:
            compute()
        t.elapsed
    """

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed = time.perf_counter() - self.start
