"""
Result dataclasses for one index computation.

A run is a chain of steps (schema validation, record building, index
computation, classification); each step reports a StepResult and the run
as a whole an IndexRunResult, which is what the CLI writes to disk and
pipeline_runner.load_index_result() reads back.
"""

import subprocess
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class StepStatus(str, Enum):
    """Step outcome status."""
    SUCCESS = "success"
    ERROR = "error"


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _get_git_sha():
    """Return the short git SHA of the current HEAD, or None."""
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (subprocess.SubprocessError, FileNotFoundError):
        return None


@dataclass
class StepResult:
    """Result of a single step.

    ``warnings`` holds schema warnings on success and, on failure, every
    problem reported by the failing ingestion or computation.
    """

    step_name: str
    status: str  # "success" or "error"
    input_summary: dict = field(default_factory=dict)
    output_summary: dict = field(default_factory=dict)
    timing_seconds: float = 0.0
    warnings: list = field(default_factory=list)
    error: Optional[str] = None
    started_at: str = field(default_factory=_now_iso)
    completed_at: Optional[str] = None

    @property
    def ok(self):
        return self.status == StepStatus.SUCCESS

    def to_dict(self):
        return {
            "step_name": self.step_name,
            "status": self.status,
            "input_summary": self.input_summary,
            "output_summary": self.output_summary,
            "timing_seconds": self.timing_seconds,
            "warnings": self.warnings,
            "error": self.error,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, d):
        """Reconstruct a StepResult from a serialized dict."""
        return cls(
            step_name=d["step_name"],
            status=d["status"],
            input_summary=d.get("input_summary", {}),
            output_summary=d.get("output_summary", {}),
            timing_seconds=d.get("timing_seconds", 0.0),
            warnings=d.get("warnings", []),
            error=d.get("error"),
            started_at=d.get("started_at", ""),
            completed_at=d.get("completed_at"),
        )


@dataclass
class IndexRunResult:
    """Outcome of computing one index for one station.

    ``value`` None with every step successful means the index is
    undefined for this sample, which is a valid outcome.
    """

    index_name: str = ""  # "NISECI" or "HFBI"
    station: Optional[dict] = None
    value: Optional[float] = None
    rqe: Optional[float] = None
    status: Optional[str] = None
    intermediates: Optional[dict] = None
    step_results: list = field(default_factory=list)
    total_time_seconds: float = 0.0
    git_sha: Optional[str] = field(default_factory=_get_git_sha)
    started_at: str = field(default_factory=_now_iso)

    @property
    def all_ok(self):
        return all(s.ok for s in self.step_results)

    @property
    def failed_steps(self):
        return [s for s in self.step_results if not s.ok]

    def to_dict(self):
        return {
            "index_name": self.index_name,
            "station": self.station,
            "value": self.value,
            "rqe": self.rqe,
            "status": self.status,
            "intermediates": self.intermediates,
            "steps": [s.to_dict() for s in self.step_results],
            "total_time_seconds": self.total_time_seconds,
            "all_ok": self.all_ok,
            "git_sha": self.git_sha,
            "started_at": self.started_at,
        }

    @classmethod
    def from_dict(cls, d):
        """Reconstruct an IndexRunResult from a serialized dict."""
        result = cls(
            index_name=d.get("index_name", ""),
            station=d.get("station"),
            value=d.get("value"),
            rqe=d.get("rqe"),
            status=d.get("status"),
            intermediates=d.get("intermediates"),
            total_time_seconds=d.get("total_time_seconds", 0.0),
            git_sha=d.get("git_sha"),
            started_at=d.get("started_at", ""),
        )
        result.step_results = [
            StepResult.from_dict(s) for s in d.get("steps", [])
        ]
        return result
