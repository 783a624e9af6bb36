"""
Exception types raised by the ingestion layer and the index engines.

Every error carries the full list of problems found in one pass so that
callers can display all of them at once instead of fixing inputs one
failure at a time.
"""


class IndexComputationError(ValueError):
    """A sub-engine or aggregator could not produce a result.

    Parameters
    ----------
    errors : list[str] or str
        Human-readable descriptions, in the order they were found.
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))

    def prefixed(self, prefix):
        """Return a copy of this error with ``prefix`` on every message."""
        return type(self)([f"{prefix}: {e}" for e in self.errors])


class NegativeEstimateError(IndexComputationError):
    """The removal regression produced a negative population estimate."""


class SameValuesError(ArithmeticError):
    """All catches are equal: no line can be fitted through the points."""


class IngestionError(ValueError):
    """One or more input records failed validation.

    Parameters
    ----------
    errors : list[str]
        One message per rejected record or field.
    source : str, optional
        Which input the records came from (e.g. "NISECI sample").
    """

    def __init__(self, errors, source=None):
        self.errors = list(errors)
        self.source = source
        label = f"{source}: " if source else ""
        super().__init__(
            f"{label}{len(self.errors)} invalid record(s): " + "; ".join(self.errors)
        )
