"""
Pandera DataFrame schemas for the index input frames.

The schemas are the first gate of an index run: they check column
presence, types and coarse value ranges of the tabular inputs.  The
record-level rules (threshold ordering, reference look-ups, date
validity) live in fishindex.ingest, which builds the domain objects.

Usage:
    from fishindex.schemas import NiseciSampleSchema, validate_schema
    warnings = validate_schema(df, NiseciSampleSchema, "niseci_sample")
"""

import pandera as pa
from pandera import Check, Column, DataFrameSchema

_TEXT = dict(nullable=False, coerce=True)
_OPTIONAL_TEXT = dict(nullable=True, required=False)


def _station_columns():
    return {
        "station_code": Column(str, **_TEXT),
        "water_body": Column(str, **_TEXT),
        "region": Column(str, **_TEXT),
        "province": Column(str, **_TEXT),
        "date": Column(str, Check.str_matches(r"^\d{1,2}/\d{1,2}/\d{4}$"), **_TEXT),
        "station_length_m": Column(float, Check.greater_than_or_equal_to(0.0),
                                   nullable=False, coerce=True),
        "station_width_m": Column(float, Check.greater_than_or_equal_to(0.0),
                                  nullable=False, coerce=True),
    }


# ── NISECI expected-community reference ─────────────────────────────────

NiseciReferenceSchema = DataFrameSchema(
    columns={
        "common_name": Column(**_OPTIONAL_TEXT),
        "latin_name": Column(**_OPTIONAL_TEXT),
        "species_code": Column(str, **_TEXT),
        "origin": Column(str, Check.isin(["AUT", "ALL"]), **_TEXT),
        "native_class": Column(int, Check.in_range(0, 2), nullable=False, coerce=True),
        "alien_class": Column(int, Check.in_range(0, 3), nullable=False, coerce=True),
        "expected": Column(int, Check.greater_than_or_equal_to(0),
                           nullable=False, coerce=True),
        **{
            f"cl_threshold_{i}": Column(int, Check.greater_than_or_equal_to(0),
                                        nullable=False, coerce=True)
            for i in range(1, 5)
        },
        **{
            f"adjuv_threshold_{i}": Column(float, Check.greater_than_or_equal_to(0.0),
                                           nullable=False, coerce=True)
            for i in range(1, 5)
        },
        "density_threshold_1": Column(float, Check.greater_than_or_equal_to(0.0),
                                      nullable=False, coerce=True),
        "density_threshold_2": Column(float, Check.greater_than_or_equal_to(0.0),
                                      nullable=False, coerce=True),
    },
    strict=False,
    coerce=False,
    name="NiseciReferenceSchema",
)


# ── NISECI sample ───────────────────────────────────────────────────────

NiseciSampleSchema = DataFrameSchema(
    columns={
        "date": Column(**_OPTIONAL_TEXT),
        "station": Column(**_OPTIONAL_TEXT),
        "capture_pass": Column(int, Check.greater_than_or_equal_to(1),
                               nullable=False, coerce=True),
        "species_code": Column(str, **_TEXT),
        "length_mm": Column(int, Check.greater_than_or_equal_to(0),
                            nullable=False, coerce=True),
        "weight_g": Column(float, Check.greater_than_or_equal_to(0.0),
                           nullable=True, coerce=True),
    },
    strict=False,
    coerce=False,
    name="NiseciSampleSchema",
)


# ── NISECI station ──────────────────────────────────────────────────────

NiseciStationSchema = DataFrameSchema(
    columns={
        **_station_columns(),
        "community_type": Column(int, Check.in_range(0, 3), nullable=False, coerce=True),
        "source": Column(**_OPTIONAL_TEXT),
        "protocol_number": Column(**_OPTIONAL_TEXT),
        "hydro_eco_region": Column(int, Check.in_range(0, 20),
                                   nullable=False, coerce=True),
        "alpine_area": Column(int, Check.greater_than_or_equal_to(0),
                              nullable=False, coerce=True),
        "basin": Column(str, **_TEXT),
    },
    strict=False,
    coerce=False,
    name="NiseciStationSchema",
)


# ── HFBI sample ─────────────────────────────────────────────────────────

HfbiSampleSchema = DataFrameSchema(
    columns={
        "species_code": Column(str, **_TEXT),
        "individuals": Column(int, Check.greater_than_or_equal_to(1),
                              nullable=False, coerce=True),
        "weight_g": Column(float, Check.greater_than_or_equal_to(0.0),
                           nullable=False, coerce=True),
    },
    strict=False,
    coerce=False,
    name="HfbiSampleSchema",
)


# ── HFBI station ────────────────────────────────────────────────────────

HfbiStationSchema = DataFrameSchema(
    columns={
        **_station_columns(),
        "season": Column(int, Check.isin([0, 1]), nullable=False, coerce=True),
        "habitat": Column(int, Check.isin([0, 1]), nullable=False, coerce=True),
        "lagoon_type": Column(int, Check.in_range(1, 3), nullable=False, coerce=True),
    },
    strict=False,
    coerce=False,
    name="HfbiStationSchema",
)


# ── Convenience validation function ─────────────────────────────────────

def validate_schema(df, schema, step_name, strict=False):
    """Validate a DataFrame against a Pandera schema.

    Parameters
    ----------
    df : pd.DataFrame
    schema : pa.DataFrameSchema
    step_name : str
        Step name used as message prefix.
    strict : bool
        If True, raise on failure.  If False, return the warnings.

    Returns
    -------
    list[str]
        Validation warning messages (empty if all pass).

    Raises
    ------
    ValueError
        Only if strict=True and validation fails.
    """
    if df is None:
        msg = f"[{step_name}] DataFrame is None"
        if strict:
            raise ValueError(msg)
        return [msg]

    if len(df) == 0:
        msg = f"[{step_name}] DataFrame is empty (0 rows)"
        if strict:
            raise ValueError(msg)
        return [msg]

    warnings_list = []
    try:
        schema.validate(df, lazy=True)
    except pa.errors.SchemaErrors as exc:
        for failure in exc.failure_cases.itertuples():
            warnings_list.append(
                f"[{step_name}] Schema violation: "
                f"column='{failure.column}' check='{failure.check}' "
                f"failure_case={failure.failure_case}"
            )
        if strict:
            raise ValueError(
                f"[{step_name}] Schema validation failed with "
                f"{len(warnings_list)} errors"
            ) from exc

    return warnings_list
