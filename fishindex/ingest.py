"""
Record builders: validated DataFrames → immutable domain objects.

Every builder walks its frame once, checks each row against the record
rules and collects one message per rejected row (1-based "Record N"
numbering) before raising a single IngestionError, so a user can fix all
problems of an input file in one go.

Column names are the snake_case names of fishindex.schemas; the camelCase
Italian headers used by the official templates are accepted too and
renamed by normalize_columns().
"""

import math
from datetime import datetime

import pandas as pd

from fishindex import config
from fishindex.domain.hfbi import (
    HfbiRecord,
    HfbiSample,
    HfbiStation,
    Habitat,
    LagoonType,
    Season,
    find_hfbi_species,
)
from fishindex.domain.location import Location
from fishindex.domain.niseci import (
    Area,
    Community,
    CommunityType,
    HydroEcoRegion,
    NiseciRecord,
    NiseciSample,
    NiseciSpecies,
    NiseciStation,
)
from fishindex.exceptions import IngestionError
from fishindex.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)

# Template headers → canonical column names.
COLUMN_ALIASES = {
    "nomeComune": "common_name",
    "nomeLatino": "latin_name",
    "codiceSpecie": "species_code",
    "origine": "origin",
    "tipoAutoctono": "native_class",
    "alloNocivita": "alien_class",
    "specieAttesa": "expected",
    "clSoglia1": "cl_threshold_1",
    "clSoglia2": "cl_threshold_2",
    "clSoglia3": "cl_threshold_3",
    "clSoglia4": "cl_threshold_4",
    "adJuvSoglia1": "adjuv_threshold_1",
    "adJuvSoglia2": "adjuv_threshold_2",
    "adJuvSoglia3": "adjuv_threshold_3",
    "adJuvSoglia4": "adjuv_threshold_4",
    "densSoglia1": "density_threshold_1",
    "densSoglia2": "density_threshold_2",
    "data": "date",
    "stazione": "station",
    "numPassaggio": "capture_pass",
    "lunghezza": "length_mm",
    "peso": "weight_g",
    "numeroIndividui": "individuals",
    "codiceStazione": "station_code",
    "corpoIdrico": "water_body",
    "regione": "region",
    "provincia": "province",
    "lunghezzaStazione": "station_length_m",
    "larghezzaStazione": "station_width_m",
    "tipoComunita": "community_type",
    "fonte": "source",
    "numeroProtocollo": "protocol_number",
    "idroEcoRegione": "hydro_eco_region",
    "areaAlpina": "alpine_area",
    "nomeBacino": "basin",
    "stagione": "season",
    "tipoLaguna": "lagoon_type",
}

REFERENCE_COLUMNS = (
    "species_code", "origin", "native_class", "alien_class", "expected",
    "cl_threshold_1", "cl_threshold_2", "cl_threshold_3", "cl_threshold_4",
    "adjuv_threshold_1", "adjuv_threshold_2", "adjuv_threshold_3",
    "adjuv_threshold_4", "density_threshold_1", "density_threshold_2",
)
NISECI_SAMPLE_COLUMNS = ("capture_pass", "species_code", "length_mm", "weight_g")
HFBI_SAMPLE_COLUMNS = ("species_code", "individuals", "weight_g")
STATION_COLUMNS = (
    "station_code", "water_body", "region", "province", "date",
    "station_length_m", "station_width_m",
)
NISECI_STATION_COLUMNS = STATION_COLUMNS + (
    "community_type", "hydro_eco_region", "alpine_area", "basin",
)
HFBI_STATION_COLUMNS = STATION_COLUMNS + ("season", "habitat", "lagoon_type")

_COMMUNITY_TYPES = (
    CommunityType.DRAFTED,
    CommunityType.RETRIEVED,
    CommunityType.DM_260_2010,
    CommunityType.REFINED_BY_MINISTRY,
)
_SEASONS = (Season.SPRING, Season.AUTUMN)
_HABITATS = (Habitat.VEGETATED, Habitat.NON_VEGETATED)
_LAGOON_TYPES = (LagoonType.M_AT_1, LagoonType.M_AT_2, LagoonType.M_AT_3)


# ── Helpers ─────────────────────────────────────────────────────────────

def normalize_columns(df):
    """Strip column names and rename template headers to canonical names."""
    df = df.rename(columns=lambda c: str(c).strip())
    return df.rename(columns=COLUMN_ALIASES)


def read_input_csv(path, delimiter=None):
    """Read one input table.  The delimiter is never guessed."""
    if delimiter is None:
        delimiter = config.DEFAULT_CSV_DELIMITER
    df = pd.read_csv(path, sep=delimiter, skipinitialspace=True)
    log.debug("Read %d rows from %s", len(df), path)
    return normalize_columns(df)


def _require_columns(df, columns, source):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise IngestionError([f"missing column '{c}'" for c in missing], source)


def _text(value):
    """Cell → stripped string; missing cells become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _int(value):
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"not an integer: {value}")
    return int(value)


def _increasing(values):
    return all(a < b for a, b in zip(values, values[1:]))


def _parse_date(text):
    """Return None when ``text`` is a valid dd/mm/yyyy date, else a message."""
    try:
        datetime.strptime(text, config.STATION_DATE_FORMAT)
    except ValueError as exc:
        return f"invalid date '{text}': {exc}"
    return None


# ── NISECI reference ────────────────────────────────────────────────────

def _reference_row(row, idx, seen):
    """Build one species or return the message rejecting it."""
    origin = _text(row["origin"])
    if origin not in ("AUT", "ALL"):
        return f'Record {idx}: invalid origin (not "AUT" or "ALL"): {origin}'

    expected = _int(row["expected"]) > 0
    if origin == "AUT":
        native_class = _int(row["native_class"])
        if native_class not in (1, 2):
            return f"Record {idx}: invalid native class (not 1 or 2): {native_class}"
        alien_class = 0
    else:
        native_class = 0
        alien_class = _int(row["alien_class"])
        if not 0 <= alien_class <= 3:
            return f"Record {idx}: invalid alien class (not in 0..3): {alien_class}"

    code = _text(row["species_code"])
    if not code:
        return f"Record {idx}: invalid species code (empty)"
    if code in seen:
        return f"Record {idx}: invalid species code (redefinition): {code}"

    dens1 = float(row["density_threshold_1"])
    dens2 = float(row["density_threshold_2"])
    for n, dens in ((1, dens1), (2, dens2)):
        if dens < 0:
            return f"Record {idx}: invalid density threshold {n} (< 0)"
        if expected and abs(dens) < config.FLOAT_TOLERANCE:
            return f"Record {idx}: invalid density threshold {n} (== 0) for an expected species"
    if expected and dens1 >= dens2:
        return (f"Record {idx}: density threshold 1 not lower than "
                "density threshold 2 for an expected species")

    length_thresholds = tuple(_int(row[f"cl_threshold_{i}"]) for i in range(1, 5))
    if not _increasing(length_thresholds):
        return f"Record {idx}: length-class thresholds not increasing"
    ratio_thresholds = tuple(float(row[f"adjuv_threshold_{i}"]) for i in range(1, 5))
    if not _increasing(ratio_thresholds):
        return f"Record {idx}: adult/juvenile thresholds not increasing"

    return NiseciSpecies(
        species_id=code,
        name=_text(row.get("latin_name")) or _text(row.get("common_name")),
        native_class=native_class,
        alien_class=alien_class,
        expected=expected,
        length_thresholds=length_thresholds,
        ratio_thresholds=ratio_thresholds,
        density_thresholds=(dens1, dens2),
    )


def build_reference(df):
    """Build the expected-community reference list.

    Returns
    -------
    tuple[NiseciSpecies, ...]
        In input order.

    Raises
    ------
    IngestionError
        Listing every rejected row.
    """
    source = "NISECI reference"
    _require_columns(df, REFERENCE_COLUMNS, source)

    species = []
    seen = set()
    errors = []
    for idx, row in enumerate(df.to_dict("records"), start=1):
        try:
            built = _reference_row(row, idx, seen)
        except (TypeError, ValueError) as exc:
            errors.append(f"Record {idx}: unreadable value: {exc}")
            continue
        if isinstance(built, str):
            errors.append(built)
            continue
        species.append(built)
        seen.add(built.species_id)

    if errors:
        raise IngestionError(errors, source)
    log.debug("Built %d reference species", len(species))
    return tuple(species)


# ── NISECI sample ───────────────────────────────────────────────────────

def build_niseci_sample(df, reference):
    """Attach each captured individual to its reference species.

    Raises
    ------
    IngestionError
        For empty or unknown species codes and pass numbers below 1.
    """
    source = "NISECI sample"
    _require_columns(df, NISECI_SAMPLE_COLUMNS, source)

    by_code = {}
    for species in reference:
        by_code.setdefault(species.species_id, species)

    records = []
    errors = []
    for idx, row in enumerate(df.to_dict("records"), start=1):
        code = _text(row["species_code"])
        if not code:
            errors.append(f"Record {idx}: invalid species code (empty)")
            continue
        species = by_code.get(code)
        if species is None:
            errors.append(
                f"Record {idx}: invalid species code (not in the reference): {code}")
            continue
        try:
            capture_pass = _int(row["capture_pass"])
            length_mm = _int(row["length_mm"])
            weight_g = float(row["weight_g"])
        except (TypeError, ValueError) as exc:
            errors.append(f"Record {idx}: unreadable value: {exc}")
            continue
        if capture_pass < 1:
            errors.append(f"Record {idx}: invalid capture pass (< 1): {capture_pass}")
            continue
        records.append(NiseciRecord(species, capture_pass, length_mm, weight_g))

    if errors:
        raise IngestionError(errors, source)
    return NiseciSample(records)


# ── HFBI sample ─────────────────────────────────────────────────────────

def build_hfbi_sample(df):
    """Attach each catch row to the fixed HFBI species table.

    Raises
    ------
    IngestionError
        For unknown codes, counts below 1 and non-finite weights.
    """
    source = "HFBI sample"
    _require_columns(df, HFBI_SAMPLE_COLUMNS, source)

    records = []
    errors = []
    for idx, row in enumerate(df.to_dict("records"), start=1):
        code = _text(row["species_code"])
        if not code:
            errors.append(f"Record {idx}: invalid species code (empty)")
            continue
        species = find_hfbi_species(code)
        if species is None:
            errors.append(f"Record {idx}: unknown species code: {code}")
            continue
        try:
            individuals = _int(row["individuals"])
            weight_g = float(row["weight_g"])
        except (TypeError, ValueError) as exc:
            errors.append(f"Record {idx}: unreadable value: {exc}")
            continue
        if individuals < 1:
            errors.append(f"Record {idx}: invalid number of individuals (< 1): {individuals}")
            continue
        if not math.isfinite(weight_g):
            errors.append(f"Record {idx}: invalid weight: {weight_g}")
            continue
        records.append(HfbiRecord(species, individuals, weight_g))

    if errors:
        raise IngestionError(errors, source)
    return HfbiSample(records)


# ── Stations ────────────────────────────────────────────────────────────

def _single_station_row(df, columns, source):
    _require_columns(df, columns, source)
    if len(df) == 0:
        raise IngestionError(["no record found: expected 1"], source)
    errors = []
    if len(df) > 1:
        errors.append(f"too many records: {len(df)}, expected 1")
    return df.to_dict("records")[0], errors


def _common_station_fields(row, errors):
    fields = {}
    for name, label in (("station_code", "station code"),
                        ("water_body", "water body"),
                        ("region", "region"),
                        ("province", "province")):
        fields[name] = _text(row[name])
        if not fields[name]:
            errors.append(f"{label} is empty")

    fields["date"] = _text(row["date"])
    date_error = _parse_date(fields["date"])
    if date_error:
        errors.append(date_error)

    for name, label in (("station_length_m", "station length"),
                        ("station_width_m", "station width")):
        try:
            fields[name] = float(row[name])
        except (TypeError, ValueError):
            fields[name] = float("nan")
        if math.isnan(fields[name]):
            errors.append(f"{label} is not a number: {row[name]}")
        elif fields[name] < 0:
            errors.append(f"{label} is negative: {fields[name]}")
    return fields


def _code(row, name, errors):
    try:
        return _int(row[name])
    except (TypeError, ValueError):
        errors.append(f"{name} is not an integer: {row[name]}")
        return None


def build_niseci_station(df):
    """Build the NISECI station from a one-row frame.

    Raises
    ------
    IngestionError
        Listing every invalid field.
    """
    source = "NISECI station"
    row, errors = _single_station_row(df, NISECI_STATION_COLUMNS, source)
    fields = _common_station_fields(row, errors)

    community = None
    community_code = _code(row, "community_type", errors)
    if community_code is not None:
        if 0 <= community_code < len(_COMMUNITY_TYPES):
            community_type = _COMMUNITY_TYPES[community_code]
            src = _text(row.get("source")) or None
            protocol = _text(row.get("protocol_number")) or None
            if community_type is CommunityType.RETRIEVED and src is None:
                errors.append("source is required for a community retrieved from literature")
            if community_type is CommunityType.REFINED_BY_MINISTRY and protocol is None:
                errors.append("protocol number is required for a community "
                              "refined by the ministry")
            community = Community(community_type, src, protocol)
        else:
            errors.append(f"invalid community type: {community_code}, expected [0, 3]")

    region = None
    region_code = _code(row, "hydro_eco_region", errors)
    if region_code is not None:
        region = HydroEcoRegion.from_code(region_code)
        if region is None:
            errors.append(f"invalid hydro-eco-region: {region_code}, expected [0, 20]")

    alpine = _code(row, "alpine_area", errors)
    basin = _text(row["basin"])
    if not basin:
        errors.append("basin is empty")

    if errors:
        raise IngestionError(errors, source)

    return NiseciStation(
        station_code=fields["station_code"],
        water_body=fields["water_body"],
        basin=basin,
        location=Location(fields["region"], fields["province"]),
        survey_date=fields["date"],
        area=Area.ALPINE if alpine > 0 else Area.MEDITERRANEAN,
        hydro_eco_region=region,
        community=community,
        mean_length_m=fields["station_length_m"],
        mean_width_m=fields["station_width_m"],
    )


def _choice(row, name, choices, errors):
    code = _code(row, name, errors)
    if code is None:
        return None
    if code not in choices:
        errors.append(f"invalid {name}: {code}, expected one of {sorted(choices)}")
        return None
    return choices[code]


def build_hfbi_station(df):
    """Build the HFBI station from a one-row frame.

    Season 0/1 = spring/autumn, habitat 0/1 = vegetated/non-vegetated,
    lagoon type 1..3.
    """
    source = "HFBI station"
    row, errors = _single_station_row(df, HFBI_STATION_COLUMNS, source)
    fields = _common_station_fields(row, errors)

    season = _choice(row, "season", dict(enumerate(_SEASONS)), errors)
    habitat = _choice(row, "habitat", dict(enumerate(_HABITATS)), errors)
    lagoon_type = _choice(row, "lagoon_type", dict(enumerate(_LAGOON_TYPES, start=1)),
                          errors)

    if errors:
        raise IngestionError(errors, source)

    return HfbiStation(
        station_code=fields["station_code"],
        water_body=fields["water_body"],
        location=Location(fields["region"], fields["province"]),
        survey_date=fields["date"],
        lagoon_type=lagoon_type,
        season=season,
        habitat=habitat,
        mean_length_m=fields["station_length_m"],
        mean_width_m=fields["station_width_m"],
    )
