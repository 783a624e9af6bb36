"""
Domain model for the NISECI river fish-community index.

Entities are immutable value objects built once by the ingestion layer
(fishindex.ingest) and consumed read-only by the engines.  Threshold
ordering is validated at ingestion; nothing here re-checks it.
"""

from collections import namedtuple
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

from fishindex.domain.location import Location


class NativeClass(IntEnum):
    """Ecological importance of a native (autochthonous) species."""
    NONE = 0
    PRIMARY = 1    # high ecological importance
    SECONDARY = 2


class AlienClass(IntEnum):
    """Impact class of an alien species (increasing severity)."""
    NONE = 0
    TYPE_1 = 1
    TYPE_2 = 2
    TYPE_3 = 3


class Area(str, Enum):
    """Biogeographic area of the station; selects the "good" RQE boundary."""
    ALPINE = "Alpina"
    MEDITERRANEAN = "Mediterranea"


class CommunityType(str, Enum):
    """Origin of the expected-community description."""
    DRAFTED = "Redatta dall'operatore"
    RETRIEVED = "Recuperata da fonti bibliografiche"
    DM_260_2010 = "DM 260/2010"
    REFINED_BY_MINISTRY = "Affinata dal Mase"


class HydroEcoRegion(str, Enum):
    """The 21 Italian hydro-eco-regions, in their official code order."""
    ALPI_OCCIDENTALI = "Alpi Occidentali"
    PREALPI_DOLOMITI = "Prealpi Dolomiti"
    ALPI_CENTRO_ORIENTALI = "Alpi Centro-orientali"
    ALPI_MERIDIONALI = "Alpi Meridionali"
    MONFERRATO = "Monferrato"
    PIANURA_PADANA = "Pianura Padana"
    CARSO = "Carso"
    APPENNINO_PIEMONTESE = "Appennino Piemontese"
    ALPI_MEDITERRANEE = "Alpi Mediterranee"
    APPENNINO_SETTENTRIONALE = "Appennino Settentrionale"
    TOSCANA = "Toscana"
    COSTA_ADRIATICA = "Costa Adriatica"
    APPENNINO_CENTRALE = "Appennino Centrale"
    ROMA_VITERBESE = "Roma-Viterbese"
    BASSO_LAZIO = "Basso Lazio"
    VESUVIO = "Vesuvio"
    BASILICATA_TAVOLIERE = "Basilicata Tavoliere"
    PUGLIA_CARSICA = "Puglia Carsica"
    APPENNINO_MERIDIONALE = "Appennino Meridionale"
    SICILIA = "Sicilia"
    SARDEGNA = "Sardegna"

    @classmethod
    def from_code(cls, code):
        """Return the region for a 0-based code, or None if out of range."""
        members = list(cls)
        if 0 <= code < len(members):
            return members[code]
        return None


class NiseciStatus(str, Enum):
    """Ecological status classes derived from the NISECI RQE."""
    HIGH = "Elevato"
    GOOD = "Buono"
    MODERATE = "Moderato"
    POOR = "Scadente"
    BAD = "Cattivo"


@dataclass(frozen=True)
class NiseciSpecies:
    """One row of the expected-community reference list.

    ``length_thresholds`` (mm) split individuals into 5 length classes,
    ``ratio_thresholds`` rate the adult/juvenile balance and
    ``density_thresholds`` (individuals/m²) rate the estimated density.
    """

    species_id: str
    name: str
    native_class: int
    alien_class: int
    expected: bool
    length_thresholds: tuple
    ratio_thresholds: tuple
    density_thresholds: tuple

    @property
    def is_native(self):
        return self.native_class in (NativeClass.PRIMARY, NativeClass.SECONDARY)

    @property
    def is_alien(self):
        return 0 < self.alien_class <= AlienClass.TYPE_3


@dataclass(frozen=True)
class NiseciRecord:
    """A single captured individual."""

    species: NiseciSpecies
    capture_pass: int
    length_mm: int
    weight_g: float


AlienNativeCount = namedtuple("AlienNativeCount", ["aliens", "natives"])


def depletion_points(pass_counts):
    """Turn per-pass catches into removal-regression points.

    Parameters
    ----------
    pass_counts : dict[int, int]
        Catch per capture pass (1-based).  Missing passes count as zero.

    Returns
    -------
    list[tuple[int, int]]
        ``(cumulative catch up to and including the pass, catch in the
        pass)`` for passes 1..max(pass).
    """
    if not pass_counts:
        return []
    last_pass = max(pass_counts)
    points = []
    cumulative = 0
    for p in range(1, last_pass + 1):
        catch = pass_counts.get(p, 0)
        cumulative += catch
        points.append((cumulative, catch))
    return points


@dataclass(frozen=True)
class NiseciSample:
    """All individuals captured at one station during one survey.

    Records keep their input order; pass numbers need not be contiguous.
    """

    records: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "records", tuple(self.records))

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def count_aliens_and_natives(self):
        """Count alien and native individuals (not species)."""
        aliens = 0
        natives = 0
        for record in self.records:
            if record.species.is_alien:
                aliens += 1
            elif record.species.is_native:
                natives += 1
        return AlienNativeCount(aliens, natives)

    def expected_native_species_count(self):
        """Number of distinct expected native species present in the sample."""
        return len({
            r.species.species_id
            for r in self.records
            if r.species.expected and r.species.is_native
        })

    def catches_per_pass(self):
        """Individuals captured in each pass, keyed by pass number."""
        counts = {}
        for record in self.records:
            counts[record.capture_pass] = counts.get(record.capture_pass, 0) + 1
        return counts

    def depletion_points(self):
        """Removal-regression points for the whole sample."""
        return depletion_points(self.catches_per_pass())


@dataclass(frozen=True)
class Community:
    """Description of how the expected community was obtained."""

    community_type: CommunityType
    source: Optional[str] = None
    protocol_number: Optional[str] = None


@dataclass(frozen=True)
class NiseciStation:
    """Station metadata (anagrafica) for a NISECI survey."""

    station_code: str
    water_body: str
    basin: str
    location: Location
    survey_date: str  # dd/mm/yyyy
    area: Area
    hydro_eco_region: HydroEcoRegion
    community: Community
    mean_length_m: float
    mean_width_m: float

    @property
    def surface(self):
        """Sampled surface in m² (zero is allowed and yields inf/nan downstream)."""
        return self.mean_length_m * self.mean_width_m

    def to_dict(self):
        return {
            "station_code": self.station_code,
            "water_body": self.water_body,
            "basin": self.basin,
            "location": self.location.to_dict(),
            "survey_date": self.survey_date,
            "area": self.area.value,
            "hydro_eco_region": self.hydro_eco_region.value,
            "community_type": self.community.community_type.value,
            "community_source": self.community.source,
            "community_protocol_number": self.community.protocol_number,
            "mean_length_m": self.mean_length_m,
            "mean_width_m": self.mean_width_m,
        }


# ── Intermediate-value bundles ──────────────────────────────────────────


@dataclass
class SpeciesIntermediates:
    """Per-species breakdown reported alongside the NISECI value.

    ``estimated_density`` is None for species that only appear in the x3
    alien-structure analysis, where no density is estimated.
    """

    age_classes: tuple
    criterion_a: int
    criterion_b: int
    ratio: Optional[float] = None
    estimated_density: Optional[float] = None
    estimated_quantity: int = 0
    x2_b: float = 0.0

    def to_dict(self):
        return {
            "age_classes": {f"cl{i}": n for i, n in enumerate(self.age_classes, start=1)},
            "criterion_a": self.criterion_a,
            "criterion_b": self.criterion_b,
            "ratio": self.ratio,
            "estimated_density": self.estimated_density,
            "estimated_quantity": self.estimated_quantity,
            "x2_b": self.x2_b,
        }


@dataclass
class NiseciIntermediates:
    """Every sub-metric computed for one NISECI run."""

    x1: float
    x2: Optional[float]
    x3: float
    x2_a: float = 0.0
    x2_b: float = 0.0
    x3_a: Optional[float] = None
    x3_b: Optional[float] = None
    species: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            "x1": self.x1,
            "x2": self.x2,
            "x3": self.x3,
            "x2_a": self.x2_a,
            "x2_b": self.x2_b,
            "x3_a": self.x3_a,
            "x3_b": self.x3_b,
            "species": {k: v.to_dict() for k, v in sorted(self.species.items())},
        }


@dataclass
class NiseciResult:
    """Final NISECI outcome.  ``value`` None means the index is undefined."""

    value: Optional[float]
    rqe: Optional[float]
    status: Optional[NiseciStatus]
    intermediates: NiseciIntermediates

    @property
    def defined(self):
        return self.value is not None

    def to_dict(self):
        return {
            "value": self.value,
            "rqe": self.rqe,
            "status": self.status.value if self.status is not None else None,
            "intermediates": self.intermediates.to_dict(),
        }
