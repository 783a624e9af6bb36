"""
Domain model for the HFBI (Habitat Fish Bio-Index) lagoon index.

Unlike NISECI, HFBI does not take a reference species list as input: the
31 species it recognises, with their ecological group and trophic
composition, are fixed in HFBI_SPECIES.
"""

from dataclasses import dataclass, field
from enum import Enum

from fishindex.domain.location import Location


class EcologicalGroup(str, Enum):
    MIGRATORY_MARINE = "Migratori marini"
    DIADROMOUS = "Diadromi"
    ESTUARINE_RESIDENT = "Residenti di estuario"
    OCCASIONAL_MARINE = "Occasionali marini"
    OCCASIONAL_FRESHWATER = "Occasionali di acque dolci"


# Groups that contribute to the biomass and diversity metrics.
LAGOON_GROUPS = frozenset({
    EcologicalGroup.DIADROMOUS,
    EcologicalGroup.MIGRATORY_MARINE,
    EcologicalGroup.ESTUARINE_RESIDENT,
})

# Groups counted as migratory by dmig.
MIGRATORY_GROUPS = frozenset({
    EcologicalGroup.DIADROMOUS,
    EcologicalGroup.MIGRATORY_MARINE,
})


class Season(str, Enum):
    SPRING = "Primavera"
    AUTUMN = "Autunno"


class Habitat(str, Enum):
    VEGETATED = "Vegetato"
    NON_VEGETATED = "Non Vegetato"


class LagoonType(str, Enum):
    M_AT_1 = "M-AT-1"
    M_AT_2 = "M-AT-2"
    M_AT_3 = "M-AT-3"


class HfbiStatus(str, Enum):
    """Ecological status classes derived from the HFBI value."""
    EXCELLENT = "Eccellente"
    GOOD = "Buono"
    SUFFICIENT = "Sufficiente"
    POOR = "Scarso"
    BAD = "Cattivo"


@dataclass(frozen=True)
class TrophicGroups:
    """Fraction of the diet in each trophic role (sums to at most 1)."""

    microbenthivore: float = 0.0
    macrobenthivore: float = 0.0
    hyperbenthivore: float = 0.0
    herbivore: float = 0.0
    detritivore: float = 0.0
    planktivore: float = 0.0
    omnivore: float = 0.0

    @property
    def benthivore(self):
        return self.microbenthivore + self.macrobenthivore


@dataclass(frozen=True)
class HfbiSpecies:
    name: str
    code: str
    group: EcologicalGroup
    trophic: TrophicGroups
    native: bool = True


_T = TrophicGroups
_DIAD = EcologicalGroup.DIADROMOUS
_MIG = EcologicalGroup.MIGRATORY_MARINE
_RES = EcologicalGroup.ESTUARINE_RESIDENT

HFBI_SPECIES = (
    HfbiSpecies("Cheppia", "CH", _DIAD, _T(hyperbenthivore=1.0)),
    HfbiSpecies("Anguilla", "AN", _DIAD,
                _T(microbenthivore=0.2, macrobenthivore=0.4, hyperbenthivore=0.4)),
    HfbiSpecies("Nono", "NO", _RES, _T(microbenthivore=0.5, omnivore=0.5)),
    HfbiSpecies("Latterino di lago", "LAT", _RES, _T(hyperbenthivore=1.0)),
    HfbiSpecies("Aguglia", "BBE", _MIG, _T(hyperbenthivore=1.0)),
    HfbiSpecies("Gallinella", "CLU", _MIG,
                _T(microbenthivore=0.4, macrobenthivore=0.4, hyperbenthivore=0.2)),
    HfbiSpecies("Muggine labbrone", "CEL", _MIG,
                _T(hyperbenthivore=0.5, detritivore=0.5)),
    HfbiSpecies("Spigola branzino", "DIC", _MIG, _T(hyperbenthivore=1.0)),
    # Shares its code with the sea bass above; lookups by code return the
    # first entry.
    HfbiSpecies("Alice (Acciuga Europea)", "DIC", _MIG, _T(planktivore=1.0)),
    HfbiSpecies("Ghiozzo nero", "GHN", _RES,
                _T(microbenthivore=0.4, macrobenthivore=0.4, hyperbenthivore=0.2)),
    HfbiSpecies("Cavalluccio marino", "HGU", _RES,
                _T(microbenthivore=0.5, hyperbenthivore=0.5)),
    HfbiSpecies("Cavalluccio camuso", "HHI", _RES,
                _T(microbenthivore=0.5, hyperbenthivore=0.5)),
    HfbiSpecies("Ghiozzetto di laguna", "GHL", _RES,
                _T(microbenthivore=2.0 / 3.0, hyperbenthivore=1.0 / 3.0)),
    HfbiSpecies("Muggine dorato", "CED", _MIG,
                _T(hyperbenthivore=0.5, detritivore=0.5)),
    HfbiSpecies("Muggine calamita", "CEC", _DIAD,
                _T(hyperbenthivore=0.5, detritivore=0.5)),
    HfbiSpecies("Muggine musino", "MUS", _MIG,
                _T(hyperbenthivore=0.5, detritivore=0.5)),
    HfbiSpecies("Cefalo", "MUG", _DIAD, _T(hyperbenthivore=0.5, detritivore=0.5)),
    HfbiSpecies("Triglia di scoglio", "MSU", _MIG,
                _T(microbenthivore=2.0 / 3.0, macrobenthivore=1.0 / 3.0)),
    HfbiSpecies("Pesce ago sottile", "NOP", _RES, _T(microbenthivore=1.0)),
    HfbiSpecies("Passera pianuzza", "PFL", _MIG,
                _T(microbenthivore=0.4, macrobenthivore=0.4, hyperbenthivore=0.2)),
    HfbiSpecies("Ghiozzetto cenerino", "GHC", _RES,
                _T(microbenthivore=2.0 / 3.0, hyperbenthivore=1.0 / 3.0)),
    HfbiSpecies("Ghiozzetto marmorizzato", "GHM", _RES,
                _T(microbenthivore=2.0 / 3.0, hyperbenthivore=1.0 / 3.0)),
    HfbiSpecies("Ghiozzetto minuto", "GHE", _MIG,
                _T(microbenthivore=2.0 / 3.0, hyperbenthivore=1.0 / 3.0)),
    HfbiSpecies("Bavosa pavone", "BAP", _RES, _T(microbenthivore=0.5, omnivore=0.5)),
    HfbiSpecies("Sardina", "SPI", _MIG, _T(planktivore=1.0)),
    HfbiSpecies("Sogliola comune", "SSO", _MIG,
                _T(microbenthivore=2.0 / 3.0, macrobenthivore=1.0 / 3.0)),
    HfbiSpecies("Orata", "SAU", _MIG,
                _T(microbenthivore=0.4, macrobenthivore=0.2, hyperbenthivore=0.4)),
    HfbiSpecies("Pesce ago di rio", "PAR", _RES,
                _T(microbenthivore=2.0 / 3.0, hyperbenthivore=1.0 / 3.0)),
    HfbiSpecies("Pesce ago adriatico", "STA", _RES, _T(hyperbenthivore=1.0)),
    HfbiSpecies("Pesce ago cavallino", "STY", _RES,
                _T(microbenthivore=0.2, hyperbenthivore=0.8)),
    HfbiSpecies("Ghiozzo gò", "GHG", _RES,
                _T(microbenthivore=1.0 / 3.0, macrobenthivore=1.0 / 3.0,
                   hyperbenthivore=1.0 / 3.0)),
)


def find_hfbi_species(code):
    """Return the first species with ``code``, or None."""
    for species in HFBI_SPECIES:
        if species.code == code:
            return species
    return None


@dataclass(frozen=True)
class HfbiRecord:
    """Catch of one species in one transect: count and total weight (g)."""

    species: HfbiSpecies
    individuals: int
    weight_g: float


@dataclass(frozen=True)
class HfbiSample:
    records: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "records", tuple(self.records))

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


@dataclass(frozen=True)
class HfbiStation:
    """Station metadata (anagrafica) for an HFBI survey."""

    station_code: str
    water_body: str
    location: Location
    survey_date: str  # dd/mm/yyyy
    lagoon_type: LagoonType
    season: Season
    habitat: Habitat
    mean_length_m: float
    mean_width_m: float

    @property
    def surface(self):
        """Transect surface in m² (zero is allowed and yields inf/nan downstream)."""
        return self.mean_length_m * self.mean_width_m

    def to_dict(self):
        return {
            "station_code": self.station_code,
            "water_body": self.water_body,
            "location": self.location.to_dict(),
            "survey_date": self.survey_date,
            "lagoon_type": self.lagoon_type.value,
            "season": self.season.value,
            "habitat": self.habitat.value,
            "mean_length_m": self.mean_length_m,
            "mean_width_m": self.mean_width_m,
        }


@dataclass
class HfbiIntermediates:
    bbent: float
    bn: float
    dbent: float
    ddom: float
    dhzp: float
    dmig: float
    mmi: float
    rqe: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            "bbent": self.bbent,
            "bn": self.bn,
            "dbent": self.dbent,
            "ddom": self.ddom,
            "dhzp": self.dhzp,
            "dmig": self.dmig,
            "mmi": self.mmi,
            "rqe": dict(self.rqe),
        }


@dataclass
class HfbiResult:
    value: float
    status: HfbiStatus
    intermediates: HfbiIntermediates

    def to_dict(self):
        return {
            "value": self.value,
            "status": self.status.value if self.status is not None else None,
            "intermediates": self.intermediates.to_dict(),
        }
