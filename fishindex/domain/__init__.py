"""
Immutable domain entities for the NISECI and HFBI indices.

The ingestion layer builds these from validated input frames; the engines
only read them.
"""

from fishindex.domain.location import Location
from fishindex.domain.niseci import (
    AlienClass,
    Area,
    Community,
    CommunityType,
    HydroEcoRegion,
    NativeClass,
    NiseciIntermediates,
    NiseciRecord,
    NiseciResult,
    NiseciSample,
    NiseciSpecies,
    NiseciStation,
    NiseciStatus,
    SpeciesIntermediates,
)
from fishindex.domain.hfbi import (
    HFBI_SPECIES,
    EcologicalGroup,
    Habitat,
    HfbiIntermediates,
    HfbiRecord,
    HfbiResult,
    HfbiSample,
    HfbiSpecies,
    HfbiStation,
    HfbiStatus,
    LagoonType,
    Season,
    TrophicGroups,
    find_hfbi_species,
)

__all__ = [
    "Location",
    # NISECI
    "AlienClass",
    "Area",
    "Community",
    "CommunityType",
    "HydroEcoRegion",
    "NativeClass",
    "NiseciIntermediates",
    "NiseciRecord",
    "NiseciResult",
    "NiseciSample",
    "NiseciSpecies",
    "NiseciStation",
    "NiseciStatus",
    "SpeciesIntermediates",
    # HFBI
    "HFBI_SPECIES",
    "EcologicalGroup",
    "Habitat",
    "HfbiIntermediates",
    "HfbiRecord",
    "HfbiResult",
    "HfbiSample",
    "HfbiSpecies",
    "HfbiStation",
    "HfbiStatus",
    "LagoonType",
    "Season",
    "TrophicGroups",
    "find_hfbi_species",
]
