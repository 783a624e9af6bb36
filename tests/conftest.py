"""
Shared fixtures for the index engine tests.

Provides small hand-built species lists, samples and stations whose index
values are known, so each test module can focus on verifying the engine
logic against known inputs.
"""

import pandas as pd
import pytest

from fishindex.domain import (
    Area,
    Community,
    CommunityType,
    Habitat,
    HfbiRecord,
    HfbiSample,
    HfbiStation,
    HydroEcoRegion,
    LagoonType,
    Location,
    NiseciRecord,
    NiseciSample,
    NiseciSpecies,
    NiseciStation,
    Season,
    find_hfbi_species,
)
from fishindex.logging_config import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    """Every test starts and ends without installed log handlers."""
    reset_logging()
    yield
    reset_logging()


# ---------------------------------------------------------------------------
# NISECI building blocks
# ---------------------------------------------------------------------------
# Length-class thresholds (mm) 3/6/9/12 put lengths 2, 4, 7, 10, 13 into
# classes 1..5.
LENGTH_THRESHOLDS = (3, 6, 9, 12)
RATIO_THRESHOLDS = (0.5, 0.67, 1.5, 2.0)
DENSITY_THRESHOLDS = (3.0, 5.0)
CLASS_LENGTHS = {1: 2, 2: 4, 3: 7, 4: 10, 5: 13}


@pytest.fixture
def make_species():
    """Factory for reference species with the standard thresholds."""
    def _make(species_id="1", native_class=2, alien_class=0, expected=True,
              length_thresholds=LENGTH_THRESHOLDS,
              ratio_thresholds=RATIO_THRESHOLDS,
              density_thresholds=DENSITY_THRESHOLDS):
        return NiseciSpecies(
            species_id=species_id,
            name=f"species {species_id}",
            native_class=native_class,
            alien_class=alien_class,
            expected=expected,
            length_thresholds=length_thresholds,
            ratio_thresholds=ratio_thresholds,
            density_thresholds=density_thresholds,
        )
    return _make


@pytest.fixture
def catch():
    """Factory: ``n`` individuals of ``species`` in length class ``cls``."""
    def _catch(species, capture_pass, cls, n, weight_g=10.0):
        return [NiseciRecord(species, capture_pass, CLASS_LENGTHS[cls], weight_g)
                for _ in range(n)]
    return _catch


@pytest.fixture
def ciaccio(make_species):
    """Expected native species of class 2."""
    return make_species("1", native_class=2)


@pytest.fixture
def structured_sample(ciaccio, catch):
    """Pass 1: 10 cl5, 10 cl4, 10 cl3.  Pass 2: 15 cl2.

    Classes (0, 15, 10, 10, 10): A=1, B=1 (ratio 0.8), score 1.0.
    Two-pass estimate 60 over 10 m² → density 6 > 5 → 1.0, so x2 = 1.0.
    """
    records = (catch(ciaccio, 1, 5, 10) + catch(ciaccio, 1, 4, 10)
               + catch(ciaccio, 1, 3, 10) + catch(ciaccio, 2, 2, 15))
    return NiseciSample(records)


@pytest.fixture
def moderate_sample(ciaccio, catch):
    """Pass 1: 10 cl5, 10 cl4, 10 cl3.  Pass 2: 10 cl4, 5 cl1.

    Classes (5, 0, 10, 20, 10): A=1, B=3 (ratio 3.0), score 0.5.
    Density 6 → 1.0, so x2 = 0.6·0.5 + 0.4·1.0 = 0.7.
    """
    records = (catch(ciaccio, 1, 5, 10) + catch(ciaccio, 1, 4, 10)
               + catch(ciaccio, 1, 3, 10) + catch(ciaccio, 2, 4, 10)
               + catch(ciaccio, 2, 1, 5))
    return NiseciSample(records)


@pytest.fixture
def make_niseci_station():
    def _make(length=10.0, width=1.0, area=Area.MEDITERRANEAN):
        return NiseciStation(
            station_code="ST01",
            water_body="Torrente Test",
            basin="Arno",
            location=Location("Toscana", "Firenze"),
            survey_date="15/06/2023",
            area=area,
            hydro_eco_region=HydroEcoRegion.TOSCANA,
            community=Community(CommunityType.DM_260_2010),
            mean_length_m=length,
            mean_width_m=width,
        )
    return _make


@pytest.fixture
def niseci_station(make_niseci_station):
    """10 m × 1 m Mediterranean station."""
    return make_niseci_station()


# ---------------------------------------------------------------------------
# HFBI building blocks
# ---------------------------------------------------------------------------

@pytest.fixture
def make_hfbi_station():
    def _make(length=10.0, width=10.0, lagoon_type=LagoonType.M_AT_1,
              season=Season.SPRING, habitat=Habitat.VEGETATED):
        return HfbiStation(
            station_code="LG01",
            water_body="Laguna Test",
            location=Location("Veneto", "Venezia"),
            survey_date="20/04/2023",
            lagoon_type=lagoon_type,
            season=season,
            habitat=habitat,
            mean_length_m=length,
            mean_width_m=width,
        )
    return _make


@pytest.fixture
def hfbi_station(make_hfbi_station):
    """100 m² transect."""
    return make_hfbi_station()


@pytest.fixture
def hfbi_sample():
    """Factory: HfbiSample from (code, individuals, weight) triples."""
    def _make(*rows):
        return HfbiSample(
            HfbiRecord(find_hfbi_species(code), individuals, weight)
            for code, individuals, weight in rows
        )
    return _make


# ---------------------------------------------------------------------------
# Input frames for ingestion and runner tests
# ---------------------------------------------------------------------------

def reference_row(code="1", origin="AUT", native_class=2, alien_class=0,
                  expected=1, cl=LENGTH_THRESHOLDS, adjuv=RATIO_THRESHOLDS,
                  dens=DENSITY_THRESHOLDS):
    row = {
        "common_name": f"specie {code}",
        "latin_name": f"Species {code}",
        "species_code": code,
        "origin": origin,
        "native_class": native_class,
        "alien_class": alien_class,
        "expected": expected,
        "density_threshold_1": dens[0],
        "density_threshold_2": dens[1],
    }
    for i in range(4):
        row[f"cl_threshold_{i + 1}"] = cl[i]
        row[f"adjuv_threshold_{i + 1}"] = adjuv[i]
    return row


@pytest.fixture
def reference_df():
    """Expected native "1" (class 2) and unexpected native "3" (class 1)."""
    return pd.DataFrame([
        reference_row("1", native_class=2),
        reference_row("3", native_class=1, expected=0),
    ])


@pytest.fixture
def niseci_sample_df():
    """The moderately structured sample as a frame (NISECI 0.744)."""
    layout = [(1, 13, 10), (1, 10, 10), (1, 7, 10), (2, 10, 10), (2, 2, 5)]
    rows = []
    for capture_pass, length, n in layout:
        rows.extend(
            {"date": "15/06/2023", "station": "ST01", "capture_pass": capture_pass,
             "species_code": "1", "length_mm": length, "weight_g": 10.0}
            for _ in range(n)
        )
    return pd.DataFrame(rows)


def station_row(**overrides):
    row = {
        "station_code": "ST01",
        "water_body": "Torrente Test",
        "region": "Toscana",
        "province": "Firenze",
        "date": "15/06/2023",
        "station_length_m": 10.0,
        "station_width_m": 1.0,
    }
    row.update(overrides)
    return row


@pytest.fixture
def niseci_station_df():
    return pd.DataFrame([station_row(
        community_type=2, hydro_eco_region=10, alpine_area=0, basin="Arno",
    )])


@pytest.fixture
def hfbi_sample_df():
    return pd.DataFrame([
        {"species_code": "AN", "individuals": 4, "weight_g": 320.0},
        {"species_code": "CLU", "individuals": 2, "weight_g": 45.0},
        {"species_code": "GHN", "individuals": 12, "weight_g": 60.0},
        {"species_code": "SAU", "individuals": 3, "weight_g": 150.0},
        {"species_code": "CH", "individuals": 1, "weight_g": 80.0},
    ])


@pytest.fixture
def hfbi_station_df():
    return pd.DataFrame([station_row(
        station_code="LG01", water_body="Laguna Test", region="Veneto",
        province="Venezia", date="20/04/2023", station_width_m=10.0,
        season=0, habitat=0, lagoon_type=1,
    )])


@pytest.fixture
def make_reference_row():
    return reference_row


@pytest.fixture
def make_station_row():
    return station_row
