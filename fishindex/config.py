"""
Centralized configuration for the NISECI and HFBI index engines.

All regulatory constants, classification thresholds and numerical
parameters are defined here with inline references to the methodology
each value comes from.  Engine functions accept optional overrides and
fall back to these values when an argument is None.
"""

import math

# ─── NUMERICAL PARAMETERS ────────────────────────────────────────────────
# Tolerance used for every "approximately equal" comparison in the engines
# (structure scores, near-zero diversity sums, regression slopes).
FLOAT_TOLERANCE = 1e-6

# Final indices are rounded half away from zero at 3 decimals; the NISECI
# ecological quality ratio is rounded at 2 decimals.
INDEX_DECIMALS = 3
RQE_DECIMALS = 2

# ─── REMOVAL-METHOD ABUNDANCE ESTIMATOR ──────────────────────────────────
# Depletion sampling (Zippin 1958; Seber & Le Cren 1967): the catch per
# pass is regressed against the cumulative catch and the x-intercept of
# the fitted line estimates the total population.
# Citation: Zippin, C. (1958). The removal method of population
#           estimation. J. Wildlife Management, 22(1), 82-90.
# The line is fitted by batch gradient descent on min/max-normalised
# points with a fixed schedule so results are reproducible across runs.
REGRESSION_ITERATIONS = 10000
REGRESSION_LEARNING_RATE = 0.001
REGRESSION_INITIAL_SLOPE = -1.0
REGRESSION_INITIAL_INTERCEPT = 1.0

# ─── NISECI SUB-INDEX WEIGHTS ────────────────────────────────────────────
# Following the NISECI methodology (ISPRA, Manuali e Linee Guida
# 159/2017), native species of high ecological importance (class 1)
# weigh more than the remaining native species (class 2).
X1_WEIGHT_PRIMARY = 1.2
X1_WEIGHT_SECONDARY = 0.8

# x2 combines population structure (x2_a) and density (x2_b).
X2_WEIGHT_STRUCTURE = 0.6
X2_WEIGHT_DENSITY = 0.4

# Population-structure score per (criterion A, criterion B) pair.
# Criterion codes: 1 = best, 3 = worst.
STRUCTURE_SCORE_TABLE = {
    (1, 1): 1.0,
    (1, 2): 1.0,
    (1, 3): 0.5,
    (2, 1): 0.5,
    (2, 2): 0.5,
    (2, 3): 0.0,
    (3, 1): 0.0,
    (3, 2): 0.0,
    (3, 3): 0.0,
}

# Criterion A: number of populated length classes.
CRITERION_A_FULL_CLASSES = 4   # >= 4 populated classes → 1
CRITERION_A_PARTIAL_CLASSES = 3  # exactly 3 → 2, otherwise 3

# Density score values (x2_b).
DENSITY_SCORE_HIGH = 1.0    # density > threshold 2
DENSITY_SCORE_MEDIUM = 0.5  # density > threshold 1
DENSITY_SCORE_LOW = 0.0

# x3 tiered alien-impact lookup ("a" term), evaluated in this order.
X3_A_TYPE1_UNSTRUCTURED = 0.5
X3_A_TYPE2_DOMINANT = 0.5
X3_A_TYPE2_MINORITY = 0.75
X3_A_TYPE3_DOMINANT = 0.75
X3_A_TYPE3_MINORITY = 0.85
X3_A_DEFAULT = 1.0

# ─── NISECI RQE AND ECOLOGICAL STATUS ────────────────────────────────────
# RQE = (log10(NISECI) + 2/sqrt(pi)) / 1.0603 (DM 260/2010 as amended).
# Both constants are regulatory values and are kept exactly.
RQE_NISECI_ADDEND = 2.0 / math.sqrt(math.pi)
RQE_NISECI_DIVISOR = 1.0603

# Status class boundaries on the RQE.  The "good" boundary depends on the
# biogeographic area of the station.
NISECI_STATUS_HIGH = 0.8
NISECI_STATUS_GOOD_ALPINE = 0.52
NISECI_STATUS_GOOD_MEDITERRANEAN = 0.6
NISECI_STATUS_MODERATE = 0.4
NISECI_STATUS_POOR = 0.2

# ─── HFBI MULTIMETRIC INDEX ──────────────────────────────────────────────
# Habitat Fish Bio-Index for Mediterranean coastal lagoons.  Each metric is
# expressed as a ratio to its reference condition and weighted.
HFBI_METRIC_WEIGHTS = {
    "ddom": 1.0,
    "bn": 0.7,
    "dmig": 0.05,
    "bbent": 0.82,
    "dbent": 0.37,
    "dhzp": 0.84,
}

# hfbi = (mmi - offset) / scale
HFBI_MMI_OFFSET = 0.167
HFBI_MMI_SCALE = 0.150

# Biomass densities are expressed per 100 m² of transect.
HFBI_DENSITY_SURFACE = 100.0

# ddom: S90 counts the species needed to exceed 90% of the total biomass.
HFBI_DOMINANCE_FRACTION = 0.9

# dbent / dhzp short-circuit when the diversity sum sits on the log-domain
# singularity.
HFBI_DIVERSITY_SINGULARITY = 0.2
HFBI_DIVERSITY_SINGULARITY_VALUE = 0.01

# Status class boundaries on the raw HFBI value.
HFBI_STATUS_EXCELLENT = 0.94
HFBI_STATUS_GOOD = 0.55
HFBI_STATUS_SUFFICIENT = 0.33
HFBI_STATUS_POOR = 0.11

# ─── INGESTION ───────────────────────────────────────────────────────────
# Survey dates are recorded as day/month/year.
STATION_DATE_FORMAT = "%d/%m/%Y"

# ─── RUNTIME ─────────────────────────────────────────────────────────────
DEFAULT_OUTPUT_DIR = "outputs"
DEFAULT_CSV_DELIMITER = ","
