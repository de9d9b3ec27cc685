"""
Central Configuration Module for the Happiness Dashboard.

=== PURPOSE ===
This module is the single source of truth for every tunable constant used
across the dashboard: the year bounds enforced by the selection slider, the
CSV column names of every metric, the series labels and their colors, the
density-estimation parameters of the ridgeline plot and the timing of the
auto-play sweep.  Every other module imports from here rather than defining
its own magic numbers.

=== DATA FLOW ===
  1. DATA_DIR / *_FILE name the CSV inputs read once by
     ``happiness_dashboard.core.data_loader``.
  2. DATASET_MIN_YEAR / DATASET_MAX_YEAR are the hard bounds the
     ``SelectionBroadcaster`` clamps to before publishing a YearRange.
  3. METRICS describes the seven happiness indicators (raw column, min-max
     normalized column, short label) used by every chart.
  4. KDE_BANDWIDTH / KDE_GRID_TICKS drive the ridgeline density curves.
  5. PLAYBACK_* drive the auto-play sweep of the line chart.
"""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# ==========================================
# DATA FILES
# ==========================================
# Project root is two levels up: core/ -> happiness_dashboard/ -> root.
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# HAPPINESS_DATA_DIR overrides the default <root>/data location.
DATA_DIR = Path(os.environ.get('HAPPINESS_DATA_DIR', PROJECT_ROOT / 'data'))

UKRAINE_FILE = 'dataset-ukrain.csv'
BEST_FILE = 'bestranking.csv'
WORST_FILE = 'worstranking.csv'

# Aggregate tables: one row per statistic (MEDIAN / MIN / MAX) in the
# first, unnamed column.
AVERAGE_BEST_FILE = 'average-best.csv'
AVERAGE_WORST_FILE = 'average-worst.csv'
AVERAGE_UKRAINE_FILE = 'average-ukraine.csv'

# ==========================================
# YEAR BOUNDS
# ==========================================
# Hard bounds: every published YearRange lies inside [min, max].
DATASET_MIN_YEAR = 2015
DATASET_MAX_YEAR = 2024

# Soft bounds: the slider track extends past the data so the user can drag
# out of range; values are clamped back before broadcast.
SLIDER_MIN_YEAR = 2013
SLIDER_MAX_YEAR = 2026

DEFAULT_RANGE = (DATASET_MIN_YEAR, DATASET_MAX_YEAR)

# ==========================================
# COLUMN NAMES
# ==========================================
COL_YEAR = 'YEAR'
COL_COUNTRY = 'Country'
COL_RANKING = 'RANKING'
COL_POPULATION = 'POPULATION'
COL_SERIES = 'SERIES'

# Suffix appended by the source spreadsheet to min-max normalized columns.
NORMALIZED_SUFFIX = ' MIN-MAX NORMALIZATION'

# The seven happiness indicators.  ``raw`` is the source column,
# ``norm`` its normalized [0, 1] counterpart and ``label`` the short name
# shown on axes and legends.
METRICS = [
    {'raw': 'HAPPINESS SCORE', 'label': 'Happiness'},
    {'raw': 'GDP PER CAPITA (Billions)', 'label': 'GDP per Capita'},
    {'raw': 'SOCIAL SUPPORT', 'label': 'Social Support'},
    {'raw': 'HEALTHY LIFE EXPECTANCY', 'label': 'Healthy Life'},
    {'raw': 'FREEDOM TO MAKE LIFE CHOICES', 'label': 'Freedom'},
    {'raw': 'GENEROSITY', 'label': 'Generosity'},
    {'raw': 'PERCEPTION OF CORRUPTION', 'label': 'Corruption'},
]
for _metric in METRICS:
    _metric['norm'] = _metric['raw'] + NORMALIZED_SUFFIX

RAW_METRICS = [m['raw'] for m in METRICS]
NORMALIZED_METRICS = [m['norm'] for m in METRICS]
METRIC_LABELS = {m['raw']: m['label'] for m in METRICS}
METRIC_LABELS.update({m['norm']: m['label'] for m in METRICS})

HAPPINESS = 'HAPPINESS SCORE'
HAPPINESS_NORM = HAPPINESS + NORMALIZED_SUFFIX

# Heatmap rows: the ranking followed by every raw metric.
HEATMAP_PARAMETERS = [COL_RANKING] + RAW_METRICS

# ==========================================
# SERIES
# ==========================================
SERIES_BEST = 'Best'
SERIES_WORST = 'Worst'
SERIES_UKRAINE = 'Ukraine'
SERIES_ORDER = [SERIES_BEST, SERIES_WORST, SERIES_UKRAINE]

# Placeholder for a country missing from a cross-referenced series.
MISSING_LABEL = 'N/A'

# ==========================================
# CHART PARAMETERS
# ==========================================
# Fixed y-axis ceiling of the ranking bar charts (scores are 0-10, the
# best country never exceeds 8).
RANKING_BAR_MAX = 8.5

# Bubble chart defaults: the three dropdowns must differ.
BUBBLE_DEFAULTS = {
    'x': 'GDP PER CAPITA (Billions)',
    'y': 'HAPPINESS SCORE',
    'size': 'HEALTHY LIFE EXPECTANCY',
}
BUBBLE_SIZE_RANGE = (4, 40)
BUBBLE_DOMAIN_PADDING = 1.1

# Circle packing leaf value = score * factor.
PACK_VALUE_FACTOR = 10

# ==========================================
# DENSITY ESTIMATION (ridgeline plot)
# ==========================================
KDE_BANDWIDTH = 0.12
KDE_GRID_TICKS = 80
KDE_DOMAIN = (0.0, 1.0)
# Fixed density axis so ridges share one vertical scale.
KDE_Y_MAX = 1.4

# ==========================================
# PLAYBACK (auto-play sweep)
# ==========================================
PLAYBACK_INTERVAL_MS = 700
PLAYBACK_WINDOW_YEARS = 2

# ==========================================
# YEAR NARRATIVES (area chart hover text)
# ==========================================
YEAR_DESCRIPTIONS = {
    2015: "Conflict escalation in Eastern Ukraine continues; the economy contracts and consumer confidence falls. "
          "International aid discussions intensify while households report rising uncertainty over livelihoods.",
    2016: "Fragile recovery attempts begin with limited reforms; currency stabilizes slightly but real incomes remain low. "
          "Humanitarian organizations expand presence; trust in institutions remains weak.",
    2017: "Incremental improvements in service delivery occur; modest infrastructure repairs start. "
          "Some displaced families return cautiously; optimism grows slowly but remains uneven.",
    2018: "Economic indicators show modest gains; social support networks strengthen in urban centers. "
          "Civic engagement rises; corruption perceptions persist, tempering overall confidence.",
    2019: "Pre-war baseline year with relatively higher stability and slight optimism. "
          "Daily life normalizes; social cohesion feels stronger in many regions.",
    2020: "Pandemic shocks the economy; mobility restrictions intensify stress. "
          "Healthcare strain rises; communities rely more on mutual aid amid uncertainty.",
    2021: "Partial recovery from pandemic; vaccination campaigns ramp up. "
          "Inflation pressures households; focus on preparedness and social safety nets increases.",
    2022: "Full-scale invasion triggers sharp declines in wellbeing; displacement surges. "
          "Emergency relief dominates; uncertainty and safety dominate perceptions.",
    2023: "Adaptation under conflict conditions; humanitarian corridors and services stabilize somewhat. "
          "Community-led support deepens; people balance vigilance with cautious hope.",
    2024: "Ongoing conflict backdrop with gradual reconstruction in some areas. "
          "Local recovery projects expand; focus on mental health and livelihoods grows.",
}
