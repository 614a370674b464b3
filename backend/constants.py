"""
Centralized Constants - SINGLE SOURCE OF TRUTH

Source column names, statistical thresholds, histogram bins and display
labels for the land transaction dashboard. Import from here; DO NOT
duplicate these definitions in other files.

Source file: semicolon-separated export of rural land offers
(one row per offer, Spanish column headers).
"""

# =============================================================================
# SOURCE COLUMNS (records file header row)
# =============================================================================

COL_PRICE = 'Precio total'
COL_SURFACE = 'Superficie total(ha)'
COL_PARCELS = 'Padrones'
COL_DATE = 'Fecha ingreso trámite'
COL_TYPE = 'Tipo'
COL_BUSINESS_TYPE = 'Tipo de negocio'
COL_FILE_ID = 'Nº expediente'
COL_OCCUPANCY = 'Estado de ocupación'

SOURCE_COLUMNS = [
    COL_PRICE,
    COL_SURFACE,
    COL_PARCELS,
    COL_DATE,
    COL_TYPE,
    COL_BUSINESS_TYPE,
    COL_FILE_ID,
    COL_OCCUPANCY,
]

# Boundary features carry the department name under this property
BOUNDARY_NAME_PROPERTY = 'NAME_1'


# =============================================================================
# TRANSACTION TYPES
# =============================================================================

TRANSACTION_TYPE_ART_5 = 'Art. 5°'
TRANSACTION_TYPE_ART_35 = 'Art. 35°'
TRANSACTION_TYPE_DIRECT = 'Directo'


# =============================================================================
# STATISTICS
# =============================================================================

# Price per hectare at or above this value is treated as a data-entry outlier
# and excluded from every average/median/min/max of price per hectare.
PRICE_PER_HA_CEILING = 100_000

# Sentinel primary region for records whose parcel path names no department
UNKNOWN_REGION = 'Sin datos'

# Fallback labels for category breakdowns
OTHER_LABEL = 'Otro'
MISSING_CATEGORY_LABEL = 'Sin datos'

# Trailing window (months) for timeline moving averages
TIMELINE_MA_WINDOW = 6

# Rows in the top transactions table
TOP_TRANSACTIONS_LIMIT = 20

# Increment analysis window (years)
DEFAULT_WINDOW_YEARS = 5
MIN_WINDOW_YEARS = 1

# A region needs at least this many years with data to have a trajectory
MIN_YEARS_FOR_INCREMENT = 2


# =============================================================================
# HISTOGRAM BIN EDGES
# =============================================================================

PRICE_BIN_EDGES = [
    0, 100_000, 500_000, 1_000_000, 2_000_000, 5_000_000,
    10_000_000, 20_000_000, 50_000_000, 200_000_000,
]

SURFACE_BIN_EDGES = [0, 50, 100, 250, 500, 1000, 2000, 5000, 10000, 30000]

PRICE_PER_HA_BIN_EDGES = [
    0, 500, 1000, 2000, 3000, 4000, 5000, 7500, 10000, 15000, 30000, 100_000,
]

# Bins whose upper edge reaches this value are labelled open-ended ("min+")
OPEN_ENDED_BIN_THRESHOLD = 100_000_000


# =============================================================================
# DISPLAY
# =============================================================================

MONTH_SHORT_NAMES = [
    'Ene', 'Feb', 'Mar', 'Abr', 'May', 'Jun',
    'Jul', 'Ago', 'Sep', 'Oct', 'Nov', 'Dic',
]

CURRENCY_PREFIX = 'U$S'
MISSING_VALUE_DISPLAY = '—'


# =============================================================================
# TABLE SORTING
# =============================================================================

# Columns sorted ascending on first click; every other column starts descending
NAME_COLUMNS = {'name'}

REGION_TABLE_COLUMNS = [
    'name', 'count', 'totalVal', 'totalHa',
    'avgPxHa', 'medPxHa', 'minPxHa', 'maxPxHa', 'avgSize',
]

INCREMENT_TABLE_COLUMNS = [
    'name', 'startPrice', 'endPrice', 'absChange', 'pctChange', 'txCount',
]

DEFAULT_REGION_SORT = ('name', True)
DEFAULT_INCREMENT_SORT = ('pctChange', False)
