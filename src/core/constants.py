"""
Core constants and limits.

Defines the numeric defaults of the return solver and the system-wide
limits used when validating ledger and price data.
"""

# Return Solver (Newton-Raphson XIRR)
XIRR_INITIAL_GUESS = 0.10  # 10% starting rate
XIRR_TOLERANCE = 1e-6  # Stop when successive rates differ by less than this
XIRR_MAX_ITERATIONS = 100
XIRR_MIN_FLOWS = 2
XIRR_DERIVATIVE_EPSILON = 1e-12  # |NPV'| below this is treated as zero
DAYS_PER_YEAR = 365.25
SECONDS_PER_DAY = 86400.0

# Return Classification (percent thresholds, highest first)
DEFAULT_RETURN_BANDS: tuple[tuple[str, float], ...] = (
    ("excellent", 25.0),
    ("good", 15.0),
    ("positive", 0.0),
    ("negative", float("-inf")),
)

# Ledger Limits
MAX_TRANSACTIONS_PER_REFRESH = 50000  # Guard against runaway feeds
MAX_UNITS_PER_TRANSACTION = 1e9
MAX_INSTRUMENT_ID_LENGTH = 32

# Date formats accepted from the transaction feed and price API
LEDGER_DATE_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%Y-%m-%d")
PRICE_API_DATE_FORMAT = "%d-%m-%Y"

# HTTP Collaborators
DEFAULT_HTTP_TIMEOUT_SECONDS = 15.0
DEFAULT_PRICE_CACHE_SIZE = 256
DEFAULT_PRICE_CACHE_TTL_SECONDS = 900
