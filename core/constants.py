"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Defines all system-wide constants.

- Single source of truth for documented default values
- Every fallback the derivation engine applies lives here
- No business logic here

============================================================
"""

# ============================================================
# SYSTEM CONSTANTS
# ============================================================

SYSTEM_NAME = "clinical-waste-intelligence"
SYSTEM_VERSION = "1.0.0"


# ============================================================
# DERIVATION DEFAULTS
# ============================================================

# Expected daily load used when a department has no baseline
DEFAULT_EXPECTED_DAILY_KG = 50.0

# Flat disposal rate applied to the whole fleet
DEFAULT_COST_PER_KG = 2.5

# Sustainability score reported when no waste has been tracked
DEFAULT_SUSTAINABILITY_SCORE = 82

# Trailing window of the trend chart
DEFAULT_TREND_WINDOW_DAYS = 7


# ============================================================
# RISK BANDS
# ============================================================

HIGH_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 50

MIN_RISK_SCORE = 0
MAX_RISK_SCORE = 100


# ============================================================
# BASELINE FORM DEFAULTS
# ============================================================

DEFAULT_BASELINE_RISK_THRESHOLD = 70.0
DEFAULT_BASELINE_INFECTIOUS_RATIO = 30.0
DEFAULT_BASELINE_SHARPS_RATIO = 15.0


# ============================================================
# TIMEOUTS
# ============================================================

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0
DEFAULT_ANALYZER_TIMEOUT_SECONDS = 30.0
