from __future__ import annotations

from decimal import Decimal

# -------------------------
# Return rates (annual)
# -------------------------

HYSA_RATE = Decimal("0.045")
STOCK_MARKET_REAL_RETURN = Decimal("0.07")
STOCK_MARKET_NOMINAL_RETURN = Decimal("0.10")
CONSERVATIVE_RATE = Decimal("0.04")

# -------------------------
# Inflation
# -------------------------

DEFAULT_INFLATION_RATE = Decimal("0.03")

# -------------------------
# Limits
# -------------------------

LONG_TERM_THRESHOLD_MONTHS = 60

# 50 years; goals past this are reported unreachable
MAX_PROJECTION_MONTHS = 600

MINIMUM_CONTRIBUTION = Decimal("1.0")

COMPOUNDING_PERIODS_PER_YEAR = 12

# Required-contribution search
BINARY_SEARCH_MAX_ITERATIONS = 50
BINARY_SEARCH_TOLERANCE = Decimal("1")
