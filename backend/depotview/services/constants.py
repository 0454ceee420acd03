# backend/depotview/services/constants.py
"""
Centralized constants for the portfolio viewer services.

Usage:
    from depotview.services.constants import (
        QUOTE_LOOKBACK_PERIOD,
        RATE_LIMIT_PORTFOLIO,
    )
"""


# =============================================================================
# MARKET DATA SETTINGS
# =============================================================================

# Price window requested from the quote provider. The last close inside the
# window is the current price, so weekends and holidays still yield a quote.
QUOTE_LOOKBACK_PERIOD: str = "5d"


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format: "<count>/<period>" (slowapi / limits syntax)

# Default for endpoints without an explicit limit
RATE_LIMIT_DEFAULT: str = "100/minute"

# Portfolio endpoint: every call hits the statement backend and Yahoo Finance
RATE_LIMIT_PORTFOLIO: str = "30/minute"

# Ad-hoc valuation: CPU only, no upstream calls
RATE_LIMIT_VALUATION: str = "60/minute"

# Health checks, polled by monitoring
RATE_LIMIT_HEALTH: str = "300/minute"
