# backend/depotview/__init__.py
"""
Depot Portfolio Viewer backend.

Aggregates a client's buy/sell transactions into holdings, values them with
live market quotes and serves the result to the frontend.
"""

__version__ = "0.1.0"
