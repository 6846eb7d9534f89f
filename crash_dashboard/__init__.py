# ========================
# crash_dashboard/__init__.py
# ========================

"""
Crash Incident Dashboard

Loads the ADAS and ADS incident report feeds and aggregates them into the
monthly crash counts and injury severity breakdowns shown on the dashboard.
"""

__version__ = "1.0.0"
