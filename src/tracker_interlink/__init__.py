"""
Tracker Interlink - Cross-tracker correlation analysis for personal health data.

Detects statistically meaningful, optionally time-lagged relationships between
numeric fields of different health trackers and turns them into ranked insights.
"""

__version__ = "0.1.0"
