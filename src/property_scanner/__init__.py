"""
Property Scanner - rental investment deal finder.

Scans for-sale listings across target markets, enriches each one with a
rent estimate, scores it as a buy-and-hold rental, and emails an alert
when a listing clears the configured investment thresholds.
"""

__version__ = "0.1.0"
