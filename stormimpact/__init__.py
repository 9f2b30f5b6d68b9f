"""
Storm Impact
============

Download the NOAA storm event dataset, rank event types by their harm to
population health and by their economic damage, and chart the results.
"""

__version__ = "1.0.0"
