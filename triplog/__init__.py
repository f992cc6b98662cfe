"""
TripLog - multi-day cycling trip log.

Trip documents, coordinate-frame conversion, route distances and map rendering.
"""

__version__ = "0.1.0"
