"""
Distance units for TripLog output.
Stored distances are always kilometres; conversion happens only for display.
"""

from typing import Optional


class UnitConverter:
    """Converts and formats trip distances."""

    KM_TO_MILES = 0.621371
    MILES_TO_KM = 1.609344

    @staticmethod
    def km_to_miles(km: Optional[float]) -> Optional[float]:
        """Convert kilometers to miles."""
        return km * UnitConverter.KM_TO_MILES if km is not None else None

    @staticmethod
    def miles_to_km(miles: Optional[float]) -> Optional[float]:
        """Convert miles to kilometers."""
        return miles * UnitConverter.MILES_TO_KM if miles is not None else None

    @staticmethod
    def format_distance(distance_km: Optional[float], imperial: bool = False) -> str:
        """Format a distance as ``"12.34 km"`` (or miles); ``"N/A"`` for None."""
        if distance_km is None:
            return "N/A"
        if imperial:
            return f"{UnitConverter.km_to_miles(distance_km):.2f} mi"
        return f"{distance_km:.2f} km"

    @staticmethod
    def get_distance_unit(imperial: bool = False) -> str:
        return "mi" if imperial else "km"
