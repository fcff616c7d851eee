"""CO2 based air quality classification."""

from __future__ import annotations

from enum import Enum


class AirQuality(str, Enum):
    """Air quality buckets derived from CO2 concentration."""

    UNKNOWN = "unknown"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"
    VERY_POOR = "very_poor"
    EXTREMELY_POOR = "extremely_poor"


# Lower bound (ppm, inclusive) of each band, most severe first
CO2_BANDS: tuple[tuple[int, AirQuality], ...] = (
    (2100, AirQuality.EXTREMELY_POOR),
    (1800, AirQuality.VERY_POOR),
    (1200, AirQuality.POOR),
    (800, AirQuality.MODERATE),
)


def classify(co2: float | None) -> AirQuality:
    """Classify a CO2 concentration in ppm.

    Bands are half-open, so a boundary value belongs to the more severe
    band. Missing or non-positive readings are UNKNOWN.
    """
    if co2 is None or co2 <= 0:
        return AirQuality.UNKNOWN
    for lower, quality in CO2_BANDS:
        if co2 >= lower:
            return quality
    return AirQuality.GOOD
