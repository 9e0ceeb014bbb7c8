"""
Unit conversion constants for room boundary detection.

Raw scene geometry is in meters. Detection tunables (scan step, gap sizes,
ray reach, room areas) are expressed in feet and converted here.
"""

METERS_TO_FEET = 3.28084
FEET_TO_METERS = 1.0 / METERS_TO_FEET

SQ_METERS_TO_SQ_FEET = METERS_TO_FEET * METERS_TO_FEET


def feet_to_world(feet: float) -> float:
    """Convert a length in feet to world units (meters)."""
    return float(feet) * FEET_TO_METERS


def world_to_feet(meters: float) -> float:
    """Convert a world length (meters) to feet."""
    return float(meters) * METERS_TO_FEET
