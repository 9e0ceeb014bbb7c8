"""
Scan-line sampling for the directional wall analysis.
"""

import math

import numpy as np

from .types import DetectionSettings
from .units import feet_to_world

AXIS_INDEX = {'x': 0, 'y': 1, 'z': 2}


def get_scan_height(settings: DetectionSettings) -> float:
    """World Y at which walls are probed."""
    return settings.floor_level + feet_to_world(settings.wall_analysis_height)


def sample_count(extent_ft: float, step_ft: float) -> int:
    """
    Number of samples covering `extent_ft` at `step_ft` spacing.

    The ratio is rounded before ceil() so that an extent that is an exact
    multiple of the step does not gain a sample from float noise.
    """
    if extent_ft <= 0:
        return 0
    return int(math.ceil(round(extent_ft / step_ft, 6)))


def generate_scan_line(
    center_point: np.ndarray,
    scan_axis: str,
    extent_ft: float,
    step_ft: float = 0.5
) -> np.ndarray:
    """
    Generate a line of scan points centered on `center_point`.

    Sample i sits at offset (i - n/2) * step along the scan axis, so the
    line spans the footprint extent with the center just right of the middle.

    Args:
        center_point: World-space point the scan line is centered on
        scan_axis: 'x' or 'z'
        extent_ft: Footprint length along the scan axis, in feet
        step_ft: Spacing between samples, in feet

    Returns:
        Nx3 array of sample points
    """
    n = sample_count(extent_ft, step_ft)
    center_point = np.asarray(center_point, dtype=np.float64)

    if n == 0:
        return np.zeros((0, 3))

    offsets = (np.arange(n) - n / 2.0) * feet_to_world(step_ft)

    points = np.tile(center_point, (n, 1))
    points[:, AXIS_INDEX[scan_axis]] += offsets

    return points
