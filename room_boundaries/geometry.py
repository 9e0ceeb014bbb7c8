"""
Plan-view polygon math for detected rooms.

Polygons are sequences of (x, z) world coordinates in meters.
"""

from typing import List, Sequence

from shapely.geometry import Polygon

from .types import BoundingBox, Point2D
from .units import SQ_METERS_TO_SQ_FEET


def footprint_polygon(box: BoundingBox) -> List[Point2D]:
    """Project a bounding box onto the floor plane as a 4-point rectangle."""
    min_x, min_z = float(box.min[0]), float(box.min[2])
    max_x, max_z = float(box.max[0]), float(box.max[2])
    return [
        (min_x, min_z),
        (max_x, min_z),
        (max_x, max_z),
        (min_x, max_z),
    ]


def polygon_area(polygon: Sequence[Point2D]) -> float:
    """Shoelace area in square feet (input in meters)."""
    if len(polygon) < 3:
        return 0.0

    area = 0.0
    for i in range(len(polygon)):
        x0, z0 = polygon[i]
        x1, z1 = polygon[(i + 1) % len(polygon)]
        area += x0 * z1 - x1 * z0

    return abs(area) * 0.5 * SQ_METERS_TO_SQ_FEET


def polygon_centroid(polygon: Sequence[Point2D]) -> Point2D:
    """Arithmetic mean of the vertices."""
    if not polygon:
        return (0.0, 0.0)
    n = len(polygon)
    return (
        sum(p[0] for p in polygon) / n,
        sum(p[1] for p in polygon) / n,
    )


def point_in_polygon(x: float, z: float, polygon: Sequence[Point2D]) -> bool:
    """Ray-casting parity test."""
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, zi = polygon[i]
        xj, zj = polygon[j]
        if (zi > z) != (zj > z) and x < (xj - xi) * (z - zi) / (zj - zi) + xi:
            inside = not inside
        j = i
    return inside


def to_shapely(polygon: Sequence[Point2D]) -> Polygon:
    return Polygon([(float(x), float(z)) for x, z in polygon])


def polygon_iou(a: Sequence[Point2D], b: Sequence[Point2D]) -> float:
    """Intersection over union of two plan polygons."""
    poly_a, poly_b = to_shapely(a), to_shapely(b)
    if not poly_a.is_valid or not poly_b.is_valid:
        return 0.0
    union = poly_a.union(poly_b).area
    if union == 0:
        return 0.0
    return poly_a.intersection(poly_b).area / union
