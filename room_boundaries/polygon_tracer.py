"""
Polygon tracing for non-rectangular rooms.

The main pipeline always reports the cluster footprint rectangle. This module
instead projects candidate boxes to plan-view edges, nodes them, and
polygonizes the result; faces not covered by any candidate are the enclosed
negative space. It is not wired into RoomBoundaryDetector.
"""

from typing import List, Sequence, Tuple

from shapely.geometry import LineString, Polygon, box
from shapely.ops import polygonize, unary_union

from .types import BoundaryCandidate, Point2D
from .units import SQ_METERS_TO_SQ_FEET

SEGMENT_SNAP_PRECISION = 6  # Decimal places (meters) for coordinate snapping

Edge = Tuple[Point2D, Point2D, BoundaryCandidate]


def snap_coordinate(value: float, precision: int = SEGMENT_SNAP_PRECISION) -> float:
    """Snap a coordinate to a fixed precision grid."""
    factor = 10 ** precision
    return round(value * factor) / factor


def _usable(candidates: Sequence[BoundaryCandidate]) -> List[BoundaryCandidate]:
    return [c for c in candidates if c.bounds is not None and not c.bounds.is_degenerate]


def candidate_footprint(candidate: BoundaryCandidate) -> Polygon:
    """Plan-view rectangle of a candidate's bounding box."""
    b = candidate.bounds
    return box(b.min[0], b.min[2], b.max[0], b.max[2])


def project_candidates_to_edges(candidates: Sequence[BoundaryCandidate]) -> List[Edge]:
    """
    Project each candidate box to its four plan-view edges.

    Returns:
        List of (start, end, candidate) tuples in (x, z) coordinates
    """
    edges: List[Edge] = []

    for candidate in _usable(candidates):
        b = candidate.bounds
        corners = [
            (b.min[0], b.min[2]),
            (b.max[0], b.min[2]),
            (b.max[0], b.max[2]),
            (b.min[0], b.max[2]),
        ]
        for i in range(4):
            start = corners[i]
            end = corners[(i + 1) % 4]
            edges.append((
                (snap_coordinate(start[0]), snap_coordinate(start[1])),
                (snap_coordinate(end[0]), snap_coordinate(end[1])),
                candidate
            ))

    return edges


def trace_enclosed_polygons(
    candidates: Sequence[BoundaryCandidate],
    min_area: float = 25.0
) -> List[Polygon]:
    """
    Find plan-view regions fully enclosed by candidate footprints.

    Args:
        candidates: Boundary candidates
        min_area: Minimum region area in square feet

    Returns:
        Shapely polygons in (x, z) meters, largest first
    """
    usable = _usable(candidates)
    if len(usable) < 3:
        return []

    lines = []
    for start, end, _ in project_candidates_to_edges(usable):
        # Skip degenerate segments
        if start == end:
            continue
        lines.append(LineString([start, end]))

    if len(lines) < 3:
        return []

    # Node the lines so crossing walls split each other
    noded = unary_union(lines)
    faces = list(polygonize(noded))

    solid = unary_union([candidate_footprint(c) for c in usable])

    free_faces = [
        face for face in faces
        if face.is_valid and not solid.contains(face.representative_point())
    ]
    if not free_faces:
        return []

    merged = unary_union(free_faces)
    polygons = list(merged.geoms) if hasattr(merged, 'geoms') else [merged]

    enclosed = [
        p for p in polygons
        if isinstance(p, Polygon) and not p.is_empty
        and p.area * SQ_METERS_TO_SQ_FEET >= min_area
    ]
    enclosed.sort(key=lambda p: p.area, reverse=True)

    return enclosed
