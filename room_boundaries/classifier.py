"""
Boundary candidate classification.

Decides which scene objects may act as room boundaries. The rules mirror how
walls, furniture and blocking masses behave in a plan view: tall thin
objects, large footprints, and anything explicitly tagged.
"""

from typing import Iterable, List

from .types import BoundaryCandidate

# Thresholds in world units (meters)
MAX_WALL_THICKNESS = 1.0
MIN_FURNITURE_FOOTPRINT = 4.0

BLOCKING_MASS_TYPE = 'room_mass'


def is_wall_like(candidate: BoundaryCandidate) -> bool:
    """Tall and thin: height above both plan extents, under 1 m thick."""
    if candidate.is_wall_like:
        return True
    width, height, depth = candidate.bounds.size
    return bool(height > max(width, depth) and min(width, depth) < MAX_WALL_THICKNESS)


def is_large_furniture(candidate: BoundaryCandidate) -> bool:
    width, _, depth = candidate.bounds.size
    return bool(width * depth >= MIN_FURNITURE_FOOTPRINT)


def is_blocking_mass(candidate: BoundaryCandidate) -> bool:
    meta = candidate.metadata
    return bool(
        candidate.is_blocking_mass
        or meta.get('type') == BLOCKING_MASS_TYPE
        or meta.get('is_blocking_mass')
    )


def is_designated_boundary(candidate: BoundaryCandidate) -> bool:
    return bool(candidate.is_designated_boundary or candidate.metadata.get('is_boundary'))


def is_potential_boundary(candidate: BoundaryCandidate) -> bool:
    """
    Check if an object can form room boundaries.

    Args:
        candidate: Scene object with a usable bounding box

    Returns:
        True if any of the wall-like, large furniture, blocking mass or
        designated boundary rules match
    """
    if candidate.bounds is None or candidate.bounds.is_degenerate:
        return False

    return (
        is_wall_like(candidate)
        or is_large_furniture(candidate)
        or is_blocking_mass(candidate)
        or is_designated_boundary(candidate)
    )


def get_boundary_candidates(objects: Iterable[BoundaryCandidate]) -> List[BoundaryCandidate]:
    """
    Filter scene objects down to the ones that can bound a room.

    Helper visuals and objects without usable geometry are dropped silently.
    """
    return [
        obj for obj in objects
        if not obj.is_helper and is_potential_boundary(obj)
    ]
