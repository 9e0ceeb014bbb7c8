"""
Plan-view spatial grid for grouping boundary candidates.
"""

import math
from typing import Dict, Iterator, List, Tuple

from .types import BoundaryCandidate

CellKey = Tuple[int, int]


def cell_key(x: float, z: float, cell_size: float) -> CellKey:
    """Grid cell containing the plan point (x, z)."""
    return (int(math.floor(x / cell_size)), int(math.floor(z / cell_size)))


def create_spatial_grid(
    candidates: List[BoundaryCandidate],
    cell_size: float = 5.0
) -> Dict[CellKey, List[BoundaryCandidate]]:
    """
    Bucket candidates by the grid cell holding their bounding-box center.

    Args:
        candidates: Boundary candidates with usable bounds
        cell_size: Cell edge length in world units (meters)

    Returns:
        Dictionary mapping (grid_x, grid_z) to the candidates in that cell,
        in first-seen order
    """
    grid: Dict[CellKey, List[BoundaryCandidate]] = {}

    for candidate in candidates:
        if candidate.bounds is None or candidate.bounds.is_degenerate:
            continue
        center = candidate.bounds.center
        key = cell_key(center[0], center[2], cell_size)
        grid.setdefault(key, []).append(candidate)

    return grid


def iter_clusters(
    grid: Dict[CellKey, List[BoundaryCandidate]],
    min_cluster_size: int = 4
) -> Iterator[Tuple[CellKey, List[BoundaryCandidate]]]:
    """Yield cells with enough members to possibly enclose a room."""
    for key, members in grid.items():
        if len(members) >= min_cluster_size:
            yield key, members
