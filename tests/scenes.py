"""Synthetic wall layouts for detector tests.

`box_room` places four thin walls so that the detector's padded cluster
footprint is exactly `width_ft` x `depth_ft` with its lower corner at `origin`.
"""

from typing import List, Optional, Tuple

import numpy as np

from room_boundaries import BoundaryCandidate, BoundingBox, EnclosureVerdict, WallDirectionResult
from room_boundaries.types import DIRECTIONS
from room_boundaries.units import feet_to_world

WALL_THICKNESS = 0.1            # m
WALL_HEIGHT = feet_to_world(8.0)
FOOTPRINT_MARGIN = feet_to_world(0.5)


def make_box(
    handle: str,
    x: Tuple[float, float],
    z: Tuple[float, float],
    y: Tuple[float, float] = (0.0, WALL_HEIGHT),
    **kwargs
) -> BoundaryCandidate:
    bounds = BoundingBox(min=[x[0], y[0], z[0]], max=[x[1], y[1], z[1]])
    return BoundaryCandidate(handle=handle, bounds=bounds, **kwargs)


def outer_extents(
    width_ft: float,
    depth_ft: float,
    origin: Tuple[float, float] = (1.0, 1.0)
) -> Tuple[float, float, float, float]:
    """(x0, x1, z0, z1) of the wall union for a given footprint."""
    x0 = origin[0] + FOOTPRINT_MARGIN
    x1 = origin[0] + feet_to_world(width_ft) - FOOTPRINT_MARGIN
    z0 = origin[1] + FOOTPRINT_MARGIN
    z1 = origin[1] + feet_to_world(depth_ft) - FOOTPRINT_MARGIN
    return x0, x1, z0, z1


def box_room(
    width_ft: float,
    depth_ft: float,
    origin: Tuple[float, float] = (1.0, 1.0),
    omit: Tuple[str, ...] = (),
    north_opening_ft: Optional[float] = None,
    prefix: str = ""
) -> List[BoundaryCandidate]:
    """
    Four walls enclosing a rectangle.

    Args:
        width_ft: Footprint extent along x
        depth_ft: Footprint extent along z
        origin: Lower (x, z) corner of the footprint in meters
        omit: Wall names to leave out ('north', 'south', 'east', 'west')
        north_opening_ft: Split the north wall around a centered opening
        prefix: Prepended to every wall handle
    """
    x0, x1, z0, z1 = outer_extents(width_ft, depth_ft, origin)
    t = WALL_THICKNESS
    walls = []

    if 'north' not in omit:
        if north_opening_ft is None:
            walls.append(make_box(f"{prefix}north", (x0, x1), (z1 - t, z1), is_wall_like=True))
        else:
            cx = (x0 + x1) / 2
            half = feet_to_world(north_opening_ft) / 2
            walls.append(make_box(f"{prefix}north_left", (x0, cx - half), (z1 - t, z1),
                                  is_wall_like=True))
            walls.append(make_box(f"{prefix}north_right", (cx + half, x1), (z1 - t, z1),
                                  is_wall_like=True))
    if 'south' not in omit:
        walls.append(make_box(f"{prefix}south", (x0, x1), (z0, z0 + t), is_wall_like=True))
    if 'east' not in omit:
        walls.append(make_box(f"{prefix}east", (x1 - t, x1), (z0, z1), is_wall_like=True))
    if 'west' not in omit:
        walls.append(make_box(f"{prefix}west", (x0, x0 + t), (z0, z1), is_wall_like=True))

    return walls


def inner_extents(
    width_ft: float,
    depth_ft: float,
    origin: Tuple[float, float] = (1.0, 1.0)
) -> Tuple[float, float, float, float]:
    """(x0, x1, z0, z1) of the free space inside `box_room` walls."""
    x0, x1, z0, z1 = outer_extents(width_ft, depth_ft, origin)
    t = WALL_THICKNESS
    return x0 + t, x1 - t, z0 + t, z1 - t


def make_verdict(enclosed=True, max_gap=0.0, confidence=1.0) -> EnclosureVerdict:
    """Enclosure verdict with uniform per-direction results."""
    per_direction = {
        d: WallDirectionResult(
            has_coverage=enclosed,
            boundaries=[],
            gaps=[],
            total_coverage=1.0 if enclosed else 0.0,
            scan_line=np.zeros((0, 3)),
        )
        for d in DIRECTIONS
    }
    return EnclosureVerdict(
        is_fully_enclosed=enclosed,
        max_gap_size=max_gap,
        confidence=confidence,
        per_direction=per_direction,
    )
