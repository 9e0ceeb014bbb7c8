"""
Directional wall analysis.

For a candidate footprint, probe the four cardinal directions at wall height:
a line of samples is cast toward each side and the share of samples that
reach a boundary (plus a small tolerance radius) is the wall coverage.
Uncovered runs are reported as gaps, measured in feet.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .grid_sampler import generate_scan_line, get_scan_height
from .ray_caster import BoxRayCaster, RayCaster
from .types import (
    DIRECTIONS,
    BoundaryCandidate,
    BoundaryHit,
    BoundingBox,
    DetectionSettings,
    Gap,
    WallAnalysis,
    WallDirectionResult,
)
from .units import feet_to_world, world_to_feet


# direction -> (ray direction, scan axis perpendicular to the ray)
DIRECTION_CONFIG = {
    'north': (np.array([0.0, 0.0, 1.0]), 'x'),
    'south': (np.array([0.0, 0.0, -1.0]), 'x'),
    'east': (np.array([1.0, 0.0, 0.0]), 'z'),
    'west': (np.array([-1.0, 0.0, 0.0]), 'z'),
}


def get_direction_config(direction: str) -> Tuple[np.ndarray, str]:
    """Ray direction and scan axis for a cardinal direction."""
    ray_direction, scan_axis = DIRECTION_CONFIG[direction]
    return ray_direction.copy(), scan_axis


def cluster_footprint(
    cluster: Sequence[BoundaryCandidate],
    settings: Optional[DetectionSettings] = None
) -> BoundingBox:
    """Union of the cluster's boxes, padded by the footprint margin."""
    if settings is None:
        settings = DetectionSettings()

    boxes = [c.bounds for c in cluster if c.bounds is not None and not c.bounds.is_degenerate]
    if not boxes:
        raise ValueError("Cluster has no usable bounding boxes")

    footprint = boxes[0]
    for box in boxes[1:]:
        footprint = footprint.union(box)

    return footprint.expanded_xz(feet_to_world(settings.footprint_margin))


def analyze_coverage(
    scan_line: np.ndarray,
    hit_indices: Sequence[int],
    coverage_radius: int = 2,
    step_ft: float = 0.5
) -> Tuple[float, List[Gap]]:
    """
    Mark covered samples and extract the uncovered runs.

    Args:
        scan_line: Nx3 sample points
        hit_indices: Indices of samples whose ray found a boundary
        coverage_radius: Neighbours on each side also marked covered
        step_ft: Sample spacing in feet (gap size = run length * step)

    Returns:
        Tuple of (total_coverage, gaps)
    """
    n = len(scan_line)
    if n == 0:
        return 0.0, []

    covered = np.zeros(n, dtype=bool)
    for index in hit_indices:
        start = max(0, index - coverage_radius)
        end = min(n - 1, index + coverage_radius)
        covered[start:end + 1] = True

    gaps = []
    gap_start = None
    for i in range(n + 1):
        is_covered = covered[i] if i < n else True
        if not is_covered and gap_start is None:
            gap_start = i
        elif is_covered and gap_start is not None:
            gaps.append(Gap(
                start=gap_start,
                end=i - 1,
                size=(i - gap_start) * step_ft,
                start_point=scan_line[gap_start].copy(),
                end_point=scan_line[i - 1].copy()
            ))
            gap_start = None

    return float(np.count_nonzero(covered)) / n, gaps


def analyze_wall_direction(
    from_point: np.ndarray,
    direction: str,
    footprint: BoundingBox,
    candidates: Sequence[BoundaryCandidate],
    settings: Optional[DetectionSettings] = None,
    ray_caster: Optional[RayCaster] = None
) -> WallDirectionResult:
    """
    Cast a line of rays toward one side of the footprint and measure coverage.

    Args:
        from_point: Center of the scan line
        direction: One of 'north', 'south', 'east', 'west'
        footprint: Footprint under test (sets the scan line length)
        candidates: Global candidate list used as ray targets
        settings: Detection settings
        ray_caster: Ray-cast primitive (defaults to bounding boxes)

    Returns:
        WallDirectionResult for this direction
    """
    if settings is None:
        settings = DetectionSettings()
    if ray_caster is None:
        ray_caster = BoxRayCaster()

    ray_direction, scan_axis = get_direction_config(direction)
    axis = 0 if scan_axis == 'x' else 2
    extent_ft = world_to_feet(footprint.size[axis])

    scan_line = generate_scan_line(from_point, scan_axis, extent_ft, settings.grid_resolution)

    hits = ray_caster.cast_rays(
        scan_line,
        ray_direction,
        candidates,
        max_distance=feet_to_world(settings.max_ray_distance)
    )

    boundaries = [
        BoundaryHit(point=scan_line[i].copy(), candidate=hit.candidate,
                    distance=hit.distance, scan_index=i)
        for i, hit in enumerate(hits)
        if hit is not None
    ]

    total_coverage, gaps = analyze_coverage(
        scan_line,
        [b.scan_index for b in boundaries],
        coverage_radius=settings.coverage_radius,
        step_ft=settings.grid_resolution
    )
    for gap in gaps:
        gap.direction = direction

    return WallDirectionResult(
        has_coverage=total_coverage > settings.coverage_threshold,
        boundaries=boundaries,
        gaps=gaps,
        total_coverage=total_coverage,
        scan_line=scan_line
    )


def get_test_points(
    footprint: BoundingBox,
    settings: DetectionSettings
) -> Dict[str, np.ndarray]:
    """Scan line centers, pushed from the footprint center toward each side."""
    center = footprint.center
    size = footprint.size
    test_distance = min(size[0], size[2]) * settings.scan_offset_ratio
    test_height = get_scan_height(settings)

    points = {}
    for direction in DIRECTIONS:
        ray_direction, _ = get_direction_config(direction)
        point = center + ray_direction * test_distance
        point[1] = test_height
        points[direction] = point

    return points


def scan_wall_boundaries(
    footprint: BoundingBox,
    candidates: Sequence[BoundaryCandidate],
    settings: Optional[DetectionSettings] = None,
    ray_caster: Optional[RayCaster] = None
) -> WallAnalysis:
    """
    Test for wall boundaries in the four horizontal directions at wall height.

    Args:
        footprint: Candidate room footprint
        candidates: Global candidate list used as ray targets
        settings: Detection settings
        ray_caster: Ray-cast primitive

    Returns:
        WallAnalysis holding the four directional results
    """
    if settings is None:
        settings = DetectionSettings()
    if ray_caster is None:
        ray_caster = BoxRayCaster()

    test_points = get_test_points(footprint, settings)

    wall_results: Dict[str, WallDirectionResult] = {}
    contributing: Dict[int, BoundaryCandidate] = {}
    gaps: List[Gap] = []

    for direction in DIRECTIONS:
        result = analyze_wall_direction(
            test_points[direction], direction, footprint, candidates, settings, ray_caster
        )
        wall_results[direction] = result

        for boundary in result.boundaries:
            contributing.setdefault(id(boundary.candidate), boundary.candidate)

        # Sub-tolerance gaps are noise
        gaps.extend(g for g in result.gaps if g.size > settings.boundary_tolerance)

    return WallAnalysis(
        wall_results=wall_results,
        has_all_walls=all(r.has_coverage for r in wall_results.values()),
        max_gap_size=max((g.size for g in gaps), default=0.0),
        gaps=gaps,
        contributing_objects=list(contributing.values())
    )
