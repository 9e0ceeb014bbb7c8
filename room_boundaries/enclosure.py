"""
Enclosure evaluation and room acceptance gates.
"""

from typing import Optional

from .types import DetectionSettings, EnclosureVerdict, WallAnalysis

# Rejection reasons, in gate order
INCOMPLETE_WALLS = 'incomplete_walls'
GAP_TOO_LARGE = 'gap_too_large'
LOW_CONFIDENCE = 'low_confidence'
AREA_OUT_OF_BOUNDS = 'area_out_of_bounds'


def gap_penalty(max_gap_size: float, settings: DetectionSettings) -> float:
    """Share of the gap allowance used up, capped at 1."""
    if settings.max_gap_size <= 0:
        return 1.0 if max_gap_size > 0 else 0.0
    return min(max_gap_size / settings.max_gap_size, 1.0)


def analyze_wall_enclosure(
    wall_analysis: WallAnalysis,
    settings: Optional[DetectionSettings] = None
) -> EnclosureVerdict:
    """
    Combine the four directional scans into one enclosure verdict.

    Confidence is the mean coverage of the directions that have coverage,
    reduced by up to `gap_penalty_weight` for the largest gap. A direction
    without coverage is left out of the mean rather than counted as zero;
    the enclosure flag already rejects it.

    Args:
        wall_analysis: Result of scan_wall_boundaries()
        settings: Detection settings

    Returns:
        EnclosureVerdict
    """
    if settings is None:
        settings = DetectionSettings()

    covered = [
        r.total_coverage for r in wall_analysis.wall_results.values()
        if r.has_coverage
    ]
    average_coverage = sum(covered) / len(covered) if covered else 0.0

    penalty = gap_penalty(wall_analysis.max_gap_size, settings)
    confidence = average_coverage * (1 - settings.gap_penalty_weight * penalty)

    return EnclosureVerdict(
        is_fully_enclosed=wall_analysis.has_all_walls,
        max_gap_size=wall_analysis.max_gap_size,
        confidence=min(max(confidence, 0.0), 1.0),
        per_direction=wall_analysis.wall_results,
        gaps=wall_analysis.gaps,
        boundary_count=len(wall_analysis.contributing_objects)
    )


def evaluate_gates(
    verdict: EnclosureVerdict,
    area: float,
    settings: Optional[DetectionSettings] = None
) -> Optional[str]:
    """
    Run the acceptance gates in order and report the first failure.

    Args:
        verdict: Enclosure verdict for the footprint
        area: Footprint area in square feet
        settings: Detection settings

    Returns:
        None if the room is accepted, else one of the rejection reasons
    """
    if settings is None:
        settings = DetectionSettings()

    if not verdict.is_fully_enclosed:
        return INCOMPLETE_WALLS
    if verdict.max_gap_size > settings.max_gap_size:
        return GAP_TOO_LARGE
    if verdict.confidence <= settings.min_confidence:
        return LOW_CONFIDENCE
    if not settings.min_room_area <= area <= settings.max_room_area:
        return AREA_OUT_OF_BOUNDS
    return None


def describe_rejection(
    reason: str,
    verdict: EnclosureVerdict,
    area: float,
    settings: DetectionSettings
) -> str:
    """Human-readable rejection message for logs."""
    if reason == INCOMPLETE_WALLS:
        missing = [d for d, r in verdict.per_direction.items() if not r.has_coverage]
        return f"incomplete walls (no coverage: {', '.join(missing)})"
    if reason == GAP_TOO_LARGE:
        return f"gaps too large ({verdict.max_gap_size:.1f}ft > {settings.max_gap_size}ft)"
    if reason == LOW_CONFIDENCE:
        return f"low confidence ({verdict.confidence:.2f} <= {settings.min_confidence})"
    return (f"room size out of bounds: {area:.1f} sq ft "
            f"(min: {settings.min_room_area}, max: {settings.max_room_area})")
