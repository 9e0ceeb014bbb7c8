import numpy as np
import pytest

from room_boundaries import (
    DetectionSettings,
    WallAnalysis,
    WallDirectionResult,
    analyze_wall_enclosure,
    evaluate_gates,
)
from room_boundaries.enclosure import (
    AREA_OUT_OF_BOUNDS,
    GAP_TOO_LARGE,
    INCOMPLETE_WALLS,
    LOW_CONFIDENCE,
    describe_rejection,
    gap_penalty,
)
from room_boundaries.types import DIRECTIONS

from tests.scenes import make_verdict


def _direction(coverage: float, has_coverage: bool = True) -> WallDirectionResult:
    return WallDirectionResult(
        has_coverage=has_coverage,
        boundaries=[],
        gaps=[],
        total_coverage=coverage,
        scan_line=np.zeros((0, 3)),
    )


def _analysis(coverages, max_gap: float = 0.0, threshold: float = 0.7) -> WallAnalysis:
    results = {d: _direction(c, c > threshold) for d, c in zip(DIRECTIONS, coverages)}
    return WallAnalysis(
        wall_results=results,
        has_all_walls=all(r.has_coverage for r in results.values()),
        max_gap_size=max_gap,
        gaps=[],
        contributing_objects=[],
    )


def test_full_coverage_is_full_confidence() -> None:
    verdict = analyze_wall_enclosure(_analysis([1.0, 1.0, 1.0, 1.0]))

    assert verdict.is_fully_enclosed
    assert verdict.confidence == pytest.approx(1.0)


def test_gap_reduces_confidence() -> None:
    verdict = analyze_wall_enclosure(_analysis([0.75] * 4, max_gap=0.5))

    assert verdict.confidence == pytest.approx(0.75 * 0.75)
    assert evaluate_gates(verdict, 120.0) == LOW_CONFIDENCE


def test_gap_penalty_is_capped() -> None:
    settings = DetectionSettings()
    assert gap_penalty(5.0, settings) == 1.0
    assert gap_penalty(0.25, settings) == pytest.approx(0.25)

    verdict = analyze_wall_enclosure(_analysis([1.0] * 4, max_gap=5.0), settings)
    assert verdict.confidence == pytest.approx(0.5)


def test_uncovered_direction_is_left_out_of_the_mean() -> None:
    verdict = analyze_wall_enclosure(_analysis([0.9, 0.9, 0.9, 0.1]))

    assert not verdict.is_fully_enclosed
    assert verdict.confidence == pytest.approx(0.9)


def test_no_coverage_anywhere() -> None:
    verdict = analyze_wall_enclosure(_analysis([0.0] * 4))
    assert verdict.confidence == 0.0


def test_gates_accept_good_room() -> None:
    assert evaluate_gates(make_verdict(), 120.0) is None


@pytest.mark.parametrize(
    "verdict, area, reason",
    [
        (make_verdict(enclosed=False), 120.0, INCOMPLETE_WALLS),
        (make_verdict(max_gap=1.5), 120.0, GAP_TOO_LARGE),
        (make_verdict(confidence=0.6), 120.0, LOW_CONFIDENCE),
        (make_verdict(), 20.0, AREA_OUT_OF_BOUNDS),
        (make_verdict(), 15000.0, AREA_OUT_OF_BOUNDS),
    ],
)
def test_each_gate_rejects_independently(verdict, area, reason) -> None:
    assert evaluate_gates(verdict, area) == reason


def test_gates_run_in_order() -> None:
    verdict = make_verdict(enclosed=False, max_gap=3.0, confidence=0.1)
    assert evaluate_gates(verdict, 5.0) == INCOMPLETE_WALLS

    verdict = make_verdict(max_gap=3.0, confidence=0.1)
    assert evaluate_gates(verdict, 5.0) == GAP_TOO_LARGE


def test_gap_at_limit_is_accepted() -> None:
    assert evaluate_gates(make_verdict(max_gap=1.0), 120.0) is None


def test_rejection_message_names_missing_walls() -> None:
    settings = DetectionSettings()
    verdict = make_verdict()
    verdict.is_fully_enclosed = False
    verdict.per_direction['east'] = _direction(0.2, False)

    message = describe_rejection(INCOMPLETE_WALLS, verdict, 120.0, settings)

    assert "east" in message
    assert "north" not in message
