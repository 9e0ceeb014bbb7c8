import threading
import time

import numpy as np
import pytest

from room_boundaries import BoxRayCaster, DetectionSettings, RoomBoundaryDetector, StaticScene
from room_boundaries.enclosure import AREA_OUT_OF_BOUNDS, GAP_TOO_LARGE, INCOMPLETE_WALLS

from tests.scenes import box_room, make_box, make_verdict


def _detect(objects, **overrides):
    settings = DetectionSettings(**overrides)
    detector = RoomBoundaryDetector(StaticScene(objects), settings)
    return detector, detector.detect_rooms()


def test_closed_room_is_detected() -> None:
    detector, rooms = _detect(box_room(10, 12))

    assert len(rooms) == 1
    room = rooms[0]
    assert room.id == "detected_room_1"
    assert room.area == pytest.approx(120.0, rel=1e-6)
    assert room.confidence == pytest.approx(1.0)
    assert room.suggested_name == "Office"
    assert room.metadata["estimated_height"] == pytest.approx(8.0)
    assert room.metadata["boundary_complete"] is True
    assert room.metadata["max_gap_size"] == 0.0
    assert len(room.polygon) == 4
    assert sorted(obj.handle for obj in room.boundary_objects) == ["east", "north", "south", "west"]
    assert detector.last_rejections == []


def test_centroid_lies_inside_room() -> None:
    detector, rooms = _detect(box_room(10, 12))
    x, z = rooms[0].centroid

    assert rooms[0].contains_point(x, z)
    assert detector.get_room_containing_point(x, z) is rooms[0]
    assert detector.get_room_containing_point(x + 10.0, z) is None


def test_wide_opening_is_rejected() -> None:
    detector, rooms = _detect(box_room(10, 12, north_opening_ft=3.5))

    assert rooms == []
    assert [r.reason for r in detector.last_rejections] == [GAP_TOO_LARGE]
    assert detector.last_rejections[0].verdict.max_gap_size == pytest.approx(1.5)


def test_wide_opening_accepted_with_larger_gap_allowance() -> None:
    _, rooms = _detect(box_room(10, 12, north_opening_ft=3.5), max_gap_size=3.0)

    assert len(rooms) == 1
    assert rooms[0].metadata["max_gap_size"] == pytest.approx(1.5)
    assert 0.6 < rooms[0].confidence < 1.0


def test_three_walls_are_not_a_cluster() -> None:
    detector, rooms = _detect(box_room(10, 12, omit=('north',)))

    assert rooms == []
    assert detector.last_rejections == []


def test_missing_wall_is_rejected_as_incomplete() -> None:
    mass = make_box("core", (2.0, 3.0), (1.3, 1.8), y=(0.0, 1.0), is_blocking_mass=True)
    detector, rooms = _detect(box_room(10, 12, omit=('north',)) + [mass])

    assert rooms == []
    assert [r.reason for r in detector.last_rejections] == [INCOMPLETE_WALLS]


def test_area_gates() -> None:
    detector, rooms = _detect(box_room(10, 12), min_room_area=150.0)
    assert rooms == []
    assert [r.reason for r in detector.last_rejections] == [AREA_OUT_OF_BOUNDS]

    big = box_room(120, 125)
    detector, rooms = _detect(big, cell_size=50.0, max_ray_distance=20.0)
    assert rooms == []
    assert [r.reason for r in detector.last_rejections] == [AREA_OUT_OF_BOUNDS]
    assert detector.last_rejections[0].area == pytest.approx(15000.0, rel=1e-6)

    _, rooms = _detect(big, cell_size=50.0, max_ray_distance=20.0, max_room_area=20000.0)
    assert len(rooms) == 1
    assert rooms[0].suggested_name == "Large Space"


def test_detection_is_idempotent() -> None:
    detector = RoomBoundaryDetector(StaticScene(box_room(10, 12)))

    first = detector.detect_rooms()
    second = detector.detect_rooms()

    assert [r.id for r in first] == [r.id for r in second]
    assert [r.area for r in first] == [r.area for r in second]
    assert [r.confidence for r in first] == [r.confidence for r in second]
    assert [r.polygon for r in first] == [r.polygon for r in second]


def test_registry_is_replaced_on_each_pass() -> None:
    room_a = box_room(10, 12)
    room_b = box_room(10, 12, origin=(11.0, 1.0), prefix="b_")
    scene = StaticScene(room_a + room_b)
    detector = RoomBoundaryDetector(scene)

    rooms = detector.detect_rooms()
    assert [r.id for r in rooms] == ["detected_room_1", "detected_room_2"]
    assert len(detector.get_detected_rooms()) == 2

    for wall in room_a:
        scene.remove(wall)
    rooms = detector.detect_rooms()

    assert [r.id for r in rooms] == ["detected_room_1"]
    assert rooms[0].centroid[0] > 11.0
    assert detector.get_room("detected_room_2") is None
    assert detector.get_detected_rooms() == rooms


def test_recalculate_keeps_room_complete() -> None:
    _, rooms = _detect(box_room(10, 12))
    room = rooms[0]

    room.recalculate()

    assert room.metadata["boundary_complete"] is True
    assert room.confidence == pytest.approx(1.0)
    assert room.area == pytest.approx(120.0, rel=1e-6)


def test_recalculate_flags_broken_boundary() -> None:
    _, rooms = _detect(box_room(10, 12))
    room = rooms[0]

    room.boundary_objects = [obj for obj in room.boundary_objects if obj.handle != "north"]
    room.recalculate()

    assert room.metadata["boundary_complete"] is False


def test_overlapping_footprints_are_deduplicated() -> None:
    square = [(0.0, 0.0), (3.0, 0.0), (3.0, 3.0), (0.0, 3.0)]
    nudged = [(x + 0.1, z) for x, z in square]
    elsewhere = [(x + 10.0, z) for x, z in square]
    accepted = [
        (square, [], make_verdict()),
        (nudged, [], make_verdict()),
        (elsewhere, [], make_verdict()),
    ]

    kept = RoomBoundaryDetector._dedupe_overlapping(accepted, 0.5)

    assert [item[0] for item in kept] == [square, elsewhere]


def test_clear_empties_registry() -> None:
    detector, rooms = _detect(box_room(10, 12))
    assert len(detector.registry) == 1

    detector.clear()

    assert detector.get_detected_rooms() == []
    assert detector.last_rejections == []


def test_objects_without_metadata_are_tolerated() -> None:
    desk = make_box("desk", (6.0, 7.0), (6.0, 7.2), y=(0.0, 0.7), metadata=None)

    detector, rooms = _detect(box_room(10, 12) + [desk])

    assert desk.metadata == {}
    assert [r.id for r in rooms] == ["detected_room_1"]


def test_room_with_unreadable_height_is_skipped() -> None:
    room_a = box_room(10, 12)
    room_a[0].metadata = {"dimensions": {"height": "tall"}}
    room_b = box_room(10, 12, origin=(11.0, 1.0), prefix="b_")

    detector, rooms = _detect(room_a + room_b)

    assert [r.id for r in rooms] == ["detected_room_1"]
    assert rooms[0].centroid[0] > 11.0
    assert detector.get_detected_rooms() == rooms


class _FailsBelowX(BoxRayCaster):
    """Raises for any scan line reaching below `limit` on the x axis."""

    def __init__(self, limit: float):
        super().__init__()
        self.limit = limit

    def cast_rays(self, origins, direction, candidates, max_distance=np.inf):
        if np.asarray(origins)[:, 0].min() < self.limit:
            raise RuntimeError("scan failed")
        return super().cast_rays(origins, direction, candidates, max_distance)


def test_failed_cluster_scan_skips_only_that_cluster() -> None:
    room_a = box_room(10, 12)
    room_b = box_room(10, 12, origin=(11.0, 1.0), prefix="b_")
    detector = RoomBoundaryDetector(StaticScene(room_a + room_b), ray_caster=_FailsBelowX(10.0))

    rooms = detector.detect_rooms()

    assert [r.id for r in rooms] == ["detected_room_1"]
    assert rooms[0].centroid[0] > 11.0
    assert detector.last_rejections == []


class _ConcurrencyTracker(BoxRayCaster):
    """Records how many scans run at the same time."""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def cast_rays(self, origins, direction, candidates, max_distance=np.inf):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(0.005)
            return super().cast_rays(origins, direction, candidates, max_distance)
        finally:
            with self._lock:
                self.active -= 1


def test_concurrent_passes_do_not_interleave() -> None:
    tracker = _ConcurrencyTracker()
    detector = RoomBoundaryDetector(StaticScene(box_room(10, 12)), ray_caster=tracker)

    threads = [threading.Thread(target=detector.detect_rooms) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10.0)

    assert tracker.peak == 1
    assert [r.id for r in detector.get_detected_rooms()] == ["detected_room_1"]
