"""
Room boundary detector - owns the registry and runs full detection passes.

Pipeline per pass:
1. Classify scene objects into boundary candidates
2. Bucket candidates into plan-view grid cells
3. For each cell with enough members, scan the cluster footprint in four
   directions against the global candidate list
4. Aggregate the scans into an enclosure verdict and run the acceptance gates
5. Build DetectedRoom entities and swap them into the registry
"""

import logging
import threading
from typing import List, Optional, Tuple

from .classifier import get_boundary_candidates
from .debounce import DebouncedCall
from .enclosure import analyze_wall_enclosure, describe_rejection, evaluate_gates
from .geometry import footprint_polygon, polygon_area, polygon_iou
from .ray_caster import BoxRayCaster, RayCaster
from .registry import RoomRegistry
from .room import DetectedRoom, create_detected_room
from .spatial_grid import create_spatial_grid, iter_clusters
from .types import (
    BoundaryCandidate,
    DetectionSettings,
    EnclosureVerdict,
    Point2D,
    Rejection,
)
from .wall_analyzer import cluster_footprint, scan_wall_boundaries


logger = logging.getLogger(__name__)

UPDATE_DELAY_SECONDS = 1.0

_Accepted = Tuple[List[Point2D], List[BoundaryCandidate], EnclosureVerdict]


class RoomBoundaryDetector:
    """Detects rooms as the negative space enclosed by scene objects."""

    def __init__(
        self,
        scene,
        settings: Optional[DetectionSettings] = None,
        ray_caster: Optional[RayCaster] = None,
        update_delay: float = UPDATE_DELAY_SECONDS
    ):
        """
        Initialize the detector.

        Args:
            scene: Object with a list_candidate_objects() method
            settings: Detection settings (uses defaults if None)
            ray_caster: Ray-cast primitive (bounding boxes if None)
            update_delay: Quiet period in seconds before update_detection() runs
        """
        self.scene = scene
        self.settings = settings or DetectionSettings()
        self.ray_caster = ray_caster or BoxRayCaster()
        self.registry = RoomRegistry()
        self.last_rejections: List[Rejection] = []
        self._pass_lock = threading.Lock()
        self._debounced_detect = DebouncedCall(self._run_scheduled_detection, update_delay)

    def detect_rooms(self) -> List[DetectedRoom]:
        """
        Run a full detection pass and replace the registry contents.

        Room ids restart at 1 on every pass; callers must not keep ids or room
        objects across passes.

        Passes are serialized, so a scheduled update and a direct call never
        interleave their registry swaps.

        Returns:
            List of rooms found in this pass
        """
        with self._pass_lock:
            return self._run_pass()

    def _run_pass(self) -> List[DetectedRoom]:
        settings = self.settings
        logger.info("Starting 4-wall room detection at %.1fft height",
                    settings.wall_analysis_height)

        candidates = get_boundary_candidates(self.scene.list_candidate_objects())
        logger.info("Found %d potential boundary objects", len(candidates))

        rejections: List[Rejection] = []
        accepted: List[_Accepted] = []

        if len(candidates) < settings.min_cluster_size:
            logger.info("Insufficient boundary objects for 4-wall room detection "
                        "(need at least %d)", settings.min_cluster_size)
        else:
            grid = create_spatial_grid(candidates, settings.cell_size)
            for cell, cluster in iter_clusters(grid, settings.min_cluster_size):
                result = self._evaluate_cluster(cell, cluster, candidates, rejections)
                if result is not None:
                    accepted.append(result)

        if settings.dedupe_iou_threshold is not None:
            accepted = self._dedupe_overlapping(accepted, settings.dedupe_iou_threshold)

        rooms = self._build_rooms(accepted)

        self._detect_access_points(rooms)
        self._calculate_adjacency(rooms)

        self.last_rejections = rejections
        self.registry.replace_all(rooms)

        logger.info("Room detection complete: %d room(s) found, %d rejected",
                    len(rooms), len(rejections))
        return rooms

    def _evaluate_cluster(
        self,
        cell,
        cluster: List[BoundaryCandidate],
        candidates: List[BoundaryCandidate],
        rejections: List[Rejection]
    ) -> Optional[_Accepted]:
        """Scan one cluster footprint; returns the accepted room data or None."""
        settings = self.settings
        try:
            footprint = cluster_footprint(cluster, settings)
            analysis = scan_wall_boundaries(footprint, candidates, settings, self.ray_caster)
            verdict = analyze_wall_enclosure(analysis, settings)
            polygon = footprint_polygon(footprint)
            area = polygon_area(polygon)
        except Exception as exc:
            logger.warning("Skipping cell %s: enclosure analysis failed: %s", cell, exc)
            return None

        reason = evaluate_gates(verdict, area, settings)
        if reason is not None:
            logger.info("Rejected space in cell %s: %s", cell,
                        describe_rejection(reason, verdict, area, settings))
            rejections.append(Rejection(
                cell=cell, footprint=footprint, reason=reason, verdict=verdict, area=area
            ))
            return None

        return polygon, analysis.contributing_objects, verdict

    @staticmethod
    def _dedupe_overlapping(accepted: List[_Accepted], threshold: float) -> List[_Accepted]:
        """Keep the first of any footprints overlapping beyond the IoU threshold."""
        kept: List[_Accepted] = []
        for item in accepted:
            if any(polygon_iou(item[0], other[0]) > threshold for other in kept):
                logger.info("Dropping duplicate footprint %s", item[0])
                continue
            kept.append(item)
        return kept

    def _build_rooms(self, accepted: List[_Accepted]) -> List[DetectedRoom]:
        rooms: List[DetectedRoom] = []
        for polygon, boundary_objects, verdict in accepted:
            room_id = f"detected_room_{len(rooms) + 1}"
            try:
                room = create_detected_room(
                    room_id, polygon, boundary_objects, verdict,
                    self.settings, self.ray_caster
                )
            except Exception as exc:
                logger.warning("Skipping room %s: %s", room_id, exc)
                continue
            rooms.append(room)
            logger.info("Detected 4-wall room: %s (%.1f sq ft) - max gap %.1fft - "
                        "confidence %.0f%%", room.suggested_name, room.area,
                        verdict.max_gap_size, verdict.confidence * 100)
        return rooms

    def _detect_access_points(self, rooms: List[DetectedRoom]) -> None:
        # TODO: derive doorways from verdict gaps between doorway_min_width and doorway_max_width
        logger.debug("Access point detection not yet implemented")

    def _calculate_adjacency(self, rooms: List[DetectedRoom]) -> None:
        # TODO: mark rooms sharing boundary objects or access points as adjacent
        logger.debug("Adjacency calculation not yet implemented")

    def get_detected_rooms(self) -> List[DetectedRoom]:
        """Rooms from the last pass, without re-scanning."""
        return self.registry.all()

    def get_room(self, room_id: str) -> Optional[DetectedRoom]:
        return self.registry.get(room_id)

    def get_room_containing_point(self, x: float, z: float) -> Optional[DetectedRoom]:
        return self.registry.find_containing_point(x, z)

    def update_detection(self) -> None:
        """Schedule a full re-scan after a quiet period (last call wins)."""
        self._debounced_detect.schedule()

    def _run_scheduled_detection(self) -> None:
        logger.info("Updating room detection due to scene changes...")
        self.detect_rooms()

    def cancel_pending_update(self) -> bool:
        return self._debounced_detect.cancel()

    def wait_for_pending_update(self, timeout: Optional[float] = None) -> None:
        self._debounced_detect.join(timeout)

    @property
    def has_pending_update(self) -> bool:
        return self._debounced_detect.pending

    def clear(self) -> None:
        """Drop all detected rooms and the last rejection log."""
        with self._pass_lock:
            self.registry.clear()
            self.last_rejections = []

    def close(self) -> None:
        """Cancel any scheduled re-scan; the detector can still be used directly."""
        self.cancel_pending_update()
