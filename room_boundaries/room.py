"""
Detected room entity and the factory that builds it from an accepted footprint.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Set

import numpy as np

from .enclosure import analyze_wall_enclosure, evaluate_gates
from .geometry import point_in_polygon, polygon_area, polygon_centroid
from .ray_caster import BoxRayCaster, RayCaster
from .types import (
    BoundaryCandidate,
    BoundingBox,
    DetectionSettings,
    EnclosureVerdict,
    Point2D,
)
from .units import world_to_feet
from .wall_analyzer import scan_wall_boundaries

# (upper bound in ft², name), checked in order
ROOM_NAME_BANDS = (
    (50.0, 'Closet'),
    (100.0, 'Small Office'),
    (200.0, 'Office'),
    (400.0, 'Large Office'),
    (800.0, 'Conference Room'),
)
LARGEST_ROOM_NAME = 'Large Space'


def suggest_room_name(area: float) -> str:
    """Name a room from its floor area in square feet."""
    for upper, name in ROOM_NAME_BANDS:
        if area < upper:
            return name
    return LARGEST_ROOM_NAME


def estimate_room_height(
    boundary_objects: Sequence[BoundaryCandidate],
    default_height: float = 8.0
) -> float:
    """
    Average height of the boundary objects, in feet.

    Explicit height metadata wins; otherwise the bounding-box height is used.
    """
    heights = []
    for obj in boundary_objects:
        explicit = obj.explicit_height
        if explicit is not None:
            heights.append(explicit)
        elif obj.bounds is not None and not obj.bounds.is_degenerate:
            heights.append(world_to_feet(obj.bounds.size[1]))

    if not heights:
        return default_height
    return float(sum(heights) / len(heights))


class DetectedRoom:
    """A space bounded by scene objects, as found by one detection pass."""

    def __init__(
        self,
        room_id: str,
        polygon: List[Point2D],
        boundary_objects: List[BoundaryCandidate],
        verdict: EnclosureVerdict,
        settings: Optional[DetectionSettings] = None,
        ray_caster: Optional[RayCaster] = None
    ):
        """
        Initialize DetectedRoom.

        Args:
            room_id: Registry id, unique within a detection pass
            polygon: Ordered (x, z) floor outline in meters
            boundary_objects: Deduplicated candidates that produced a hit
            verdict: Enclosure verdict that accepted this footprint
            settings: Detection settings used for the pass
            ray_caster: Ray-cast primitive, reused by recalculate()
        """
        self.id = room_id
        self.polygon = polygon
        self.boundary_objects = boundary_objects
        self.access_points: List[Dict[str, Any]] = []
        self.adjacent_rooms: Set[str] = set()

        self._settings = settings or DetectionSettings()
        self._ray_caster = ray_caster or BoxRayCaster()

        self.area = polygon_area(polygon)
        self.centroid = polygon_centroid(polygon)
        self.suggested_name = suggest_room_name(self.area)

        self.metadata: Dict[str, Any] = {
            'detected_at': time.time(),
            'confidence': verdict.confidence,
            'boundary_complete': True,
            'estimated_height': estimate_room_height(
                boundary_objects, self._settings.default_room_height
            ),
            'enclosure_analysis': verdict,
            'max_gap_size': verdict.max_gap_size,
            'wall_analysis_height': self._settings.wall_analysis_height,
        }

    @property
    def confidence(self) -> float:
        return self.metadata['confidence']

    def contains_point(self, x: float, z: float) -> bool:
        return point_in_polygon(x, z, self.polygon)

    def footprint_box(self) -> BoundingBox:
        """Plan footprint rebuilt from the polygon, flat at floor level."""
        points = np.array(self.polygon, dtype=np.float64)
        floor = self._settings.floor_level
        return BoundingBox(
            min=np.array([points[:, 0].min(), floor, points[:, 1].min()]),
            max=np.array([points[:, 0].max(), floor, points[:, 1].max()])
        )

    def check_boundary_complete(self) -> EnclosureVerdict:
        """Re-run the wall analysis against this room's own boundary objects."""
        analysis = scan_wall_boundaries(
            self.footprint_box(), self.boundary_objects, self._settings, self._ray_caster
        )
        return analyze_wall_enclosure(analysis, self._settings)

    def recalculate(self) -> None:
        """Refresh every derived field from the same polygon and boundary set."""
        self.area = polygon_area(self.polygon)
        self.centroid = polygon_centroid(self.polygon)
        self.suggested_name = suggest_room_name(self.area)

        verdict = self.check_boundary_complete()
        complete = (
            len(self.polygon) >= 3
            and len(self.boundary_objects) >= self._settings.min_cluster_size
            and evaluate_gates(verdict, self.area, self._settings) is None
        )

        self.metadata.update({
            'detected_at': time.time(),
            'confidence': verdict.confidence,
            'boundary_complete': complete,
            'estimated_height': estimate_room_height(
                self.boundary_objects, self._settings.default_room_height
            ),
            'enclosure_analysis': verdict,
            'max_gap_size': verdict.max_gap_size,
        })

    def to_dict(self) -> Dict[str, Any]:
        """Plain record for UI or persistence collaborators."""
        metadata = dict(self.metadata)
        metadata['enclosure_analysis'] = self.metadata['enclosure_analysis'].to_dict()
        return {
            'id': self.id,
            'polygon': [{'x': x, 'z': z} for x, z in self.polygon],
            'area': self.area,
            'centroid': {'x': self.centroid[0], 'z': self.centroid[1]},
            'suggested_name': self.suggested_name,
            'boundary_objects': [obj.handle for obj in self.boundary_objects],
            'access_points': list(self.access_points),
            'adjacent_rooms': sorted(self.adjacent_rooms),
            'metadata': metadata,
        }

    def __repr__(self) -> str:
        return (f"DetectedRoom({self.id!r}, {self.suggested_name!r}, "
                f"area={self.area:.1f} sq ft, confidence={self.confidence:.2f})")


def create_detected_room(
    room_id: str,
    polygon: List[Point2D],
    boundary_objects: List[BoundaryCandidate],
    verdict: EnclosureVerdict,
    settings: Optional[DetectionSettings] = None,
    ray_caster: Optional[RayCaster] = None
) -> DetectedRoom:
    """Build a DetectedRoom, refusing polygons that cannot hold an area."""
    if len(polygon) < 3:
        raise ValueError(f"Room polygon needs at least 3 vertices, got {len(polygon)}")
    return DetectedRoom(room_id, polygon, boundary_objects, verdict, settings, ray_caster)
