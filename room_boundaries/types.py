"""
Data types for room boundary detection.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple
import numpy as np


DIRECTIONS = ('north', 'south', 'east', 'west')

Point2D = Tuple[float, float]


@dataclass
class BoundingBox:
    """Axis-aligned bounding box in world space (Y up, meters)."""
    min: np.ndarray  # (x, y, z) lower corner
    max: np.ndarray  # (x, y, z) upper corner

    def __post_init__(self):
        self.min = np.asarray(self.min, dtype=np.float64)
        self.max = np.asarray(self.max, dtype=np.float64)

    @classmethod
    def from_points(cls, points: np.ndarray) -> 'BoundingBox':
        """Build the box enclosing an Nx3 array of points."""
        points = np.asarray(points, dtype=np.float64)
        return cls(min=points.min(axis=0), max=points.max(axis=0))

    @property
    def size(self) -> np.ndarray:
        return self.max - self.min

    @property
    def center(self) -> np.ndarray:
        return (self.min + self.max) / 2

    @property
    def is_degenerate(self) -> bool:
        """True when the box cannot be used for classification or ray casting."""
        if self.min.shape != (3,) or self.max.shape != (3,):
            return True
        if not (np.all(np.isfinite(self.min)) and np.all(np.isfinite(self.max))):
            return True
        size = self.size
        return bool(np.any(size < 0) or np.all(size == 0))

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(
            min=np.minimum(self.min, other.min),
            max=np.maximum(self.max, other.max)
        )

    def expanded_xz(self, margin: float) -> 'BoundingBox':
        """Grow the box by `margin` world units on the plan (x, z) axes."""
        pad = np.array([margin, 0.0, margin])
        return BoundingBox(min=self.min - pad, max=self.max + pad)


@dataclass(eq=False)
class BoundaryCandidate:
    """Read-only view onto a scene object that may bound a room."""
    handle: Any                          # Opaque scene handle (name, node, ...)
    bounds: Optional[BoundingBox]        # None when geometry is unusable
    metadata: Dict[str, Any] = field(default_factory=dict)
    is_wall_like: bool = False
    is_blocking_mass: bool = False
    is_designated_boundary: bool = False
    height_hint: Optional[float] = None  # Explicit height in feet
    is_helper: bool = False              # Debug/helper visuals are never boundaries
    mesh: Any = None                     # Optional trimesh.Trimesh for mesh ray casting

    def __post_init__(self):
        # Scenes may hand over objects without any metadata
        self.metadata = dict(self.metadata or {})

    @property
    def explicit_height(self) -> Optional[float]:
        """Height in feet from tags or metadata, if the scene supplied one."""
        if self.height_hint:
            return float(self.height_hint)
        dimensions = self.metadata.get('dimensions')
        if not isinstance(dimensions, dict):
            return None
        height = dimensions.get('height')
        return float(height) if height else None

    def __repr__(self) -> str:
        return f"BoundaryCandidate({self.handle!r})"


@dataclass(frozen=True)
class DetectionSettings:
    """Configuration parameters for room boundary detection.

    Lengths are in feet and areas in square feet, except `floor_level` and
    `cell_size` which are world units (meters).
    """

    floor_level: float = 0.0           # World Y considered "floor"
    wall_analysis_height: float = 3.0  # Scan height above the floor (ft)
    max_gap_size: float = 1.0          # Largest tolerated wall gap (ft)
    min_room_area: float = 25.0        # ft²
    max_room_area: float = 10000.0     # ft²
    boundary_tolerance: float = 0.1    # Gaps at or below this are noise (ft)
    doorway_min_width: float = 2.0     # Reserved for access point detection (ft)
    doorway_max_width: float = 8.0     # Reserved for access point detection (ft)
    grid_resolution: float = 0.5       # Scan step (ft)
    wall_thickness: float = 0.5        # Informational (ft)

    # Clustering
    cell_size: float = 5.0             # Spatial grid cell (m)
    min_cluster_size: int = 4

    # Wall analysis tunables
    footprint_margin: float = 0.5      # Cluster footprint padding (ft)
    scan_offset_ratio: float = 0.4     # Origin offset as a share of min(width, depth)
    max_ray_distance: float = 10.0     # ft
    coverage_radius: int = 2           # Samples marked covered on each side of a hit
    coverage_threshold: float = 0.7    # Share of covered samples for a wall to count

    # Acceptance
    min_confidence: float = 0.6
    gap_penalty_weight: float = 0.5
    default_room_height: float = 8.0   # ft
    dedupe_iou_threshold: Optional[float] = None  # None keeps overlapping detections

    def __post_init__(self):
        """Validate configuration values."""
        if self.grid_resolution <= 0:
            raise ValueError("grid_resolution must be positive")
        if self.cell_size <= 0:
            raise ValueError("cell_size must be positive")
        if self.min_room_area < 0 or self.min_room_area > self.max_room_area:
            raise ValueError("min_room_area must be in [0, max_room_area]")
        if self.max_gap_size < 0 or self.boundary_tolerance < 0:
            raise ValueError("max_gap_size and boundary_tolerance must not be negative")
        if self.doorway_min_width > self.doorway_max_width:
            raise ValueError("doorway_min_width must not exceed doorway_max_width")
        if self.min_cluster_size < 1:
            raise ValueError("min_cluster_size must be at least 1")
        if self.coverage_radius < 0:
            raise ValueError("coverage_radius must not be negative")
        if not 0.0 <= self.coverage_threshold <= 1.0:
            raise ValueError("coverage_threshold must be in [0, 1]")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError("min_confidence must be in [0, 1]")
        if not 0.0 <= self.gap_penalty_weight <= 1.0:
            raise ValueError("gap_penalty_weight must be in [0, 1]")
        if self.max_ray_distance <= 0:
            raise ValueError("max_ray_distance must be positive")
        if self.dedupe_iou_threshold is not None and not 0.0 < self.dedupe_iou_threshold <= 1.0:
            raise ValueError("dedupe_iou_threshold must be in (0, 1]")

    def with_overrides(self, **changes) -> 'DetectionSettings':
        """Return a copy with some fields replaced."""
        return replace(self, **changes)


@dataclass
class RayHit:
    """Nearest intersection of a single ray with the candidate set."""
    candidate: BoundaryCandidate
    distance: float      # World units along the ray
    point: np.ndarray    # World-space hit location


@dataclass
class BoundaryHit:
    """A scan sample whose ray found a boundary."""
    point: np.ndarray    # Ray origin (scan sample)
    candidate: BoundaryCandidate
    distance: float
    scan_index: int


@dataclass
class Gap:
    """A maximal run of uncovered samples along a scan line."""
    start: int                 # First uncovered sample index
    end: int                   # Last uncovered sample index (inclusive)
    size: float                # Feet
    start_point: np.ndarray
    end_point: np.ndarray
    direction: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "start": self.start,
            "end": self.end,
            "size": self.size,
            "start_point": self.start_point.tolist(),
            "end_point": self.end_point.tolist(),
        }


@dataclass
class WallDirectionResult:
    """Coverage measured along one cardinal direction."""
    has_coverage: bool
    boundaries: List[BoundaryHit]
    gaps: List[Gap]
    total_coverage: float      # Share of covered samples, 0..1
    scan_line: np.ndarray      # Nx3 scan sample points

    def to_dict(self) -> dict:
        return {
            "has_coverage": self.has_coverage,
            "total_coverage": self.total_coverage,
            "hit_count": len(self.boundaries),
            "sample_count": len(self.scan_line),
            "gaps": [g.to_dict() for g in self.gaps],
        }


@dataclass
class WallAnalysis:
    """The four directional scans for one candidate footprint."""
    wall_results: Dict[str, WallDirectionResult]
    has_all_walls: bool
    max_gap_size: float                  # Feet, over gaps above tolerance
    gaps: List[Gap]                      # Gaps above tolerance, tagged by direction
    contributing_objects: List[BoundaryCandidate]


@dataclass
class EnclosureVerdict:
    """Aggregated enclosure result for one footprint."""
    is_fully_enclosed: bool
    max_gap_size: float
    confidence: float
    per_direction: Dict[str, WallDirectionResult]
    gaps: List[Gap] = field(default_factory=list)
    boundary_count: int = 0

    def to_dict(self) -> dict:
        return {
            "is_fully_enclosed": self.is_fully_enclosed,
            "max_gap_size": self.max_gap_size,
            "confidence": self.confidence,
            "boundary_count": self.boundary_count,
            "per_direction": {d: r.to_dict() for d, r in self.per_direction.items()},
            "gaps": [g.to_dict() for g in self.gaps],
        }


@dataclass
class Rejection:
    """A footprint that failed one of the acceptance gates."""
    cell: Tuple[int, int]
    footprint: BoundingBox
    reason: str
    verdict: EnclosureVerdict
    area: float
