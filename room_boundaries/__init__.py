"""
Room Boundary Detection Package

Detect rooms as the negative space enclosed by walls, furniture and
blocking masses, without any object being tagged as a room.
"""

from .types import (
    BoundingBox,
    BoundaryCandidate,
    DetectionSettings,
    RayHit,
    BoundaryHit,
    Gap,
    WallDirectionResult,
    WallAnalysis,
    EnclosureVerdict,
    Rejection,
)
from .classifier import (
    is_potential_boundary,
    get_boundary_candidates,
)
from .spatial_grid import (
    create_spatial_grid,
    iter_clusters,
)
from .ray_caster import (
    RayCaster,
    BoxRayCaster,
    MeshRayCaster,
)
from .grid_sampler import generate_scan_line
from .wall_analyzer import (
    cluster_footprint,
    analyze_coverage,
    analyze_wall_direction,
    scan_wall_boundaries,
)
from .enclosure import (
    analyze_wall_enclosure,
    evaluate_gates,
)
from .geometry import (
    footprint_polygon,
    polygon_area,
    polygon_centroid,
    point_in_polygon,
    polygon_iou,
)
from .room import (
    DetectedRoom,
    create_detected_room,
    suggest_room_name,
    estimate_room_height,
)
from .registry import RoomRegistry
from .detector import RoomBoundaryDetector
from .scene import StaticScene
from .polygon_tracer import trace_enclosed_polygons
from .mesh_loader import candidates_from_scene, load_boundary_candidates
from .pipeline import detect_rooms_from_file, detect_rooms_simple

__all__ = [
    # Types
    'BoundingBox',
    'BoundaryCandidate',
    'DetectionSettings',
    'RayHit',
    'BoundaryHit',
    'Gap',
    'WallDirectionResult',
    'WallAnalysis',
    'EnclosureVerdict',
    'Rejection',
    # Classification and clustering
    'is_potential_boundary',
    'get_boundary_candidates',
    'create_spatial_grid',
    'iter_clusters',
    # Ray casting
    'RayCaster',
    'BoxRayCaster',
    'MeshRayCaster',
    # Wall analysis
    'generate_scan_line',
    'cluster_footprint',
    'analyze_coverage',
    'analyze_wall_direction',
    'scan_wall_boundaries',
    'analyze_wall_enclosure',
    'evaluate_gates',
    # Geometry
    'footprint_polygon',
    'polygon_area',
    'polygon_centroid',
    'point_in_polygon',
    'polygon_iou',
    # Rooms and registry
    'DetectedRoom',
    'create_detected_room',
    'suggest_room_name',
    'estimate_room_height',
    'RoomRegistry',
    'RoomBoundaryDetector',
    'StaticScene',
    # Extensions
    'trace_enclosed_polygons',
    # Model files
    'candidates_from_scene',
    'load_boundary_candidates',
    'detect_rooms_from_file',
    'detect_rooms_simple',
]
