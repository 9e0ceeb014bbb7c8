"""
Room detection pipeline for model files - high-level entry point.

This module loads a model, wraps its meshes as boundary candidates, and runs
one detection pass with RoomBoundaryDetector.
"""

from typing import List, Optional, Tuple
import time

from .detector import RoomBoundaryDetector
from .mesh_loader import load_boundary_candidates
from .ray_caster import BoxRayCaster, MeshRayCaster
from .room import DetectedRoom
from .scene import StaticScene
from .types import DetectionSettings


def detect_rooms_from_file(
    model_path: str,
    settings: Optional[DetectionSettings] = None,
    up_axis: str = 'y',
    unit_scale: float = 1.0,
    use_mesh_rays: bool = False,
    verbose: bool = True
) -> Tuple[List[DetectedRoom], RoomBoundaryDetector]:
    """
    Detect rooms in a model file.

    Args:
        model_path: Path to the model file
        settings: Detection settings (uses defaults if None)
        up_axis: 'y' or 'z', the model's vertical axis
        unit_scale: Factor converting model units to meters
        use_mesh_rays: Cast against triangle meshes instead of bounding boxes
        verbose: Print progress information

    Returns:
        Tuple of (rooms, detector); the detector keeps the registry and the
        rejection log for follow-up queries
    """
    if settings is None:
        settings = DetectionSettings()

    start_time = time.time()

    if verbose:
        print(f"\n{'='*60}")
        print("Room Boundary Detection")
        print(f"{'='*60}")
        print("\nStep 1: Loading model...")

    candidates = load_boundary_candidates(model_path, up_axis=up_axis, unit_scale=unit_scale)

    if verbose:
        print(f"  {len(candidates)} mesh object(s)")
        print(f"\nStep 2: Scanning for 4-wall enclosures at "
              f"{settings.wall_analysis_height}ft...")

    ray_caster = MeshRayCaster() if use_mesh_rays else BoxRayCaster()
    detector = RoomBoundaryDetector(StaticScene(candidates), settings, ray_caster)
    rooms = detector.detect_rooms()

    elapsed = time.time() - start_time

    if verbose:
        print(f"\n{'='*60}")
        print(f"Pipeline complete in {elapsed:.2f}s")
        print(f"Result: {len(rooms)} room(s), {len(detector.last_rejections)} rejected space(s)")
        for rejection in detector.last_rejections:
            print(f"  Rejected cell {rejection.cell}: {rejection.reason}")
        print(f"{'='*60}\n")

    return rooms, detector


def detect_rooms_simple(model_path: str) -> List[dict]:
    """
    Simple interface returning plain room records.
    """
    rooms, _ = detect_rooms_from_file(model_path, verbose=False)

    return [room.to_dict() for room in rooms]
