"""
3D visualization for room detection results using Open3D.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .room import DetectedRoom
from .types import BoundaryCandidate, DetectionSettings, Point2D
from .units import feet_to_world

# Color palette for rooms (bright, distinct colors)
ROOM_COLORS = [
    [1.0, 0.3, 0.3],  # Red
    [0.3, 1.0, 0.3],  # Green
    [0.3, 0.3, 1.0],  # Blue
    [1.0, 1.0, 0.3],  # Yellow
    [1.0, 0.3, 1.0],  # Magenta
    [0.3, 1.0, 1.0],  # Cyan
    [1.0, 0.6, 0.2],  # Orange
    [0.6, 0.3, 1.0],  # Purple
]


def build_room_prism(
    polygon: Sequence[Point2D],
    floor_y: float,
    height: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Extrude a plan polygon into a closed prism.

    Args:
        polygon: Ordered (x, z) outline
        floor_y: World Y of the floor
        height: Prism height in world units

    Returns:
        Tuple of (vertices Nx3, triangles Mx3)
    """
    coords = np.asarray(polygon, dtype=np.float64)
    n = len(coords)
    if n < 3:
        return np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int32)

    floor_verts = np.column_stack([coords[:, 0], np.full(n, floor_y), coords[:, 1]])
    ceiling_verts = np.column_stack([coords[:, 0], np.full(n, floor_y + height), coords[:, 1]])
    vertices = np.vstack([floor_verts, ceiling_verts])

    triangles = []

    # Floor and ceiling (fan triangulation, opposite winding)
    for j in range(1, n - 1):
        triangles.append([0, j + 1, j])
        triangles.append([n, n + j, n + j + 1])

    # Walls: each quad split into two triangles
    for j in range(n):
        next_j = (j + 1) % n
        triangles.append([j, next_j, n + j])
        triangles.append([next_j, n + next_j, n + j])

    return vertices, np.array(triangles, dtype=np.int32)


def visualize_detection(
    candidates: List[BoundaryCandidate],
    rooms: List[DetectedRoom],
    settings: Optional[DetectionSettings] = None
) -> None:
    """
    Open an interactive viewer with the boundary candidates and detected rooms.

    Candidates are drawn as wireframe boxes, rooms as colored prisms of their
    estimated height.
    """
    try:
        import open3d as o3d
    except ImportError:
        print("Error: Open3D is required for visualization.")
        print("Install it with: pip install open3d")
        return

    if settings is None:
        settings = DetectionSettings()

    geometries = []

    for candidate in candidates:
        if candidate.bounds is None or candidate.bounds.is_degenerate:
            continue
        aabb = o3d.geometry.AxisAlignedBoundingBox(
            candidate.bounds.min.astype(np.float64),
            candidate.bounds.max.astype(np.float64)
        )
        lines = o3d.geometry.LineSet.create_from_axis_aligned_bounding_box(aabb)
        lines.paint_uniform_color([0.4, 0.4, 0.5])
        geometries.append(lines)

    for i, room in enumerate(rooms):
        height = feet_to_world(room.metadata['estimated_height'])
        vertices, triangles = build_room_prism(room.polygon, settings.floor_level, height)
        if len(vertices) == 0:
            continue

        room_mesh = o3d.geometry.TriangleMesh()
        room_mesh.vertices = o3d.utility.Vector3dVector(vertices)
        room_mesh.triangles = o3d.utility.Vector3iVector(triangles)
        room_mesh.compute_vertex_normals()
        room_mesh.paint_uniform_color(ROOM_COLORS[i % len(ROOM_COLORS)])
        geometries.append(room_mesh)

    print(f"\nVisualizing {len(rooms)} room(s) over {len(candidates)} candidate(s)")
    print("Controls: Left-drag=Rotate, Scroll=Zoom, Middle-drag=Pan, Q=Quit")

    vis = o3d.visualization.Visualizer()
    vis.create_window(window_name="Room Boundary Detection", width=1400, height=900)

    for geom in geometries:
        vis.add_geometry(geom)

    opt = vis.get_render_option()
    opt.background_color = np.array([0.1, 0.1, 0.15])
    opt.mesh_show_back_face = True

    ctr = vis.get_view_control()
    ctr.set_zoom(0.5)
    ctr.set_front([0.5, 0.7, -0.5])  # Looking from above, Y is up
    ctr.set_up([0, 1, 0])

    vis.run()
    vis.destroy_window()
