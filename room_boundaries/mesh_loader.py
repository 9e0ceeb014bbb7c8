"""
Mesh loading utilities: turn model files into boundary candidates.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np
import trimesh

from .types import BoundaryCandidate, BoundingBox


logger = logging.getLogger(__name__)

# Rotates a Z-up model into the detector's Y-up frame: (x, y, z) -> (x, z, -y)
Z_UP_TO_Y_UP = trimesh.transformations.rotation_matrix(-np.pi / 2, [1, 0, 0])

DEFAULT_WALL_KEYWORDS = ('wall',)
DEFAULT_MASS_KEYWORDS = ('mass', 'block')


def _iter_scene_meshes(scene: Union[trimesh.Scene, trimesh.Trimesh]):
    """Yield (name, world-space mesh copy) for every mesh in the scene graph."""
    if isinstance(scene, trimesh.Trimesh):
        yield "default", scene.copy()
        return

    for node_name in scene.graph.nodes_geometry:
        transform, geometry_name = scene.graph[node_name]
        mesh = scene.geometry.get(geometry_name)
        if not isinstance(mesh, trimesh.Trimesh):
            continue
        mesh = mesh.copy()
        mesh.apply_transform(transform)
        yield node_name, mesh


def candidates_from_scene(
    scene: Union[trimesh.Scene, trimesh.Trimesh],
    up_axis: str = 'y',
    unit_scale: float = 1.0,
    wall_keywords: Sequence[str] = DEFAULT_WALL_KEYWORDS,
    mass_keywords: Sequence[str] = DEFAULT_MASS_KEYWORDS
) -> List[BoundaryCandidate]:
    """
    Convert every mesh in a trimesh scene into a BoundaryCandidate.

    Args:
        scene: Loaded trimesh scene (or single mesh)
        up_axis: 'y' if the model is already Y-up, 'z' to rotate it
        unit_scale: Factor converting model units to meters (0.01 for cm)
        wall_keywords: Name fragments that tag a mesh as wall-like
        mass_keywords: Name fragments that tag a mesh as a blocking mass

    Returns:
        List of BoundaryCandidate, one per mesh node; meshes without
        vertices get bounds=None
    """
    if up_axis not in ('y', 'z'):
        raise ValueError(f"up_axis must be 'y' or 'z', got {up_axis!r}")

    candidates = []

    for name, mesh in _iter_scene_meshes(scene):
        if unit_scale != 1.0:
            mesh.apply_scale(unit_scale)
        if up_axis == 'z':
            mesh.apply_transform(Z_UP_TO_Y_UP)

        bounds = None
        if len(mesh.vertices) > 0 and mesh.bounds is not None:
            bounds = BoundingBox(min=mesh.bounds[0], max=mesh.bounds[1])

        lower = str(name).lower()
        candidates.append(BoundaryCandidate(
            handle=name,
            bounds=bounds,
            is_wall_like=any(k in lower for k in wall_keywords),
            is_blocking_mass=any(k in lower for k in mass_keywords),
            mesh=mesh
        ))

    return candidates


def load_boundary_candidates(
    model_path: str,
    up_axis: str = 'y',
    unit_scale: float = 1.0
) -> List[BoundaryCandidate]:
    """
    Load a model file and return one boundary candidate per mesh.

    Args:
        model_path: Path to an OBJ (or any format trimesh can load)
        up_axis: 'y' or 'z'
        unit_scale: Factor converting model units to meters

    Returns:
        List of BoundaryCandidate
    """
    path = Path(model_path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {model_path}")

    # Load as scene to preserve groups; OBJ groups must not be merged by material
    load_kwargs = {'group_material': False} if path.suffix.lower() == '.obj' else {}
    scene = trimesh.load(str(path), force='scene', **load_kwargs)

    if isinstance(scene, trimesh.Scene) and len(scene.geometry) == 0:
        raise ValueError("Failed to load model file or file contains no geometry")

    candidates = candidates_from_scene(scene, up_axis=up_axis, unit_scale=unit_scale)

    logger.info("Loaded %d mesh object(s) from %s", len(candidates), path.name)

    return candidates
