"""
Ray casting utilities for room boundary detection.

The wall analyzer only needs one primitive: "nearest candidate hit along a
ray". BoxRayCaster answers it from candidate bounding boxes with a batched
slab test; MeshRayCaster uses each candidate's trimesh geometry when present.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import numpy as np

from .types import BoundaryCandidate, RayHit

# Direction components smaller than this are treated as parallel to an axis
PARALLEL_EPSILON = 1e-12


def _normalize(direction: np.ndarray) -> np.ndarray:
    direction = np.asarray(direction, dtype=np.float64)
    norm = np.linalg.norm(direction)
    if norm == 0:
        raise ValueError("Ray direction must be non-zero")
    return direction / norm


def box_ray_distances(
    origins: np.ndarray,
    direction: np.ndarray,
    mins: np.ndarray,
    maxs: np.ndarray
) -> np.ndarray:
    """
    Slab-test every ray against every axis-aligned box.

    Args:
        origins: Nx3 ray origins
        direction: Unit direction shared by all rays
        mins: Mx3 box lower corners
        maxs: Mx3 box upper corners

    Returns:
        NxM array of entry distances, np.inf where the ray misses. A ray that
        starts inside a box hits it at distance 0.
    """
    n, m = len(origins), len(mins)
    t_near = np.zeros((n, m))
    t_far = np.full((n, m), np.inf)
    inside_slabs = np.ones((n, m), dtype=bool)

    for axis in range(3):
        o = origins[:, axis][:, None]
        lo = mins[:, axis][None, :]
        hi = maxs[:, axis][None, :]
        d = direction[axis]

        if abs(d) < PARALLEL_EPSILON:
            # Parallel ray must already lie between the slab planes
            inside_slabs &= (o >= lo) & (o <= hi)
            continue

        t1 = (lo - o) / d
        t2 = (hi - o) / d
        t_near = np.maximum(t_near, np.minimum(t1, t2))
        t_far = np.minimum(t_far, np.maximum(t1, t2))

    hit = inside_slabs & (t_near <= t_far)
    return np.where(hit, t_near, np.inf)


class RayCaster(ABC):
    """Base ray-cast primitive used by the wall analyzer."""

    @abstractmethod
    def cast_rays(
        self,
        origins: np.ndarray,
        direction: np.ndarray,
        candidates: Sequence[BoundaryCandidate],
        max_distance: float = np.inf
    ) -> List[Optional[RayHit]]:
        """Cast one ray per origin along a shared direction."""

    def cast_ray(
        self,
        origin: np.ndarray,
        direction: np.ndarray,
        candidates: Sequence[BoundaryCandidate],
        max_distance: float = np.inf
    ) -> Optional[RayHit]:
        """
        Cast a single ray and return the nearest hit.

        Args:
            origin: Ray origin point
            direction: Ray direction (will be normalized)
            candidates: Objects the ray may hit
            max_distance: Hits at or beyond this distance are ignored

        Returns:
            RayHit or None if nothing was hit
        """
        origins = np.asarray(origin, dtype=np.float64).reshape(1, 3)
        return self.cast_rays(origins, direction, candidates, max_distance)[0]

    @staticmethod
    def _nearest_hits(
        origins: np.ndarray,
        direction: np.ndarray,
        distances: np.ndarray,
        candidates: Sequence[BoundaryCandidate],
        max_distance: float
    ) -> List[Optional[RayHit]]:
        if distances.size == 0:
            return [None] * len(origins)

        nearest = np.argmin(distances, axis=1)
        nearest_distance = distances[np.arange(len(origins)), nearest]

        hits: List[Optional[RayHit]] = []
        for i, (idx, dist) in enumerate(zip(nearest, nearest_distance)):
            if not np.isfinite(dist) or dist >= max_distance:
                hits.append(None)
                continue
            hits.append(RayHit(
                candidate=candidates[idx],
                distance=float(dist),
                point=origins[i] + direction * dist
            ))
        return hits


class BoxRayCaster(RayCaster):
    """Ray casting against candidate bounding boxes."""

    def __init__(self, batch_size: int = 10000):
        self.batch_size = batch_size

    def cast_rays(
        self,
        origins: np.ndarray,
        direction: np.ndarray,
        candidates: Sequence[BoundaryCandidate],
        max_distance: float = np.inf
    ) -> List[Optional[RayHit]]:
        origins = np.asarray(origins, dtype=np.float64).reshape(-1, 3)
        direction = _normalize(direction)

        usable = [c for c in candidates if c.bounds is not None and not c.bounds.is_degenerate]
        if len(origins) == 0:
            return []
        if not usable:
            return [None] * len(origins)

        mins = np.array([c.bounds.min for c in usable])
        maxs = np.array([c.bounds.max for c in usable])

        results: List[Optional[RayHit]] = []

        # Process in batches for memory efficiency
        for batch_start in range(0, len(origins), self.batch_size):
            batch = origins[batch_start:batch_start + self.batch_size]
            distances = box_ray_distances(batch, direction, mins, maxs)
            results.extend(self._nearest_hits(batch, direction, distances, usable, max_distance))

        return results


class MeshRayCaster(RayCaster):
    """
    Ray casting against candidate meshes.

    Candidates without a mesh fall back to their bounding box.
    """

    def cast_rays(
        self,
        origins: np.ndarray,
        direction: np.ndarray,
        candidates: Sequence[BoundaryCandidate],
        max_distance: float = np.inf
    ) -> List[Optional[RayHit]]:
        origins = np.asarray(origins, dtype=np.float64).reshape(-1, 3)
        direction = _normalize(direction)

        usable = [c for c in candidates if c.bounds is not None and not c.bounds.is_degenerate]
        n = len(origins)
        if n == 0:
            return []
        if not usable:
            return [None] * n

        distances = np.full((n, len(usable)), np.inf)

        box_columns = [j for j, c in enumerate(usable) if c.mesh is None]
        if box_columns:
            mins = np.array([usable[j].bounds.min for j in box_columns])
            maxs = np.array([usable[j].bounds.max for j in box_columns])
            distances[:, box_columns] = box_ray_distances(origins, direction, mins, maxs)

        for j, candidate in enumerate(usable):
            if candidate.mesh is not None:
                distances[:, j] = self._mesh_distances(candidate.mesh, origins, direction)

        return self._nearest_hits(origins, direction, distances, usable, max_distance)

    @staticmethod
    def _mesh_distances(mesh, origins: np.ndarray, direction: np.ndarray) -> np.ndarray:
        """Closest forward hit distance per ray against one trimesh mesh."""
        result = np.full(len(origins), np.inf)

        directions = np.tile(direction, (len(origins), 1))
        locations, ray_indices, _ = mesh.ray.intersects_location(
            origins, directions, multiple_hits=True
        )

        if len(locations) == 0:
            return result

        along = np.einsum('ij,j->i', locations - origins[ray_indices], direction)
        forward = along >= 0
        np.minimum.at(result, ray_indices[forward], along[forward])

        return result
