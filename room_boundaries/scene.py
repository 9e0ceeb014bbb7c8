"""
Scene collaborators that supply boundary candidates to the detector.

Any object with a `list_candidate_objects()` method can act as a scene.
"""

from typing import Iterable, List, Optional

from .types import BoundaryCandidate


class StaticScene:
    """An in-memory list of candidate objects."""

    def __init__(self, objects: Optional[Iterable[BoundaryCandidate]] = None):
        self._objects: List[BoundaryCandidate] = list(objects or [])

    def list_candidate_objects(self) -> List[BoundaryCandidate]:
        """Every object that is not an internal helper visual."""
        return [obj for obj in self._objects if not obj.is_helper]

    def add(self, obj: BoundaryCandidate) -> None:
        self._objects.append(obj)

    def remove(self, obj: BoundaryCandidate) -> None:
        self._objects = [o for o in self._objects if o is not obj]

    def __len__(self) -> int:
        return len(self._objects)
