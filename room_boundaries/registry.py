"""
In-memory registry of the rooms found by the latest detection pass.
"""

import threading
from typing import Dict, Iterator, List, Optional

from .room import DetectedRoom


class RoomRegistry:
    """
    Owns the current room set.

    A detection pass builds its rooms locally and hands them over with
    replace_all(), so readers never see a half-cleared registry.
    """

    def __init__(self):
        self._rooms: Dict[str, DetectedRoom] = {}
        self._lock = threading.Lock()

    def replace_all(self, rooms: List[DetectedRoom]) -> None:
        new_rooms = {room.id: room for room in rooms}
        with self._lock:
            self._rooms = new_rooms

    def clear(self) -> None:
        with self._lock:
            self._rooms = {}

    def get(self, room_id: str) -> Optional[DetectedRoom]:
        with self._lock:
            return self._rooms.get(room_id)

    def all(self) -> List[DetectedRoom]:
        with self._lock:
            return list(self._rooms.values())

    def find_containing_point(self, x: float, z: float) -> Optional[DetectedRoom]:
        """First room whose polygon contains the plan point (x, z)."""
        for room in self.all():
            if room.contains_point(x, z):
                return room
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __iter__(self) -> Iterator[DetectedRoom]:
        return iter(self.all())
