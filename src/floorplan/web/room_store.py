"""In-memory storage for saved room outlines."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any

from floorplan.web.exceptions import RoomNotFoundError


class RoomStore:
    """Keeps saved rooms for the lifetime of the process.

    Ids are assigned sequentially from 1. Stored records are plain dicts
    holding the submitted fields plus id, created_at and updated_at.
    """

    def __init__(self) -> None:
        self._rooms: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def add(self, data: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        with self._lock:
            record = {
                **data,
                "id": len(self._rooms) + 1,
                "created_at": now,
                "updated_at": now,
            }
            self._rooms.append(record)
        return record

    def all_rooms(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._rooms)

    def get(self, room_id: int) -> dict[str, Any]:
        with self._lock:
            for record in self._rooms:
                if record["id"] == room_id:
                    return record
        raise RoomNotFoundError(room_id)

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()
