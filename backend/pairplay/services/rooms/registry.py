import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from pairplay.models import Room
from .codes import generate_room_code, normalize_code
from .exceptions import CapacityExhausted, RoomNotFound


class RoomRegistry:
    """In-memory store of live rooms keyed by code.

    One instance per application, created by the app factory. The internal
    lock only guards the mapping. Lock order is always room lock first,
    registry lock second; the registry never waits on a room lock while
    holding its own.
    """

    def __init__(
        self,
        max_age_sec: float = 1800,
        max_attempts: int = 1000,
        code_factory: Callable[[], str] = generate_room_code,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        self.max_age_sec = max_age_sec
        self.max_attempts = max_attempts
        self._code_factory = code_factory
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code):
        return self.get(code) is not None

    def codes(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def create_room(self) -> Room:
        with self._lock:
            for _ in range(self.max_attempts):
                code = normalize_code(self._code_factory())
                if code not in self._rooms:
                    break
            else:
                self._logger.error(f"[room-create-failed] attempts={self.max_attempts}")
                raise CapacityExhausted()
            room = Room(code, created_at=self._clock())
            self._rooms[code] = room
        self._logger.info(f"[room-created] code={code}")
        return room

    def get(self, code) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(normalize_code(code))

    def require(self, code) -> Room:
        room = self.get(code)
        if room is None:
            raise RoomNotFound(code=normalize_code(code))
        return room

    def delete(self, code) -> None:
        with self._lock:
            room = self._rooms.pop(normalize_code(code), None)
        if room is not None:
            room.closed = True
            self._logger.info(f"[room-deleted] code={room.code}")

    def discard(self, room: Room) -> None:
        """Remove ``room`` only if its code still maps to this very room."""
        with self._lock:
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]
            else:
                return
        room.closed = True
        self._logger.info(f"[room-deleted] code={room.code}")

    def sweep_expired(self, now: Optional[float] = None, max_age_sec: Optional[float] = None) -> List[str]:
        """Evict every room older than ``max_age_sec``, occupied or not.

        Age is measured from creation; activity does not extend a room's
        life. Each room is closed under its own lock so a sweep cannot
        interleave with a join in flight.
        """
        now = self._clock() if now is None else now
        max_age = self.max_age_sec if max_age_sec is None else max_age_sec
        with self._lock:
            candidates = [r for r in self._rooms.values() if now - r.created_at > max_age]

        removed = []
        for room in candidates:
            with room.lock:
                if room.closed:
                    continue
                room.closed = True
                with self._lock:
                    if self._rooms.get(room.code) is room:
                        del self._rooms[room.code]
            removed.append(room.code)
            self._logger.info(f"[room-expired] code={room.code} age={int(now - room.created_at)}s")
        return removed
