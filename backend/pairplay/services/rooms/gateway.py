import logging
import threading
import time
from typing import Callable, Dict, List, NamedTuple, Optional

from pairplay.models import Event, Room
from .exceptions import RoomError, RoomNotFound
from .registry import RoomRegistry

# How long a disconnected sid is remembered (seconds)
DISCONNECT_MEMORY_SEC = 300


class Binding(NamedTuple):
    room_code: str
    player_id: int


class Delivery(NamedTuple):
    """One outbound event: direct to ``sid`` or broadcast to ``room_code``."""
    event: str
    payload: dict
    sid: Optional[str] = None
    room_code: Optional[str] = None


class Dispatch:
    """What the transport must do after an inbound event was handled."""

    def __init__(self):
        self.deliveries: List[Delivery] = []
        # Room channel the connection should be subscribed to / removed from
        self.subscribe: Optional[str] = None
        self.unsubscribe: Optional[str] = None

    def direct(self, sid: str, event: str, payload: dict) -> None:
        self.deliveries.append(Delivery(event, payload, sid=sid))

    def broadcast(self, room_code: str, events: List[Event]) -> None:
        for ev in events:
            self.deliveries.append(Delivery(ev.name, ev.payload, room_code=room_code))

    def events(self) -> List[str]:
        return [d.event for d in self.deliveries]


class SessionGateway:
    """Binds connections to rooms and turns inbound events into room
    operations.

    The connection -> (room code, player id) side-table lives here. Room
    operations run under the room's lock and their payloads are serialized
    before the lock is released; sending happens afterwards, in the
    transport, so a slow peer never holds up a room.
    """

    def __init__(self, registry: RoomRegistry, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self._logger = logger or logging.getLogger(__name__)
        self._bindings: Dict[str, Binding] = {}
        self._disconnected: Dict[str, float] = {}
        self._lock = threading.Lock()

    def binding_for(self, sid: str) -> Optional[Binding]:
        with self._lock:
            return self._bindings.get(sid)

    # ---- create / join ----

    def create_room(self, sid: str, player_name) -> Dispatch:
        dispatch = Dispatch()
        try:
            room = self.registry.create_room()
        except RoomError as exc:
            dispatch.direct(sid, 'error', {'message': exc.message})
            return dispatch
        return self._seat(sid, room, player_name, 'room-created', dispatch)

    def join_room(self, sid: str, room_code, player_name) -> Dispatch:
        dispatch = Dispatch()
        current = self.binding_for(sid)
        try:
            room = self.registry.require(room_code)
        except RoomError as exc:
            dispatch.direct(sid, 'error', {'message': exc.message})
            return dispatch
        if current is not None and current.room_code == room.code:
            # Already seated here
            return dispatch
        return self._seat(sid, room, player_name, 'joined-room', dispatch)

    def _seat(self, sid: str, room: Room, player_name, ack: str, dispatch: Dispatch) -> Dispatch:
        try:
            with room.lock:
                if room.closed:
                    raise RoomNotFound(code=room.code)
                player, events = room.join(sid, player_name)
                # Binding and seat change together, under the room lock
                with self._lock:
                    gone = sid in self._disconnected
                    previous = None if gone else self._bindings.get(sid)
                    if not gone:
                        self._bindings[sid] = Binding(room.code, player.id)
                if gone:
                    _, left = room.leave(sid)
                    events = events + left
                    if not room.players:
                        self.registry.discard(room)
        except RoomError as exc:
            self._logger.info(f"[join-rejected] sid={sid} code={room.code} reason={exc.message}")
            dispatch.direct(sid, 'error', {'message': exc.message})
            return dispatch

        if gone:
            self._logger.info(f"[join-abandoned] sid={sid} code={room.code}")
            dispatch.broadcast(room.code, events)
            return dispatch

        # A connection holds one binding at most; drop the previous seat
        if previous is not None:
            self._leave(sid, previous, dispatch)
        self._logger.info(f"[join] sid={sid} code={room.code} player={player.id}")

        dispatch.subscribe = room.code
        dispatch.direct(sid, ack, {
            'roomCode': room.code,
            'playerId': player.id,
            'playerName': player.name,
        })
        dispatch.broadcast(room.code, events)
        return dispatch

    # ---- game events ----

    def _apply(self, sid: str, operation: Callable[[Room], List[Event]]) -> Dispatch:
        dispatch = Dispatch()
        binding = self.binding_for(sid)
        if binding is None:
            return dispatch
        room = self.registry.get(binding.room_code)
        if room is None:
            return dispatch
        with room.lock:
            if room.closed or room.player_for(sid) is None:
                return dispatch
            events = operation(room)
        dispatch.broadcast(room.code, events)
        return dispatch

    def select_mode(self, sid: str, mode) -> Dispatch:
        return self._apply(sid, lambda room: room.select_mode(mode))

    def complete_challenge(self, sid: str, completed) -> Dispatch:
        return self._apply(sid, lambda room: room.complete_challenge(bool(completed)))

    def skip_question(self, sid: str) -> Dispatch:
        return self._apply(sid, lambda room: room.skip_question())

    def end_game(self, sid: str) -> Dispatch:
        return self._apply(sid, lambda room: room.end_game())

    def reset_game(self, sid: str) -> Dispatch:
        return self._apply(sid, lambda room: room.reset_game())

    # ---- disconnect ----

    def disconnect(self, sid: str) -> Dispatch:
        dispatch = Dispatch()
        now = time.time()
        with self._lock:
            # Remembered so that a join still in flight for this sid is undone
            self._disconnected[sid] = now
            for stale in [s for s, at in self._disconnected.items() if now - at > DISCONNECT_MEMORY_SEC]:
                del self._disconnected[stale]
            binding = self._bindings.pop(sid, None)
        if binding is not None:
            self._leave(sid, binding, dispatch)
        return dispatch

    def _leave(self, sid: str, binding: Binding, dispatch: Dispatch) -> None:
        room = self.registry.get(binding.room_code)
        if room is None:
            return
        with room.lock:
            if room.closed:
                return
            player, events = room.leave(sid)
            if not room.players:
                self.registry.discard(room)
        self._logger.info(f"[leave] sid={sid} code={room.code} player={player.id if player else None}")
        dispatch.unsubscribe = room.code
        dispatch.broadcast(room.code, events)
