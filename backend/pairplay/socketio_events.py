from flask import current_app, request
from flask_socketio import join_room, leave_room
from pairplay import socketio
from pairplay.services.rooms.gateway import Dispatch, SessionGateway
from typing import Optional

NAMESPACE = '/ws'


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _gateway() -> SessionGateway:
    return current_app.extensions['gateway']


def room_channel(room_code: str) -> str:
    return f"room:{room_code}"


def _deliver(dispatch: Dispatch, skip_sid: Optional[str] = None) -> None:
    """Apply subscription changes, then send every delivery in order."""
    if dispatch.unsubscribe and skip_sid is None:
        leave_room(room_channel(dispatch.unsubscribe))
    if dispatch.subscribe:
        join_room(room_channel(dispatch.subscribe))
    for d in dispatch.deliveries:
        if d.sid:
            socketio.emit(d.event, d.payload, to=d.sid, namespace=NAMESPACE)
        else:
            socketio.emit(d.event, d.payload, to=room_channel(d.room_code),
                          skip_sid=skip_sid, namespace=NAMESPACE)


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    _deliver(_gateway().disconnect(sid), skip_sid=sid)


def handle_create_room(data=None):
    if not isinstance(data, dict):
        return
    _deliver(_gateway().create_room(_get_sid(), data.get('playerName')))


def handle_join_room(data=None):
    if not isinstance(data, dict):
        return
    _deliver(_gateway().join_room(_get_sid(), data.get('roomCode'), data.get('playerName')))


def handle_select_mode(data=None):
    if not isinstance(data, dict):
        return
    _deliver(_gateway().select_mode(_get_sid(), data.get('mode')))


def handle_complete_challenge(data=None):
    if not isinstance(data, dict):
        return
    _deliver(_gateway().complete_challenge(_get_sid(), data.get('completed')))


def handle_skip_question(data=None):
    _deliver(_gateway().skip_question(_get_sid()))


def handle_end_game(data=None):
    _deliver(_gateway().end_game(_get_sid()))


def handle_reset_game(data=None):
    _deliver(_gateway().reset_game(_get_sid()))


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-room', handle_create_room, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('select-mode', handle_select_mode, namespace=namespace)
    socketio.on_event('complete-challenge', handle_complete_challenge, namespace=namespace)
    socketio.on_event('skip-question', handle_skip_question, namespace=namespace)
    socketio.on_event('end-game', handle_end_game, namespace=namespace)
    socketio.on_event('reset-game', handle_reset_game, namespace=namespace)
