from flask import Blueprint, current_app, jsonify
from pairplay.models import MAX_PLAYERS
from pairplay.services.rooms.exceptions import CapacityExhausted
from pairplay.services.rooms.registry import RoomRegistry

main = Blueprint('main', __name__)


def _registry() -> RoomRegistry:
    return current_app.extensions['rooms']


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the pairplay server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': len(_registry())})


@main.route('/room/<string:code>')
def room_status(code):
    """
    Reports whether a room exists and whether it can take another player.
    """
    room = _registry().get(code)
    if not room:
        return jsonify({'error': 'Room not found'}), 404
    with room.lock:
        count = room.player_count
    return jsonify({
        'code': room.code,
        'playerCount': count,
        'isFull': count >= MAX_PLAYERS,
    })


@main.route('/create-room', methods=['POST'])
def create_room():
    """
    Creates an empty room; players take their seats over the socket.
    """
    try:
        room = _registry().create_room()
    except CapacityExhausted as exc:
        return jsonify({'error': exc.message}), 503
    return jsonify({'code': room.code, 'success': True}), 201
