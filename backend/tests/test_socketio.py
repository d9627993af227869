from pairplay.socketio_events import NAMESPACE


def _events(test_client, name=None):
    received = test_client.get_received(NAMESPACE)
    if name is None:
        return received
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]


def _open_room(make_sio_client):
    host = make_sio_client()
    host.emit('create-room', {'playerName': 'Ana'}, namespace=NAMESPACE)
    created = _events(host, 'room-created')
    assert created and created[0]['playerId'] == 1
    code = created[0]['roomCode']

    guest = make_sio_client()
    guest.emit('join-room', {'roomCode': code.lower(), 'playerName': 'Luis'}, namespace=NAMESPACE)
    return host, guest, code


def test_socket_connect(sio_client):
    assert sio_client.is_connected(NAMESPACE)


def test_create_room_acks_and_lists_creator(sio_client):
    sio_client.emit('create-room', {'playerName': 'Ana'}, namespace=NAMESPACE)
    received = _events(sio_client)
    names = [pkt['name'] for pkt in received]
    assert names == ['room-created', 'player-joined']
    ack = received[0]['args'][0]
    assert ack['playerName'] == 'Ana'
    assert len(ack['roomCode']) == 6
    assert received[1]['args'][0] == {'players': [{'id': 1, 'name': 'Ana', 'score': 0}], 'playerCount': 1}


def test_join_starts_game_for_both(make_sio_client):
    host, guest, code = _open_room(make_sio_client)
    joined = _events(guest)
    assert [pkt['name'] for pkt in joined] == ['joined-room', 'player-joined', 'game-start']
    assert joined[0]['args'][0] == {'roomCode': code, 'playerId': 2, 'playerName': 'Luis'}

    host_events = _events(host)
    assert [pkt['name'] for pkt in host_events] == ['player-joined', 'game-start']
    start = host_events[1]['args'][0]
    assert start['gameState']['currentPlayerId'] == 1
    assert start['gameState']['round'] == 1


def test_join_unknown_room_sends_error(sio_client):
    sio_client.emit('join-room', {'roomCode': 'NOPE22', 'playerName': 'Ana'}, namespace=NAMESPACE)
    assert _events(sio_client, 'error') == [{'message': 'Room not found'}]


def test_third_player_is_rejected_privately(make_sio_client):
    host, guest, code = _open_room(make_sio_client)
    _events(host)
    _events(guest)
    third = make_sio_client()
    third.emit('join-room', {'roomCode': code, 'playerName': 'Eva'}, namespace=NAMESPACE)
    assert _events(third, 'error') == [{'message': 'Room is full'}]
    assert _events(host) == []
    assert _events(guest) == []


def test_full_turn_cycle(make_sio_client):
    host, guest, code = _open_room(make_sio_client)
    _events(host)
    _events(guest)

    host.emit('select-mode', {'mode': 'truth'}, namespace=NAMESPACE)
    selected = _events(guest, 'question-selected')
    assert selected[0]['question']['type'] == 'truth'
    assert selected[0]['gameState']['usedQuestionIds'] == [selected[0]['question']['id']]

    host.emit('complete-challenge', {'completed': True}, namespace=NAMESPACE)
    done = _events(guest, 'challenge-completed')[0]
    assert done['players'][0]['score'] == 10
    assert done['gameState']['currentPlayerId'] == 2
    assert done['gameState']['currentQuestion'] is None

    guest.emit('complete-challenge', {'completed': True}, namespace=NAMESPACE)
    done = _events(host, 'challenge-completed')[-1]
    assert [p['score'] for p in done['players']] == [10, 10]
    assert done['gameState']['currentPlayerId'] == 1
    assert done['gameState']['round'] == 2

    guest.emit('skip-question', namespace=NAMESPACE)
    assert _events(host, 'question-skipped')[0]['gameState']['round'] == 2

    host.emit('end-game', namespace=NAMESPACE)
    assert [p['name'] for p in _events(guest, 'game-ended')[-1]['players']] == ['Ana', 'Luis']

    guest.emit('reset-game', namespace=NAMESPACE)
    reset = _events(host, 'game-reset')[-1]
    assert [p['score'] for p in reset['players']] == [0, 0]
    assert reset['gameState']['round'] == 1


def test_unbound_game_events_are_silent(sio_client):
    sio_client.emit('select-mode', {'mode': 'dare'}, namespace=NAMESPACE)
    sio_client.emit('complete-challenge', {'completed': True}, namespace=NAMESPACE)
    sio_client.emit('reset-game', namespace=NAMESPACE)
    assert _events(sio_client) == []


def test_disconnect_notifies_remaining_player(flask_app, make_sio_client):
    host, guest, code = _open_room(make_sio_client)
    _events(host)
    guest.disconnect(namespace=NAMESPACE)
    left = _events(host, 'player-left')
    assert left == [{'players': [{'id': 1, 'name': 'Ana', 'score': 0}], 'playerCount': 1}]

    host.disconnect(namespace=NAMESPACE)
    assert flask_app.extensions['rooms'].get(code) is None


def test_malformed_payloads_are_ignored(make_sio_client):
    host, guest, code = _open_room(make_sio_client)
    _events(host)
    _events(guest)
    host.emit('select-mode', 'truth', namespace=NAMESPACE)
    host.emit('complete-challenge', True, namespace=NAMESPACE)
    guest.emit('join-room', code, namespace=NAMESPACE)
    guest.emit('create-room', 'Luis', namespace=NAMESPACE)
    assert _events(host) == []
    assert _events(guest) == []

    # The room still works afterwards
    host.emit('select-mode', {'mode': 'truth'}, namespace=NAMESPACE)
    assert len(_events(guest, 'question-selected')) == 1
