from mazerace import registry


def _named(received, name):
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]


def _create(host, max_players=2, total_rounds=3, name='Alice'):
    host.emit('createRoom', {'playerName': name, 'maxPlayers': max_players, 'totalRounds': total_rounds})
    (created,) = _named(host.get_received(), 'roomCreated')
    return created['roomCode']


def _started_match(make_sio_client, total_rounds=3):
    host = make_sio_client()
    guest = make_sio_client()
    code = _create(host, total_rounds=total_rounds)
    guest.emit('joinRoom', {'playerName': 'Bob', 'roomCode': code})
    host.get_received()
    guest.get_received()
    return host, guest, code


def test_socket_connects(sio_client):
    assert sio_client.is_connected()


def test_create_room_replies_to_creator(sio_client):
    sio_client.emit('createRoom', {'playerName': 'Alice', 'maxPlayers': '3', 'totalRounds': '5'})
    (created,) = _named(sio_client.get_received(), 'roomCreated')
    assert created['isHost'] is True
    assert created['room']['maxPlayers'] == 3
    assert created['room']['totalRounds'] == 5
    assert created['room']['status'] == 'waiting'
    assert created['room']['players'][0]['name'] == 'Alice'
    assert registry.get_room(created['roomCode']) is not None


def test_create_room_coerces_bad_numbers(sio_client, flask_app):
    sio_client.emit('createRoom', {'playerName': '   ', 'maxPlayers': 'lots', 'totalRounds': 999})
    (created,) = _named(sio_client.get_received(), 'roomCreated')
    room = created['room']
    assert room['maxPlayers'] == flask_app.config['DEFAULT_MAX_PLAYERS']
    assert room['totalRounds'] == flask_app.config['MAX_TOTAL_ROUNDS']
    assert room['players'][0]['name'] == 'Player 1'


def test_join_fills_room_and_starts_round(make_sio_client):
    host = make_sio_client()
    guest = make_sio_client()
    code = _create(host)

    guest.emit('joinRoom', {'playerName': 'Bob', 'roomCode': code.lower()})
    for sock in (host, guest):
        received = sock.get_received()
        (joined,) = _named(received, 'playerJoined')
        assert [p['name'] for p in joined['players']] == ['Alice', 'Bob']
        assert joined['maxPlayers'] == 2
        (started,) = _named(received, 'gameStart')
        assert started['round'] == 1
        assert started['roomCode'] == code
        assert len(started['maze']) == 11

    room = registry.get_room(code)
    assert room.status == 'playing'
    assert room.maze is not None


def test_join_errors_go_to_sender_only(make_sio_client):
    host, guest, code = _started_match(make_sio_client)
    late = make_sio_client()

    late.emit('joinRoom', {'playerName': 'Cara', 'roomCode': 'QQQQ'})
    assert _named(late.get_received(), 'error') == ['Room not found']

    late.emit('joinRoom', {'playerName': 'Cara', 'roomCode': code})
    assert _named(late.get_received(), 'error') == ['Game already in progress']
    assert host.get_received() == []
    assert len(registry.get_room(code).players) == 2


def test_move_is_relayed_to_others_only(make_sio_client):
    host, guest, code = _started_match(make_sio_client)
    guest_id = registry.get_room(code).players[1].id

    guest.emit('playerMove', {'roomCode': code, 'position': {'x': '2', 'y': 1}})
    (moved,) = _named(host.get_received(), 'playerMoved')
    assert moved == {'id': guest_id, 'position': {'x': 2, 'y': 1}}
    assert _named(guest.get_received(), 'playerMoved') == []


def test_malformed_move_is_dropped(make_sio_client):
    host, guest, code = _started_match(make_sio_client)
    guest.emit('playerMove', {'roomCode': code, 'position': {'x': 'left'}})
    guest.emit('playerMove', {'roomCode': code})
    guest.emit('playerMove', 'not even a dict')
    guest.emit('playerMove', {'roomCode': 'NOPE', 'position': {'x': 1, 'y': 2}})
    assert host.get_received() == []
    assert guest.get_received() == []
    bob = registry.get_room(code).players[1]
    assert (bob.x, bob.y) == (1, 1)


def test_round_result_after_everyone_finishes(make_sio_client):
    host, guest, code = _started_match(make_sio_client)

    host.emit('playerWon', {'roomCode': code})
    host.emit('playerWon', {'roomCode': code})
    (finished,) = _named(guest.get_received(), 'playerFinished')
    assert finished['finishTime'] >= 0
    assert [p['finished'] for p in finished['players']] == [True, False]

    guest.emit('playerWon', {'roomCode': code})
    for sock in (host, guest):
        (result,) = _named(sock.get_received(), 'roundResult')
        assert result['winner']['name'] == 'Alice'
        assert result['currentRound'] == 1
        assert result['isGrandWinner'] is False
    assert registry.get_room(code).status == 'round_over'


def test_next_round_and_play_again(make_sio_client):
    host, guest, code = _started_match(make_sio_client, total_rounds=1)
    guest.emit('playerWon', {'roomCode': code})
    host.emit('playerWon', {'roomCode': code})
    (result,) = _named(host.get_received(), 'roundResult')
    assert result['isGrandWinner'] is True
    guest.get_received()

    # No further rounds once the match is decided
    host.emit('requestNextRound', {'roomCode': code})
    assert _named(guest.get_received(), 'gameStart') == []

    guest.emit('requestPlayAgain', {'roomCode': code})
    (reset,) = _named(host.get_received(), 'resetToLobby')
    assert all(p['score'] == 0 for p in reset['players'])
    room = registry.get_room(code)
    assert room.status == 'waiting'
    assert room.current_round == 1


def test_disconnect_updates_roster_and_closes_room(make_sio_client):
    host, guest, code = _started_match(make_sio_client)

    guest.disconnect()
    (left,) = _named(host.get_received(), 'playerLeft')
    assert [p['name'] for p in left['players']] == ['Alice']

    host.disconnect()
    assert registry.get_room(code) is None


def test_create_room_with_infinite_numbers_uses_defaults(sio_client, flask_app):
    sio_client.emit('createRoom', {'playerName': 'Alice', 'maxPlayers': float('inf'), 'totalRounds': float('-inf')})
    (created,) = _named(sio_client.get_received(), 'roomCreated')
    assert created['room']['maxPlayers'] == flask_app.config['DEFAULT_MAX_PLAYERS']
    assert created['room']['totalRounds'] == flask_app.config['DEFAULT_TOTAL_ROUNDS']


def test_infinite_move_is_dropped(make_sio_client):
    host, guest, code = _started_match(make_sio_client)
    guest.emit('playerMove', {'roomCode': code, 'position': {'x': float('inf'), 'y': 1}})
    assert host.get_received() == []
    bob = registry.get_room(code).players[1]
    assert (bob.x, bob.y) == (1, 1)


def test_full_lobby_rejects_join_to_sender_only(make_sio_client):
    host, guest, code = _started_match(make_sio_client, total_rounds=1)
    host.emit('playerWon', {'roomCode': code})
    guest.emit('playerWon', {'roomCode': code})
    host.emit('requestPlayAgain', {'roomCode': code})
    host.get_received()
    guest.get_received()
    assert registry.get_room(code).status == 'waiting'

    late = make_sio_client()
    late.emit('joinRoom', {'playerName': 'Cara', 'roomCode': code})
    assert _named(late.get_received(), 'error') == ['Room is full']
    assert host.get_received() == []
    assert guest.get_received() == []
    assert len(registry.get_room(code).players) == 2


def test_host_cannot_take_a_second_seat(sio_client):
    code = _create(sio_client, max_players=2)
    sio_client.emit('joinRoom', {'playerName': 'Alice again', 'roomCode': code})
    assert _named(sio_client.get_received(), 'error') == ['You are already in this room']
    room = registry.get_room(code)
    assert len(room.players) == 1
    assert room.status == 'waiting'


def test_joining_another_room_leaves_the_first(make_sio_client):
    first_host = make_sio_client()
    second_host = make_sio_client()
    wanderer = make_sio_client()
    first = _create(first_host, max_players=3)
    second = _create(second_host, max_players=2, name='Bob')
    wanderer.emit('joinRoom', {'playerName': 'Cara', 'roomCode': first})
    first_host.get_received()
    wanderer.get_received()

    wanderer.emit('joinRoom', {'playerName': 'Cara', 'roomCode': second})
    (left,) = _named(first_host.get_received(), 'playerLeft')
    assert [p['name'] for p in left['players']] == ['Alice']
    assert [p.name for p in registry.get_room(first).players] == ['Alice']
    assert registry.get_room(second).status == 'playing'
    # Old room broadcasts no longer reach the wanderer
    received = wanderer.get_received()
    assert _named(received, 'playerLeft') == []
    assert len(_named(received, 'gameStart')) == 1

    wanderer.disconnect()
    (left,) = _named(second_host.get_received(), 'playerLeft')
    assert [p['name'] for p in left['players']] == ['Bob']
    assert [p.name for p in registry.get_room(second).players] == ['Bob']
