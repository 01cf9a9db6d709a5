from flask_socketio import emit
from atlas import socketio, get_atlas


NAMESPACE = '/ws'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws', 'session': get_atlas().engine.state()})


def handle_ping(data):
    emit('pong', data or {})


def broadcast_session(state: dict) -> None:
    socketio.emit('session_update', state, namespace=NAMESPACE)


def broadcast_leaderboard() -> None:
    rows = [{'username': u, 'score': s} for u, s in get_atlas().ledger.leaderboard()]
    socketio.emit('leaderboard_update', rows, namespace=NAMESPACE)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
