from flask import Blueprint, jsonify, request, current_app
from atlas import get_atlas
from atlas.services.storage import (
    GuestPlayerError,
    InvalidPlayerError,
    PersistenceError,
    PlayerNotFoundError,
)
from atlas.socketio_events import broadcast_leaderboard


players = Blueprint('players', __name__)


@players.route('/adduser', methods=['POST'])
def add_user():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    try:
        created = get_atlas().ledger.register(username)
    except (InvalidPlayerError, GuestPlayerError) as exc:
        return jsonify({'error': str(exc)}), 400
    except PersistenceError as exc:
        return jsonify({'error': str(exc)}), 500

    username = username.strip()
    if not created:
        return jsonify({'message': f"User '{username}' already exists."}), 200
    current_app.logger.info(f"[adduser] user={username!r}")
    broadcast_leaderboard()
    return jsonify({'message': f"User '{username}' created successfully."}), 201


@players.route('/deleteuser', methods=['POST'])
def delete_user():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    try:
        deleted = get_atlas().ledger.delete(username)
    except (InvalidPlayerError, GuestPlayerError):
        return jsonify({'error': 'Invalid username specified or cannot delete Guest.'}), 400
    except PersistenceError as exc:
        return jsonify({'error': str(exc)}), 500

    username = username.strip()
    if not deleted:
        return jsonify({'error': f"User '{username}' not found."}), 404
    current_app.logger.info(f"[deleteuser] user={username!r}")
    broadcast_leaderboard()
    return jsonify({'success': True, 'message': f"User '{username}' has been deleted."})


@players.route('/score', methods=['POST'])
def save_score():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    score = data.get('score')
    if score is None:
        return jsonify({'error': 'Invalid user or score.'}), 400
    try:
        stored = get_atlas().ledger.record_score(username, score)
    except (InvalidPlayerError, GuestPlayerError):
        return jsonify({'error': 'Invalid user or score.'}), 400
    except PlayerNotFoundError as exc:
        return jsonify({'error': str(exc)}), 404
    except PersistenceError:
        return jsonify({'error': 'Failed to save score.'}), 500

    current_app.logger.info(f"[score] user={username!r} submitted={score} best={stored}")
    broadcast_leaderboard()
    return jsonify({'success': True, 'message': 'Score saved!', 'score': stored})


@players.route('/score/<string:username>', methods=['GET'])
def get_score(username):
    try:
        score = get_atlas().ledger.get_score(username)
    except PersistenceError:
        return jsonify({'error': 'Failed to fetch score.'}), 500
    return jsonify({'username': username, 'score': score})


@players.route('/scores', methods=['GET'])
def get_scores():
    try:
        rows = get_atlas().ledger.leaderboard()
    except PersistenceError:
        return jsonify({'error': 'Failed to fetch scores.'}), 500
    return jsonify([{'username': u, 'score': s} for u, s in rows])
