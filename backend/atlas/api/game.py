from flask import Blueprint, jsonify, request, current_app
from atlas import get_atlas
from atlas.services.storage import PersistenceError
from atlas.socketio_events import broadcast_leaderboard, broadcast_session


game = Blueprint('game', __name__)


@game.route('/play', methods=['POST'])
def play():
    data = request.get_json(silent=True) or {}
    nation = data.get('nation')
    if nation is not None and not isinstance(nation, str):
        return jsonify({'error': 'Nation name must be a string.', 'gameOver': True}), 400

    engine = get_atlas().engine
    try:
        result = engine.submit_turn(nation or '')
    except PersistenceError:
        return jsonify({'error': 'An error occurred during the game.'}), 500

    current_app.logger.info(f"[play] nation={nation!r} outcome={result.outcome}")
    if result.is_loss:
        return jsonify({'error': result.message, 'gameOver': True}), 400
    broadcast_session(engine.state())
    return jsonify(result.to_dict())


@game.route('/hint/<string:letter>', methods=['GET'])
def hint(letter):
    try:
        nation = get_atlas().engine.hint(letter)
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    except PersistenceError as exc:
        return jsonify({'error': str(exc)}), 500
    if nation is None:
        return jsonify({'error': f'No unused nation starts with "{letter.strip().upper()}".'}), 404
    return jsonify({'letter': letter.strip().upper(), 'nation': nation})


@game.route('/session', methods=['GET'])
def session_state():
    try:
        return jsonify(get_atlas().engine.state())
    except PersistenceError as exc:
        return jsonify({'error': str(exc)}), 500


@game.route('/reset', methods=['POST'])
def reset():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    atlas = get_atlas()
    # Scores first: a failure there leaves the game untouched
    try:
        atlas.ledger.reset_score(username)
    except PersistenceError:
        return jsonify({'error': 'Game reset failed due to a storage error.'}), 500
    try:
        state = atlas.engine.reset()
    except PersistenceError:
        if username:
            broadcast_leaderboard()
        return jsonify({'error': 'Game reset failed due to a storage error.'}), 500

    current_app.logger.info(f"[reset] user={username!r}")
    broadcast_session(state)
    if username:
        broadcast_leaderboard()
    return jsonify({
        'success': True,
        'message': f"Game reset. Start with a nation beginning with '{state['lastLetter']}'.",
        'lastLetter': state['lastLetter'],
    })


@game.route('/reset-all', methods=['POST'])
def reset_all():
    atlas = get_atlas()
    try:
        atlas.ledger.reset_all()
    except PersistenceError:
        return jsonify({'error': 'Game reset failed due to a storage error.'}), 500
    try:
        state = atlas.engine.reset()
    except PersistenceError:
        broadcast_leaderboard()
        return jsonify({'error': 'Game reset failed due to a storage error.'}), 500

    current_app.logger.info("[reset-all] session and scores cleared")
    broadcast_session(state)
    broadcast_leaderboard()
    return jsonify({
        'success': True,
        'message': f"Game and scores reset. Start with a nation beginning with '{state['lastLetter']}'.",
        'lastLetter': state['lastLetter'],
    })
