from flask import Blueprint, jsonify, request, current_app

games = Blueprint('games', __name__)


def _engine():
    return current_app.extensions['game_engine']


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@games.route('/join-game', methods=['POST'])
def join_game():
    data = _json_body()
    player_id, game = _engine().join(data.get('gameId'), data.get('playerName'))
    return jsonify({
        'success': True,
        'playerId': player_id,
        'gameState': game.to_dict(),
    })


@games.route('/game-state', methods=['GET'])
def get_game_state():
    return jsonify(_engine().get_state(request.args.get('gameId')))


@games.route('/complete-task', methods=['POST'])
def complete_task():
    data = _json_body()
    game = _engine().complete_task(
        data.get('gameId'),
        data.get('playerId'),
        data.get('taskId'),
        partner_required=bool(data.get('partnerRequired')),
    )
    return jsonify({'success': True, 'gameState': game.to_dict()})


@games.route('/partner-request', methods=['POST'])
def partner_request():
    data = _json_body()
    game = _engine().partner(data.get('gameId'), data.get('playerId'), data.get('targetPlayerId'))
    return jsonify({'success': True, 'gameState': game.to_dict()})


@games.route('/start-round', methods=['POST'])
def start_round():
    data = _json_body()
    game = _engine().start_round(data.get('gameId'))
    return jsonify({'success': True, 'gameState': game.to_dict()})


@games.route('/scoreboard', methods=['GET'])
def get_scoreboard():
    return jsonify(_engine().scoreboard(request.args.get('gameId')))
