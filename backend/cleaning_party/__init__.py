import logging

import click
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException
from config import Config

from cleaning_party.errors import GameError

db = SQLAlchemy()
migrate = Migrate()


def _build_store(flask_app):
    from cleaning_party.store import MemorySessionStore, SqlSessionStore
    kind = flask_app.config.get('SESSION_STORE', 'sql')
    if kind == 'memory':
        return MemorySessionStore()
    if kind == 'sql':
        return SqlSessionStore(db)
    raise ValueError(f"unknown SESSION_STORE {kind!r}")


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    level = logging.getLevelName(str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper())
    flask_app.logger.setLevel(level if isinstance(level, int) else logging.INFO)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', []))

    from cleaning_party.services.games import GameEngine
    store = _build_store(flask_app)
    flask_app.extensions['game_engine'] = GameEngine.from_config(flask_app.config, store)

    # Import and register blueprints here
    from cleaning_party.main import main
    flask_app.register_blueprint(main)

    from cleaning_party.api.games import games
    # Same paths the polling client already calls (/api/join-game, ...)
    flask_app.register_blueprint(games, url_prefix='/api')

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return exc
        flask_app.logger.exception(f"[error] unhandled {type(exc).__name__}: {exc}")
        return jsonify({'error': 'Internal server error'}), 500

    @click.command('init-db')
    def init_db_command():
        """Creates the session store table."""
        import cleaning_party.models  # noqa: F401
        with flask_app.app_context():
            db.create_all()
            print('Session store table created.')

    @click.command('reset-game')
    @click.argument('game_code')
    def reset_game_command(game_code):
        """Deletes one stored game session."""
        from cleaning_party.services.games import game_key
        with flask_app.app_context():
            removed = flask_app.extensions['game_engine'].store.delete(game_key(game_code))
            print(f"Game {game_code} {'removed' if removed else 'not found'}.")

    flask_app.cli.add_command(init_db_command)
    flask_app.cli.add_command(reset_game_command)

    return flask_app
