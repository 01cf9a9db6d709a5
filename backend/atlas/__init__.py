from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import random
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


class Atlas:
    """Per-app game services, reachable as ``current_app.extensions['atlas']``."""

    def __init__(self, catalog, engine, ledger):
        self.catalog = catalog
        self.engine = engine
        self.ledger = ledger


def get_atlas() -> Atlas:
    return current_app.extensions['atlas']


def _build_stores(flask_app):
    backend = flask_app.config.get('STORE_BACKEND', 'sql')
    guest = flask_app.config.get('GUEST_USERNAME', 'Guest')
    if backend == 'json':
        from atlas.services.storage.json_file import JsonFileStore
        store = JsonFileStore(
            flask_app.config['JSON_STORE_PATH'],
            guest_username=guest,
            starting_letter=flask_app.config.get('STARTING_LETTER', 'S'),
        )
        return store, store
    if backend == 'sql':
        from atlas.services.storage.sql import SqlScoreLedger, SqlSessionStore
        return SqlScoreLedger(guest_username=guest), SqlSessionStore()
    raise ValueError(f"Unknown STORE_BACKEND {backend!r}; expected 'sql' or 'json'")


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from atlas.services.nations import NationCatalog
    from atlas.services.game import TurnEngine

    # A broken catalog raises CatalogLoadError here and the app never starts serving
    catalog = NationCatalog.load(flask_app.config.get('NATIONS_FILE'))
    flask_app.logger.info(f"[startup] catalog ready with {len(catalog)} nations")

    if flask_app.config.get('STORE_BACKEND', 'sql') == 'sql':
        import atlas.models  # noqa: F401
        with flask_app.app_context():
            db.create_all()

    ledger, session_store = _build_stores(flask_app)
    engine = TurnEngine(
        catalog,
        store=session_store,
        rng=random.Random(flask_app.config.get('RANDOM_SEED')),
        starting_letter=flask_app.config.get('STARTING_LETTER', 'S'),
    )
    flask_app.extensions['atlas'] = Atlas(catalog, engine, ledger)

    from atlas.main import main
    flask_app.register_blueprint(main)

    from atlas.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api')

    from atlas.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api')

    from atlas.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Removes every stored player and starts a fresh game."""
        with flask_app.app_context():
            if flask_app.config.get('STORE_BACKEND', 'sql') == 'sql':
                db.drop_all()
                db.create_all()
            else:
                for username, _ in ledger.leaderboard():
                    ledger.delete(username)
            state = engine.reset()
            print(f"Database has been reset! Start with a nation beginning with '{state['lastLetter']}'.")

    @click.command('reset-scores')
    def reset_scores_command():
        """Sets every player's score to zero."""
        with flask_app.app_context():
            ledger.reset_all()
            print('All scores have been reset.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(reset_scores_command)

    return flask_app
