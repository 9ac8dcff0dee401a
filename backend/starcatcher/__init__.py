from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

SEED_ENTRIES = [
    ('Nova', 120, 4),
    ('Orbit_7', 80, 3),
    ('Comet-Kid', 40, 2),
]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from starcatcher.main import main
    flask_app.register_blueprint(main)

    from starcatcher.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from starcatcher.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the leaderboard."""
        from starcatcher.models import LeaderboardEntry
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            for name, score, level in SEED_ENTRIES:
                db.session.add(LeaderboardEntry(name=name, score=score, level=level))

            db.session.commit()
            click.echo('Leaderboard has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
