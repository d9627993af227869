from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room state is per app instance and lives only in memory
    from pairplay.services.rooms.registry import RoomRegistry
    from pairplay.services.rooms.gateway import SessionGateway
    registry = RoomRegistry(
        max_age_sec=int(flask_app.config.get('ROOM_MAX_AGE_SEC', 1800)),
        max_attempts=int(flask_app.config.get('ROOM_CODE_MAX_ATTEMPTS', 1000)),
        logger=flask_app.logger,
    )
    flask_app.extensions['rooms'] = registry
    flask_app.extensions['gateway'] = SessionGateway(registry, logger=flask_app.logger)

    # Import and register blueprints here
    from pairplay.main import main
    flask_app.register_blueprint(main)

    from pairplay.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from pairplay.services.rooms.sweeper import start_room_sweeper
    start_room_sweeper(flask_app)

    @click.command('questions')
    @click.option('--mode', type=click.Choice(['truth', 'dare']), default=None)
    @click.option('--level', type=click.Choice(['easy', 'medium', 'hot']), default=None)
    def questions_command(mode, level):
        """Lists the question catalog."""
        from pairplay.questions import QUESTIONS, questions_of
        if mode:
            selected = questions_of(mode, level)
        else:
            selected = [q for q in QUESTIONS if level is None or q.level == level]
        for q in selected:
            click.echo(f"{q.id:>3} {q.type:<5} {q.level:<6} {q.text}")
        click.echo(f"{len(selected)} question(s)")

    flask_app.cli.add_command(questions_command)

    return flask_app
