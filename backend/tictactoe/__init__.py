from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

# Threading mode: sessions are guarded by threading locks held across emits
socketio = SocketIO(async_mode='threading')

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One store and one registry per application; handlers reach them
    # through the dispatcher kept in flask_app.extensions
    from tictactoe.protocol import Dispatcher
    from tictactoe.services.connections import ConnectionRegistry
    from tictactoe.services.games.store import SessionStore
    from tictactoe.services.games.variants import load_variants

    variants = load_variants(flask_app.config)
    store = SessionStore(variants, flask_app.config.get('DEFAULT_VARIANT') or 'classic')
    flask_app.extensions['session_sync'] = Dispatcher(store, ConnectionRegistry())

    from tictactoe.main import main
    flask_app.register_blueprint(main)

    from tictactoe.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from tictactoe.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app.config.get('SOCKETIO_NAMESPACE', '/ws'))

    @click.command('variants')
    def variants_command():
        """Lists the configured game variants."""
        default = store.default_variant
        for name, variant in sorted(store.variants.items()):
            marker = '*' if name == default else ' '
            click.echo(
                f"{marker} {name}: {variant.board_size}x{variant.board_size}, "
                f"{variant.win_length} in a row, {variant.players} players, "
                f"{len(variant.win_lines)} win lines"
            )

    flask_app.cli.add_command(variants_command)

    return flask_app
