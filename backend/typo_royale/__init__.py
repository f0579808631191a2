from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS', '*')
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from typo_royale.main import main
    flask_app.register_blueprint(main)

    # Room table lives as long as the app; handlers reach it via extensions
    from typo_royale.services.sessions import (
        RoomRegistry,
        RoundAdvanceScheduler,
        SentenceProvider,
        SessionCoordinator,
    )
    from typo_royale.socketio_events import make_publisher, make_subscriber, register_socketio_handlers

    testing = flask_app.config.get('TESTING', False)
    scheduler = RoundAdvanceScheduler(
        socketio,
        delay=flask_app.config.get('ROUND_ADVANCE_DELAY_SEC', 3),
        inline=testing and not flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS', False),
        logger=flask_app.logger,
    )
    coordinator = SessionCoordinator(
        registry=RoomRegistry(),
        prompts=SentenceProvider(flask_app.config.get('TYPING_SENTENCES')),
        scheduler=scheduler,
        publish=make_publisher(namespace),
        subscribe=make_subscriber(namespace),
        logger=flask_app.logger,
    )
    flask_app.extensions['typo_royale'] = coordinator

    register_socketio_handlers(namespace=namespace)

    return flask_app
