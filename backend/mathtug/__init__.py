import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    if not raw or raw == '*':
        return '*'
    if isinstance(raw, str):
        return [o.strip() for o in raw.split(',') if o.strip()]
    return list(raw)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    level_name = str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper()
    flask_app.logger.setLevel(getattr(logging, level_name, logging.INFO))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from mathtug.services.games import (GameHub, GameSettings, SocketIONotifier,
                                        SocketIOScheduler)
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    settings = GameSettings.from_config(flask_app.config)
    scheduler = SocketIOScheduler(socketio, logger=flask_app.logger)
    hub = GameHub(
        SocketIONotifier(socketio, namespace=namespace),
        scheduler,
        settings=settings,
        logger=flask_app.logger,
    )
    flask_app.extensions['mathtug'] = hub

    from mathtug.main import main
    flask_app.register_blueprint(main)

    from mathtug.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    # Periodic matchmaking tick; tests drive the queue by hand unless asked otherwise
    if not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_MATCHMAKER_IN_TESTS'):
        hub.matchmaker.start()

    return flask_app
