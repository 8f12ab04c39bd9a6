from __future__ import annotations

import logging
import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.service import GameSettings, SessionCoordinator
from .realtime.handlers import register_socketio_handlers
from .realtime.transport import SocketIOTransport
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp


def _resolve_async_mode(configured: str) -> str:
    if configured:
        return configured
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class: type = Config) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_resolve_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", "")),
    )

    coordinator = SessionCoordinator(
        SocketIOTransport(socketio),
        settings=GameSettings.from_config(app.config),
    )
    app.extensions["shadowsignal"] = coordinator

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, coordinator)

    app.logger.info("[startup] async_mode=%s max_players=%d", socketio.async_mode, coordinator.settings.max_players)
    return app, socketio
