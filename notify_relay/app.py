# app.py
"""
Flask application factory for the notification relay

The factory wires together:
- configuration read once from the environment (or passed in)
- the service registry with its senders
- the API key authenticator and the dispatch pipeline
- JSON error handlers, security headers and request timing
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .api.notify import notify_bp
from .config.settings import BaseConfig, NotifierConfig
from .core.errors import ConfigurationError
from .core.authenticator import ApiKeyAuthenticator
from .core.dispatcher import NotificationDispatcher
from .core.service_registry import ServiceRegistry
from .middleware.security import security_headers
from .senders.base import NotificationSender
from .senders.smtp import SMTPSender


def setup_logging(app: Flask, config: NotifierConfig) -> None:
    """
    Send app and package logs to stderr in a journald-friendly format

    app.logger is named after this module, so it shares the package
    logger's handler.
    """
    formatter = logging.Formatter(
        fmt='%(name)s[%(process)d]: %(levelname)s %(message)s',
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    log_level = getattr(logging, config.log_level, logging.INFO)

    package_logger = logging.getLogger('notify_relay')
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    app.logger.handlers.clear()
    app.logger.setLevel(logging.NOTSET)

    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)


def build_registry(config: NotifierConfig,
                   senders: Optional[Iterable[NotificationSender]] = None) -> ServiceRegistry:
    """Register the available senders; SMTP unless others are given"""
    if senders is None:
        senders = [SMTPSender(config)]
    return ServiceRegistry(senders)


def configure_error_handlers(app: Flask) -> None:
    """
    Render framework-level errors in the same JSON shape as dispatch outcomes
    """
    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code >= 500:
            app.logger.error(f'HTTP {error.code} on {request.method} {request.path}: {error.description}')
        return jsonify({
            'ok': False,
            'message': error.name.lower(),
        }), error.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        app.logger.error(f'Unhandled exception: {e}', exc_info=True)
        return jsonify({
            'ok': False,
            'message': 'internal server error',
        }), 500


def configure_request_middleware(app: Flask) -> None:
    """
    Request timing and response headers
    """
    @app.before_request
    def before_request():
        g.start_time = datetime.now(timezone.utc)

    @app.after_request
    def after_request(response):
        response = security_headers(response)

        if hasattr(g, 'start_time'):
            duration = (datetime.now(timezone.utc) - g.start_time).total_seconds() * 1000
            if duration > app.config.get('SLOW_REQUEST_THRESHOLD', 1000):
                app.logger.warning(f'Slow request ({duration:.0f}ms): {request.method} {request.path}')

        return response


def create_app(config: Optional[NotifierConfig] = None,
               senders: Optional[Iterable[NotificationSender]] = None,
               settings: object = BaseConfig) -> Flask:
    """
    Flask application factory

    Args:
        config: runtime configuration; read from the environment when omitted
        senders: sender instances to register in place of the default SMTP sender
        settings: Flask settings object

    Returns:
        Configured Flask application instance

    Raises:
        ConfigurationError: required configuration is missing or invalid
    """
    config = config or NotifierConfig.from_env()

    app = Flask(__name__)
    app.config.from_object(settings)

    setup_logging(app, config)

    registry = build_registry(config, senders)
    authenticator = ApiKeyAuthenticator(config.api_key)

    app.registry = registry
    app.dispatcher = NotificationDispatcher(authenticator, registry)

    CORS(app,
         resources={r'/(notify|send-notification|send-email)': {'origins': list(config.cors_origins)}},
         allow_headers=['Content-Type', 'Authorization', 'X-API-Key'],
         methods=['POST'])

    app.register_blueprint(notify_bp)
    configure_error_handlers(app)
    configure_request_middleware(app)

    app.logger.info(f"Notification relay ready; services: {', '.join(sorted(registry.services))}")
    return app


def main() -> int:
    """Run the development server on HTTP_BIND"""
    try:
        config = NotifierConfig.from_env()
        host, port = config.bind_address
    except ConfigurationError as e:
        print(f'Configuration error: {e}', file=sys.stderr)
        return 1

    app = create_app(config)
    app.logger.info(f'Server starting on {host}:{port}')
    app.run(host=host, port=port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
