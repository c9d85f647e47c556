import logging

from flask import Flask

from stratguru.billing.settings import validate_billing_config
from stratguru.config import get_config
from stratguru.error_handlers import register_error_handlers
from stratguru.extensions import init_extensions
from stratguru.logging_config import setup_logging
from stratguru.middleware.request_id import init_request_id_middleware
from stratguru.routes import register_blueprints

logger = logging.getLogger(__name__)


def create_app(config_name=None, overrides=None):
    """
    Application factory.

    ``overrides`` is applied after the config class so tests can inject
    secrets without touching the process environment.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    init_request_id_middleware(app)
    setup_logging(app)

    init_extensions(app)
    register_error_handlers(app)
    register_blueprints(app)

    validate_billing_config(app.config)
    logger.info(f"{app.config['APP_NAME']} started", extra={"environment": app.config.get("ENVIRONMENT")})

    return app


__all__ = ["create_app"]
