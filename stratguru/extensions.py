"""
Flask extensions initialization module.
"""

import logging

from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
cors = CORS()

logger = logging.getLogger(__name__)

WEBHOOK_SIGNATURE_HEADERS = ["x-paystack-signature", "x-nowpayments-sig"]


def init_extensions(app):
    """Initialize all Flask extensions."""

    db.init_app(app)
    logger.info("SQLAlchemy initialized")

    migrate.init_app(app, db)
    logger.info("Flask-Migrate initialized")

    init_cors(app)
    logger.info("CORS initialized")

    if app.config.get("ENVIRONMENT") in ("development", "testing"):
        create_tables(app)

    return app


def init_cors(app):
    """Allow the front end to call the checkout endpoints."""
    origins = app.config.get("CORS_ORIGINS", "*")
    if isinstance(origins, str) and origins != "*":
        origins = [origin.strip() for origin in origins.split(",") if origin.strip()]

    cors.init_app(
        app,
        origins=origins,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "X-Client-Info",
            "apikey",
            *WEBHOOK_SIGNATURE_HEADERS,
        ],
        max_age=600,
    )


def create_tables(app):
    """Create tables for local development and tests."""
    from stratguru.models.profile import Profile  # noqa: F401

    with app.app_context():
        db.create_all()
        logger.info("Database tables created/verified")


__all__ = ["db", "migrate", "cors", "init_extensions", "create_tables"]
