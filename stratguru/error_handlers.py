import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from stratguru.errors import BillingError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(BillingError)
    def handle_billing_error(error):
        if error.status_code >= 500:
            logger.error(
                f"{error.__class__.__name__}: {error.message} - Path: {request.path}",
                extra={"error_type": error.__class__.__name__},
            )
        else:
            logger.warning(
                f"{error.__class__.__name__}: {error.message} - Path: {request.path}",
                extra={"error_type": error.__class__.__name__},
            )
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """
        Handles known HTTP errors (404, 405, etc.)
        """
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        """
        Handles all unexpected server errors.
        Prevents stack trace leakage to the caller.
        """
        logger.exception(f"Unhandled exception - Path: {request.path}")
        return jsonify({"error": "Internal Server Error"}), 500
