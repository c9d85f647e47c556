from .billing import bp as billing_bp
from .health import bp as health_bp
from .webhooks import bp as webhooks_bp


def register_blueprints(app):
    app.register_blueprint(webhooks_bp)
    app.register_blueprint(billing_bp)
    app.register_blueprint(health_bp)
