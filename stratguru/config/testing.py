from .base import BaseConfig


class TestingConfig(BaseConfig):
    """
    Test configuration. Secrets are fixed so signatures are reproducible.
    """

    TESTING = True
    ENVIRONMENT = "testing"

    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"

    PAYSTACK_SECRET_KEY = "sk_test_paystack"
    PAYSTACK_WEBHOOK_SECRET = None
    PAYSTACK_BASE_URL = "https://api.paystack.co"

    NOWPAYMENTS_API_KEY = "np_test_key"
    NOWPAYMENTS_IPN_SECRET = "np_test_ipn_secret"
    NOWPAYMENTS_BASE_URL = "https://api.nowpayments.io/v1"
    NOWPAYMENTS_IPN_CALLBACK_URL = "http://localhost:5000/webhooks/nowpayments"

    APP_BASE_URL = "http://localhost:3000"
    LOG_LEVEL = "WARNING"
    LOG_REQUESTS = False
