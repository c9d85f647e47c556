import json
from datetime import datetime, timezone

import pytest
from faker import Faker

from stratguru import create_app
from stratguru.billing.signatures import compute_signature
from stratguru.extensions import db
from stratguru.models.profile import Profile

# Initialize Faker for generating test data
fake = Faker()

PAYSTACK_SECRET = "sk_test_paystack"
NOWPAYMENTS_SECRET = "np_test_ipn_secret"


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "payment: mark test as payment-related"
    )
    config.addinivalue_line(
        "markers",
        "webhook: mark test as webhook-related"
    )


@pytest.fixture()
def app():
    """Fresh application and in-memory database per test"""
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def profile(app):
    """A free-plan subscriber that exists before any payment arrives"""
    profile = Profile(
        id=fake.uuid4(),
        email=fake.email(),
        plan="free",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    db.session.add(profile)
    db.session.commit()
    return profile


@pytest.fixture()
def sign():
    """Serialize an event and sign the exact bytes that will be sent"""
    def _sign(event, secret=PAYSTACK_SECRET):
        body = event if isinstance(event, bytes) else json.dumps(event).encode()
        return body, compute_signature(body, secret)

    return _sign


@pytest.fixture()
def charge_success():
    def _event(user_id, plan="pro", customer_code="CUS_abc", event="charge.success"):
        return {
            "event": event,
            "data": {
                "status": "success",
                "amount": 2900000,
                "customer": {"customer_code": customer_code, "email": fake.email()},
                "metadata": {"userId": user_id, "plan": plan, "upgrade": True},
            },
        }

    return _event


@pytest.fixture()
def reload(app):
    """Re-read a profile after a request committed through another session"""
    def _reload(profile_id):
        db.session.expire_all()
        return db.session.get(Profile, profile_id)

    return _reload
