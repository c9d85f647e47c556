from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from stratguru.billing.profile_store import ProfileStore
from stratguru.errors import UpstreamWriteError
from stratguru.extensions import db
from stratguru.models.profile import Profile

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
LATER = datetime(2025, 3, 1, 12, 5, tzinfo=timezone.utc)


def test_apply_upgrade_overwrites_plan_reference_and_timestamp(profile, reload):
    updated = ProfileStore(db.session).apply_upgrade(profile.id, "pro", customer_reference="CUS_abc", now=NOW)

    account = reload(profile.id)
    assert updated == 1
    assert account.plan == "pro"
    assert account.paystack_customer_code == "CUS_abc"
    assert account.updated_at.replace(tzinfo=timezone.utc) == NOW


def test_apply_upgrade_twice_is_idempotent(profile, reload):
    """Replaying the same upgrade leaves plan and reference unchanged"""
    store = ProfileStore(db.session)

    store.apply_upgrade(profile.id, "pro", customer_reference="CUS_abc", now=NOW)
    once = reload(profile.id).to_dict()
    store.apply_upgrade(profile.id, "pro", customer_reference="CUS_abc", now=LATER)
    twice = reload(profile.id).to_dict()

    assert twice["plan"] == once["plan"] == "pro"
    assert twice["paystack_customer_code"] == once["paystack_customer_code"] == "CUS_abc"
    assert db.session.query(Profile).count() == 1


def test_apply_upgrade_without_reference_keeps_existing_code(profile, reload):
    store = ProfileStore(db.session)
    store.apply_upgrade(profile.id, "pro", customer_reference="CUS_first", now=NOW)

    store.apply_upgrade(profile.id, "pro", now=LATER)

    assert reload(profile.id).paystack_customer_code == "CUS_first"


def test_unknown_user_raises_and_creates_nothing(app):
    with pytest.raises(UpstreamWriteError):
        ProfileStore(db.session).apply_upgrade("missing-user", "pro", customer_reference="CUS_abc")

    assert db.session.query(Profile).count() == 0


def test_apply_upgrade_by_email(profile, reload):
    updated = ProfileStore(db.session).apply_upgrade_by_email(profile.email, "pro", now=NOW)

    assert updated == 1
    assert reload(profile.id).plan == "pro"


def test_apply_upgrade_by_unknown_email_raises(profile):
    with pytest.raises(UpstreamWriteError):
        ProfileStore(db.session).apply_upgrade_by_email("nobody@example.com", "pro")


def test_write_failure_rolls_back_and_raises(profile, reload):
    """A failed commit is surfaced, never acknowledged"""
    store = ProfileStore(db.session)

    with patch.object(db.session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("db down"))):
        with pytest.raises(UpstreamWriteError) as exc_info:
            store.apply_upgrade(profile.id, "pro", customer_reference="CUS_abc")

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert reload(profile.id).plan == "free"


def test_unknown_plan_is_rejected(profile):
    with pytest.raises(ValueError):
        ProfileStore(db.session).apply_upgrade(profile.id, "platinum")


def test_apply_upgrade_by_email_is_case_insensitive(profile, reload):
    updated = ProfileStore(db.session).apply_upgrade_by_email(f"  {profile.email.upper()} ", "pro", now=NOW)

    assert updated == 1
    assert reload(profile.id).plan == "pro"


def test_apply_upgrade_by_email_matching_several_profiles_rolls_back(app, reload):
    """One payment may change exactly one account"""
    db.session.add_all([
        Profile(id="dup-a", email="dup@x.co", plan="free"),
        Profile(id="dup-b", email="dup@x.co", plan="free"),
    ])
    db.session.commit()

    with pytest.raises(UpstreamWriteError, match="Multiple profiles"):
        ProfileStore(db.session).apply_upgrade_by_email("dup@x.co", "pro", now=NOW)

    assert reload("dup-a").plan == "free"
    assert reload("dup-b").plan == "free"
