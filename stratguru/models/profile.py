from datetime import datetime, timezone

from stratguru.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class Profile(db.Model):
    """A subscriber account. Rows are created at signup, outside this service."""

    __tablename__ = "profiles"

    id = db.Column(db.String(36), primary_key=True)
    email = db.Column(db.String(255), nullable=True, index=True)
    plan = db.Column(db.String(20), nullable=False, default="free")

    # ========== PAYSTACK ==========
    paystack_customer_code = db.Column(db.String(100), nullable=True)
    paystack_subscription_code = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "plan": self.plan,
            "paystack_customer_code": self.paystack_customer_code,
            "paystack_subscription_code": self.paystack_subscription_code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Profile {self.id} plan={self.plan}>"
