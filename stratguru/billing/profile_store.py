import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from stratguru.billing.plans import Plan
from stratguru.errors import UpstreamWriteError
from stratguru.models.profile import Profile

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Single-row writes against the ``profiles`` table.

    Every write is one UPDATE keyed by id (or email) that overwrites plan,
    customer reference and updated_at, so replaying the same payment event
    leaves the account in the same state.
    """

    def __init__(self, session):
        self.session = session

    def get(self, user_id: str) -> Optional[Profile]:
        return self.session.get(Profile, user_id)

    def apply_upgrade(
        self,
        user_id: str,
        plan,
        customer_reference: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        values = self._upgrade_values(plan, customer_reference, now)
        return self._update(Profile.id == user_id, values, key={"user_id": user_id})

    def apply_upgrade_by_email(self, email: str, plan, now: Optional[datetime] = None) -> int:
        values = self._upgrade_values(plan, None, now)
        return self._update(func.lower(Profile.email) == email.strip().lower(), values, key={"email": email})

    @staticmethod
    def _upgrade_values(plan, customer_reference, now):
        values = {
            Profile.plan: Plan(plan).value,
            Profile.updated_at: now or datetime.now(timezone.utc),
        }
        if customer_reference:
            values[Profile.paystack_customer_code] = customer_reference
        return values

    def _update(self, criterion, values, key) -> int:
        try:
            updated = (
                self.session.query(Profile)
                .filter(criterion)
                .update(values, synchronize_session=False)
            )

            if not updated:
                self.session.rollback()
                logger.error("Plan update matched no profile", extra=key)
                raise UpstreamWriteError(f"No profile found for {_describe(key)}")

            if updated > 1:
                self.session.rollback()
                logger.error("Plan update matched more than one profile", extra={**key, "rows": updated})
                raise UpstreamWriteError(f"Multiple profiles found for {_describe(key)}")

            self.session.commit()

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error updating user plan: {e}", extra=key)
            raise UpstreamWriteError(f"Failed to update plan for {_describe(key)}") from e

        logger.info(
            f"Upgraded {_describe(key)} to {values[Profile.plan]} plan",
            extra={**key, "plan": values[Profile.plan], "rows": updated},
        )
        return updated


def _describe(key: dict) -> str:
    return ", ".join(f"{k}={v}" for k, v in key.items())
