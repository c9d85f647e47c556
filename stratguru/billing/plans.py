from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from stratguru.errors import ClientRequestError


class Plan(str, Enum):
    FREE = "free"
    STARTER = "starter"
    GROWTH = "growth"
    PRO = "pro"


# The only tier a payment event may move an account into.
UPGRADE_PLAN = Plan.PRO


@dataclass(frozen=True)
class PlanPrice:
    plan: Plan
    paystack_amount: int  # minor units (kobo)
    paystack_currency: str
    crypto_amount: int
    crypto_currency: str
    description: str


PLAN_PRICES = {
    Plan.PRO: PlanPrice(
        plan=Plan.PRO,
        paystack_amount=2_900_000,
        paystack_currency="NGN",
        crypto_amount=30,
        crypto_currency="usd",
        description="StratGuru Pro Monthly Subscription",
    ),
}


def get_plan_price(plan) -> PlanPrice:
    try:
        return PLAN_PRICES[Plan(plan)]
    except (ValueError, KeyError):
        raise ClientRequestError(f"Plan '{plan}' is not available for purchase") from None


def build_order_reference(user_id: str, plan, now_ms: int) -> str:
    """Order references look like ``pro_upgrade_<userId>_<epoch-ms>``."""
    return f"{Plan(plan).value}_upgrade_{user_id}_{now_ms}"


def parse_order_reference(reference: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Return ``(plan, user_id)`` for a reference built by build_order_reference,
    or None when the reference has a different shape.
    """
    if not reference or not isinstance(reference, str):
        return None

    parts = reference.split("_")
    if len(parts) < 3 or parts[1] != "upgrade" or not parts[2]:
        return None

    return parts[0], parts[2]
