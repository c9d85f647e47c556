import json
import logging
from dataclasses import dataclass
from typing import Optional

from stratguru.billing.plans import UPGRADE_PLAN, parse_order_reference
from stratguru.errors import ClientRequestError, UpstreamWriteError

logger = logging.getLogger(__name__)

PAYSTACK_CHARGE_SUCCESS = "charge.success"
PAYSTACK_CHARGE_FAILURES = ("charge.failed", "charge.abandoned")

NOWPAYMENTS_FINISHED = "finished"
NOWPAYMENTS_FAILURES = ("failed", "expired")


@dataclass(frozen=True)
class UpgradeIntent:
    """A verified payment that should move one account into ``plan``."""

    plan: str
    source: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    customer_reference: Optional[str] = None


def parse_json_body(payload: bytes) -> dict:
    if not payload:
        raise ClientRequestError("Request body is empty")

    try:
        event = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError):
        raise ClientRequestError("Request body is not valid JSON") from None

    if not isinstance(event, dict):
        raise ClientRequestError("Request body must be a JSON object")

    return event


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def classify_paystack_event(event: dict) -> Optional[UpgradeIntent]:
    """
    Return an UpgradeIntent for a successful Pro charge, None for anything else.

    Paystack sends many event types we do not act on; those are accepted and
    ignored rather than rejected.
    """
    event_type = event.get("event")
    data = _as_dict(event.get("data"))
    metadata = _as_dict(data.get("metadata"))
    user_id = metadata.get("userId")

    if event_type in PAYSTACK_CHARGE_FAILURES:
        if user_id:
            logger.info(
                f"Payment {data.get('status') or event_type} for user {user_id} - Plan: {metadata.get('plan')}",
                extra={"provider": "paystack", "event": event_type, "user_id": user_id},
            )
        return None

    if event_type != PAYSTACK_CHARGE_SUCCESS:
        logger.debug(f"Ignoring Paystack event {event_type}", extra={"provider": "paystack", "event": event_type})
        return None

    if not user_id or not isinstance(user_id, str):
        logger.info("charge.success without userId metadata; nothing to upgrade", extra={"provider": "paystack"})
        return None

    if metadata.get("plan") != UPGRADE_PLAN.value:
        logger.info(
            f"charge.success for user {user_id} with plan {metadata.get('plan')!r}; no upgrade applies",
            extra={"provider": "paystack", "user_id": user_id},
        )
        return None

    customer_code = _as_dict(data.get("customer")).get("customer_code") or None

    return UpgradeIntent(
        plan=UPGRADE_PLAN.value,
        source="paystack",
        user_id=user_id,
        customer_reference=customer_code,
    )


def classify_nowpayments_event(event: dict) -> Optional[UpgradeIntent]:
    """
    Return an UpgradeIntent for a finished NOWPayments payment.

    The account is identified by the order reference. Only a reference that
    does not parse falls back to the customer email; a parsed reference for
    any other plan is a no-op. A finished payment that identifies nobody raises,
    so the provider keeps retrying and the payment surfaces for manual
    reconciliation instead of being acknowledged and lost.
    """
    status = event.get("payment_status")
    order_id = event.get("order_id")

    logger.info(
        "NOWPayments webhook received",
        extra={"provider": "nowpayments", "payment_status": status, "order_id": order_id},
    )

    if status in NOWPAYMENTS_FAILURES:
        logger.info(f"Payment {status} for order {order_id}", extra={"provider": "nowpayments"})
        return None

    if status != NOWPAYMENTS_FINISHED:
        return None

    parsed = parse_order_reference(order_id)
    if parsed:
        plan, user_id = parsed
        if plan != UPGRADE_PLAN.value:
            logger.info(
                f"Finished payment for order {order_id} with plan {plan!r}; no upgrade applies",
                extra={"provider": "nowpayments", "user_id": user_id},
            )
            return None
        return UpgradeIntent(plan=UPGRADE_PLAN.value, source="nowpayments", user_id=user_id)

    email = event.get("customer_email")
    if email and isinstance(email, str):
        logger.info(f"Attempting to match user by email: {email}", extra={"provider": "nowpayments"})
        return UpgradeIntent(plan=UPGRADE_PLAN.value, source="nowpayments", email=email)

    logger.error(
        "No userId or email found in webhook data",
        extra={"provider": "nowpayments", "order_id": order_id},
    )
    raise UpstreamWriteError("Unable to identify user from webhook data")
