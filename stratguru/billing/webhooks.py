import logging
from dataclasses import dataclass
from typing import Optional

from stratguru.billing.events import (
    UpgradeIntent,
    classify_nowpayments_event,
    classify_paystack_event,
    parse_json_body,
)
from stratguru.billing.profile_store import ProfileStore
from stratguru.billing.signatures import verify_signature
from stratguru.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class WebhookResult:
    processed: bool
    action: str
    user_id: Optional[str] = None


class BaseWebhookHandler:
    """
    Verify, parse and apply one provider webhook delivery.

    Handlers hold no state between deliveries and never retry; a 5xx
    response is what makes the provider re-deliver.
    """

    provider = None
    signature_header = None

    def __init__(self, settings, store: ProfileStore):
        self.settings = settings
        self.store = store

    def classify(self, event: dict) -> Optional[UpgradeIntent]:
        raise NotImplementedError

    def handle(self, payload: bytes, signature: Optional[str]) -> WebhookResult:
        self.authenticate(payload, signature)

        event = parse_json_body(payload)
        intent = self.classify(event)

        if intent is None:
            return WebhookResult(processed=True, action="ignored")

        self.apply(intent)
        return WebhookResult(processed=True, action="upgraded", user_id=intent.user_id)

    def authenticate(self, payload: bytes, signature: Optional[str]) -> None:
        secret = self.settings.signing_secret
        if not secret:
            logger.error(
                f"{self.provider} webhook secret not configured",
                extra={"provider": self.provider},
            )
            raise ConfigurationError(f"{self.provider} webhook secret not configured")

        try:
            verify_signature(payload, signature, secret)
        except AuthenticationError:
            logger.warning(
                f"Invalid signature on {self.provider} webhook; possible forged request",
                extra={"provider": self.provider},
            )
            raise

    def apply(self, intent: UpgradeIntent) -> int:
        if intent.user_id:
            return self.store.apply_upgrade(
                intent.user_id,
                intent.plan,
                customer_reference=intent.customer_reference,
            )
        return self.store.apply_upgrade_by_email(intent.email, intent.plan)


class PaystackWebhookHandler(BaseWebhookHandler):
    provider = "paystack"
    signature_header = "x-paystack-signature"

    def classify(self, event):
        return classify_paystack_event(event)


class NowPaymentsWebhookHandler(BaseWebhookHandler):
    provider = "nowpayments"
    signature_header = "x-nowpayments-sig"

    def classify(self, event):
        return classify_nowpayments_event(event)
