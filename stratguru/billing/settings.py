import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

PAYSTACK_BASE_URL = "https://api.paystack.co"
NOWPAYMENTS_BASE_URL = "https://api.nowpayments.io/v1"


@dataclass(frozen=True)
class PaystackSettings:
    """Everything the Paystack handlers and client need, read once from app config."""

    secret_key: Optional[str] = None
    webhook_secret: Optional[str] = None
    base_url: str = PAYSTACK_BASE_URL
    app_base_url: str = "http://localhost:3000"

    @property
    def signing_secret(self) -> Optional[str]:
        # Paystack signs webhooks with the account secret key unless a
        # dedicated webhook secret is configured.
        return self.webhook_secret or self.secret_key

    @classmethod
    def from_config(cls, config: Mapping) -> "PaystackSettings":
        return cls(
            secret_key=config.get("PAYSTACK_SECRET_KEY"),
            webhook_secret=config.get("PAYSTACK_WEBHOOK_SECRET"),
            base_url=config.get("PAYSTACK_BASE_URL") or PAYSTACK_BASE_URL,
            app_base_url=config.get("APP_BASE_URL") or "http://localhost:3000",
        )


@dataclass(frozen=True)
class NowPaymentsSettings:
    """NOWPayments API key, IPN secret and redirect URLs."""

    api_key: Optional[str] = None
    ipn_secret: Optional[str] = None
    base_url: str = NOWPAYMENTS_BASE_URL
    ipn_callback_url: Optional[str] = None
    app_base_url: str = "http://localhost:3000"

    @property
    def signing_secret(self) -> Optional[str]:
        return self.ipn_secret

    @property
    def success_url(self) -> str:
        return f"{self.app_base_url.rstrip('/')}/settings?payment=success"

    @property
    def cancel_url(self) -> str:
        return f"{self.app_base_url.rstrip('/')}/settings?payment=cancelled"

    @classmethod
    def from_config(cls, config: Mapping) -> "NowPaymentsSettings":
        return cls(
            api_key=config.get("NOWPAYMENTS_API_KEY"),
            ipn_secret=config.get("NOWPAYMENTS_IPN_SECRET"),
            base_url=config.get("NOWPAYMENTS_BASE_URL") or NOWPAYMENTS_BASE_URL,
            ipn_callback_url=config.get("NOWPAYMENTS_IPN_CALLBACK_URL"),
            app_base_url=config.get("APP_BASE_URL") or "http://localhost:3000",
        )


REQUIRED_BILLING_VARS = [
    "PAYSTACK_SECRET_KEY",
    "NOWPAYMENTS_API_KEY",
    "NOWPAYMENTS_IPN_SECRET",
]


def validate_billing_config(config: Mapping) -> List[str]:
    """
    Report missing billing secrets at startup.

    The app still boots; requests that need a missing secret fail closed
    with a 500 instead of proceeding unauthenticated.
    """
    missing = [name for name in REQUIRED_BILLING_VARS if not config.get(name)]

    if missing:
        message = f"Missing billing configuration: {missing}"
        if config.get("ENVIRONMENT") == "production":
            logger.error(message, extra={"missing": missing})
        else:
            logger.warning(message, extra={"missing": missing})

    return missing
