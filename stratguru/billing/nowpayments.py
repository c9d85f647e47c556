import logging

import requests

from stratguru.billing.settings import NowPaymentsSettings
from stratguru.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class NowPaymentsClient:
    """Creates hosted crypto invoices through the NOWPayments API."""

    def __init__(self, settings: NowPaymentsSettings, session=None):
        self.settings = settings
        self.http = session or requests

    def create_invoice(self, *, price_amount, price_currency, order_id, order_description) -> dict:
        if not self.settings.api_key:
            raise ConfigurationError("NOWPayments API key not configured")

        payload = {
            "price_amount": price_amount,
            "price_currency": price_currency,
            "order_id": order_id,
            "order_description": order_description,
            "success_url": self.settings.success_url,
            "cancel_url": self.settings.cancel_url,
            "is_fee_paid_by_user": True,
        }
        if self.settings.ipn_callback_url:
            payload["ipn_callback_url"] = self.settings.ipn_callback_url

        try:
            r = self.http.post(
                f"{self.settings.base_url.rstrip('/')}/invoice",
                headers={
                    "x-api-key": self.settings.api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"NOWPayments request failed: {e}", extra={"provider": "nowpayments"})
            raise UpstreamServiceError("Failed to create NOWPayments invoice") from e

        try:
            body = r.json()
        except ValueError:
            body = {}

        if not r.ok:
            logger.error(
                "NOWPayments error",
                extra={"provider": "nowpayments", "status_code": r.status_code, "body": body},
            )
            raise UpstreamServiceError(body.get("message") or "Failed to create NOWPayments invoice")

        return body
