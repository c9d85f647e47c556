import logging

import requests

from stratguru.billing.settings import PaystackSettings
from stratguru.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10

CHECKOUT_CHANNELS = ["card", "bank", "ussd", "qr", "mobile_money", "bank_transfer"]


class PaystackClient:
    """Thin wrapper over the Paystack transaction API."""

    def __init__(self, settings: PaystackSettings, session=None):
        self.settings = settings
        self.http = session or requests

    def _headers(self):
        if not self.settings.secret_key:
            raise ConfigurationError("Paystack secret key not configured")
        return {
            "Authorization": f"Bearer {self.settings.secret_key}",
            "Content-Type": "application/json",
        }

    def _url(self, path):
        return f"{self.settings.base_url.rstrip('/')}{path}"

    def initialize_transaction(
        self,
        *,
        email,
        amount,
        currency,
        reference,
        callback_url,
        metadata,
        channels=None,
    ) -> dict:
        headers = self._headers()
        try:
            r = self.http.post(
                self._url("/transaction/initialize"),
                headers=headers,
                json={
                    "email": email,
                    "amount": amount,
                    "currency": currency,
                    "reference": reference,
                    "callback_url": callback_url,
                    "metadata": metadata,
                    "channels": channels or CHECKOUT_CHANNELS,
                },
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Paystack initialize request failed: {e}", extra={"provider": "paystack"})
            raise UpstreamServiceError("Failed to create Paystack checkout") from e

        return self._unwrap(r, "Failed to create Paystack checkout")

    def verify_transaction(self, reference) -> dict:
        headers = self._headers()
        try:
            r = self.http.get(
                self._url(f"/transaction/verify/{reference}"),
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Paystack verify request failed: {e}", extra={"provider": "paystack"})
            raise UpstreamServiceError("Failed to verify payment") from e

        return self._unwrap(r, "Failed to verify payment")

    @staticmethod
    def _unwrap(response, fallback_message) -> dict:
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok or body.get("status") is False:
            message = body.get("message") or fallback_message
            logger.error(
                f"Paystack error: {message}",
                extra={"provider": "paystack", "status_code": response.status_code},
            )
            raise UpstreamServiceError(message)

        return body.get("data") or {}
