import logging
import time

from stratguru.billing.plans import UPGRADE_PLAN, build_order_reference, get_plan_price
from stratguru.errors import ClientRequestError

logger = logging.getLogger(__name__)


class BillingService:
    """
    Checkout initiation and server-side payment verification.

    The webhook handlers are the authoritative upgrade path; verification is
    the fallback the front end calls when the user lands back on the app.
    """

    def __init__(self, store, paystack, nowpayments, clock=time.time):
        self.store = store
        self.paystack = paystack
        self.nowpayments = nowpayments
        self.clock = clock

    def _now_ms(self):
        return int(self.clock() * 1000)

    @staticmethod
    def _require_identity(email, user_id):
        if not email or not user_id:
            raise ClientRequestError("Email and userId are required")

    def start_paystack_checkout(self, email, user_id, plan=UPGRADE_PLAN.value, origin=None) -> dict:
        self._require_identity(email, user_id)
        price = get_plan_price(plan)
        reference = build_order_reference(user_id, price.plan, self._now_ms())
        base_url = (origin or self.paystack.settings.app_base_url).rstrip("/")

        data = self.paystack.initialize_transaction(
            email=email,
            amount=price.paystack_amount,
            currency=price.paystack_currency,
            reference=reference,
            callback_url=f"{base_url}/settings",
            metadata={"userId": user_id, "plan": price.plan.value, "upgrade": True},
        )

        logger.info(
            "Paystack checkout created",
            extra={"provider": "paystack", "user_id": user_id, "reference": data.get("reference", reference)},
        )
        return {
            "payUrl": data.get("authorization_url"),
            "reference": data.get("reference", reference),
        }

    def start_nowpayments_checkout(self, email, user_id, plan=UPGRADE_PLAN.value) -> dict:
        self._require_identity(email, user_id)
        price = get_plan_price(plan)

        invoice = self.nowpayments.create_invoice(
            price_amount=price.crypto_amount,
            price_currency=price.crypto_currency,
            order_id=build_order_reference(user_id, price.plan, self._now_ms()),
            order_description=price.description,
        )

        logger.info(
            "NOWPayments invoice created",
            extra={"provider": "nowpayments", "user_id": user_id, "invoice_id": invoice.get("id")},
        )
        return {"payUrl": invoice.get("invoice_url"), "invoiceId": invoice.get("id")}

    def verify_paystack_payment(self, reference) -> dict:
        if not reference:
            raise ClientRequestError("Payment reference is required")

        data = self.paystack.verify_transaction(reference)

        if data.get("status") == "success":
            metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
            customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
            user_id = metadata.get("userId")

            if user_id and metadata.get("plan") == UPGRADE_PLAN.value:
                self.store.apply_upgrade(
                    user_id,
                    UPGRADE_PLAN,
                    customer_reference=customer.get("customer_code"),
                )
                return {
                    "success": True,
                    "message": "Payment verified and account upgraded successfully",
                    "plan": UPGRADE_PLAN.value,
                }

        return {
            "success": False,
            "message": "Payment verification failed",
            "status": data.get("status"),
        }
