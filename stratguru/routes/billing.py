from flask import Blueprint, current_app, jsonify, request

from stratguru.billing.nowpayments import NowPaymentsClient
from stratguru.billing.paystack import PaystackClient
from stratguru.billing.plans import UPGRADE_PLAN
from stratguru.billing.profile_store import ProfileStore
from stratguru.billing.service import BillingService
from stratguru.billing.settings import NowPaymentsSettings, PaystackSettings
from stratguru.errors import ClientRequestError
from stratguru.extensions import db

bp = Blueprint("billing", __name__, url_prefix="/api/billing")


def get_billing_service() -> BillingService:
    return BillingService(
        ProfileStore(db.session),
        PaystackClient(PaystackSettings.from_config(current_app.config)),
        NowPaymentsClient(NowPaymentsSettings.from_config(current_app.config)),
    )


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ClientRequestError("Request body must be a JSON object")
    return body


@bp.route("/paystack/checkout", methods=["POST"])
def paystack_checkout():
    body = _json_body()
    result = get_billing_service().start_paystack_checkout(
        body.get("email"),
        body.get("userId"),
        plan=body.get("plan") or UPGRADE_PLAN.value,
        origin=request.headers.get("Origin"),
    )
    return jsonify(result), 200


@bp.route("/nowpayments/checkout", methods=["POST"])
def nowpayments_checkout():
    body = _json_body()
    result = get_billing_service().start_nowpayments_checkout(
        body.get("email"),
        body.get("userId"),
        plan=body.get("plan") or UPGRADE_PLAN.value,
    )
    return jsonify(result), 200


@bp.route("/paystack/verify", methods=["POST"])
def paystack_verify():
    body = _json_body()
    result = get_billing_service().verify_paystack_payment(body.get("reference"))
    return jsonify(result), 200
