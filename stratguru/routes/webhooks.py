import logging

from flask import Blueprint, current_app, request

from stratguru.billing.profile_store import ProfileStore
from stratguru.billing.settings import NowPaymentsSettings, PaystackSettings
from stratguru.billing.webhooks import NowPaymentsWebhookHandler, PaystackWebhookHandler
from stratguru.extensions import db

logger = logging.getLogger(__name__)

bp = Blueprint("webhooks", __name__, url_prefix="/webhooks")

PROCESSED = "Webhook processed successfully"


def _dispatch(handler):
    # Signatures are computed over the raw bytes; never re-serialize.
    payload = request.get_data()
    signature = request.headers.get(handler.signature_header)

    result = handler.handle(payload, signature)

    logger.info(
        f"{handler.provider} webhook {result.action}",
        extra={"provider": handler.provider, "user_id": result.user_id},
    )
    return PROCESSED, 200, {"Content-Type": "text/plain; charset=utf-8"}


@bp.route("/paystack", methods=["POST"])
def paystack():
    handler = PaystackWebhookHandler(
        PaystackSettings.from_config(current_app.config),
        ProfileStore(db.session),
    )
    return _dispatch(handler)


@bp.route("/nowpayments", methods=["POST"])
def nowpayments():
    handler = NowPaymentsWebhookHandler(
        NowPaymentsSettings.from_config(current_app.config),
        ProfileStore(db.session),
    )
    return _dispatch(handler)
