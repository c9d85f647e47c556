from .webhooks import NowPaymentsWebhookHandler, PaystackWebhookHandler, WebhookResult

__all__ = ["NowPaymentsWebhookHandler", "PaystackWebhookHandler", "WebhookResult"]
