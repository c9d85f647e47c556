class BillingError(Exception):
    """
    Base class for every error the billing service reports to a caller.

    Carries the HTTP status the error handlers should answer with.
    """

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ClientRequestError(BillingError):
    """Malformed or incomplete request: missing body, header or field."""

    status_code = 400


class AuthenticationError(BillingError):
    """Webhook signature did not match the shared secret."""

    status_code = 400


class ConfigurationError(BillingError):
    """A required secret or setting is missing. Never treated as a no-op."""

    status_code = 500


class UpstreamWriteError(BillingError):
    """The profile update failed or matched no account."""

    status_code = 500


class UpstreamServiceError(BillingError):
    """A payment provider API call failed."""

    status_code = 500
