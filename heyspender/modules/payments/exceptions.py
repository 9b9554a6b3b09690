"""Payment domain exceptions."""


class PaymentError(Exception):
    """Base class for payment errors."""


class PaymentIntentNotFoundError(PaymentError):
    """Raised when no payment intent carries the given reference."""


class PaymentValidationError(PaymentError):
    """Raised for invalid checkout input."""


class InvalidWebhookSignatureError(PaymentError):
    """Raised when a webhook body does not match its signature header."""


class PaymentGatewayError(PaymentError):
    """Raised when the payment gateway is unreachable or rejects a call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PaymentGatewayTimeout(PaymentGatewayError):
    """Raised when the gateway does not answer within the configured timeout."""
