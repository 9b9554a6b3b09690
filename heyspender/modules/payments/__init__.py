"""Payment domain exports"""

from .exceptions import (
    InvalidWebhookSignatureError,
    PaymentError,
    PaymentGatewayError,
    PaymentGatewayTimeout,
    PaymentIntentNotFoundError,
    PaymentValidationError,
)
from .gateway import CheckoutSession, PaymentGateway, TransactionVerification, TransferResult
from .models import CASH_PAYMENT, CONTRIBUTION, CheckoutResult, PaymentIntent
from .service import PaymentService, generate_reference, manual_instructions

__all__ = [
    "CASH_PAYMENT",
    "CONTRIBUTION",
    "CheckoutResult",
    "CheckoutSession",
    "InvalidWebhookSignatureError",
    "PaymentError",
    "PaymentGateway",
    "PaymentGatewayError",
    "PaymentGatewayTimeout",
    "PaymentIntent",
    "PaymentIntentNotFoundError",
    "PaymentService",
    "PaymentValidationError",
    "TransactionVerification",
    "TransferResult",
    "generate_reference",
    "manual_instructions",
]
