"""Translate domain exceptions into HTTP errors."""

from fastapi import HTTPException, status

from heyspender.modules.accounts import AccountAlreadyExistsError, AccountError, AccountNotFoundError
from heyspender.modules.claims import (
    ClaimError,
    ClaimNotFoundError,
    ClaimOwnershipError,
    InvalidClaimTransitionError,
    ItemFullyClaimedError,
)
from heyspender.modules.contributions import ContributionError, ContributionNotFoundError
from heyspender.modules.notifications import NotificationError, NotificationNotFoundError
from heyspender.modules.payments import (
    InvalidWebhookSignatureError,
    PaymentError,
    PaymentGatewayError,
    PaymentIntentNotFoundError,
)
from heyspender.modules.payouts import InvalidPayoutTransitionError, PayoutError, PayoutNotFoundError
from heyspender.modules.wallets import WalletError, WalletNotFoundError
from heyspender.modules.wishlists import (
    GoalNotFoundError,
    WishlistError,
    WishlistItemNotFoundError,
    WishlistNotFoundError,
    WishlistOwnershipError,
)

DOMAIN_ERRORS = (
    AccountError,
    WishlistError,
    ClaimError,
    ContributionError,
    WalletError,
    PayoutError,
    PaymentError,
    NotificationError,
)

_STATUS_BY_TYPE: tuple[tuple[tuple[type[Exception], ...], int], ...] = (
    (
        (
            AccountNotFoundError,
            WishlistNotFoundError,
            WishlistItemNotFoundError,
            GoalNotFoundError,
            ClaimNotFoundError,
            ContributionNotFoundError,
            WalletNotFoundError,
            PayoutNotFoundError,
            PaymentIntentNotFoundError,
            NotificationNotFoundError,
        ),
        status.HTTP_404_NOT_FOUND,
    ),
    ((WishlistOwnershipError, ClaimOwnershipError), status.HTTP_403_FORBIDDEN),
    (
        (
            AccountAlreadyExistsError,
            ItemFullyClaimedError,
            InvalidClaimTransitionError,
            InvalidPayoutTransitionError,
        ),
        status.HTTP_409_CONFLICT,
    ),
    ((InvalidWebhookSignatureError,), status.HTTP_401_UNAUTHORIZED),
    ((PaymentGatewayError,), status.HTTP_502_BAD_GATEWAY),
)


def to_http_error(exc: Exception) -> HTTPException:
    for types, code in _STATUS_BY_TYPE:
        if isinstance(exc, types):
            return HTTPException(status_code=code, detail=str(exc) or type(exc).__name__)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc) or type(exc).__name__)


__all__ = ["DOMAIN_ERRORS", "to_http_error"]
