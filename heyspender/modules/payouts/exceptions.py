"""Payout domain exceptions."""


class PayoutError(Exception):
    """Base class for payout errors."""


class PayoutNotFoundError(PayoutError):
    """Raised when a payout does not exist."""


class PayoutValidationError(PayoutError):
    """Raised for withdrawal requests below the minimum or with bad bank details."""


class InvalidPayoutTransitionError(PayoutError):
    """Raised when a payout status change is not allowed from its current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move payout from {current} to {target}")
        self.current = current
        self.target = target
