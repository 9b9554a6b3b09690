"""Claim domain exceptions."""


class ClaimError(Exception):
    """Base class for claim errors."""


class ClaimNotFoundError(ClaimError):
    """Raised when a claim does not exist."""


class ClaimOwnershipError(ClaimError):
    """Raised when a user acts on a claim that is not theirs."""


class ItemFullyClaimedError(ClaimError):
    """Raised when every unit of an item has already been claimed."""


class InvalidClaimTransitionError(ClaimError):
    """Raised when a claim status change is not allowed from its current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move claim from {current} to {target}")
        self.current = current
        self.target = target


class ClaimValidationError(ClaimError):
    """Raised for malformed claim input (amounts, channels, dates)."""
