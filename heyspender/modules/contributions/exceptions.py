"""Contribution domain exceptions."""


class ContributionError(Exception):
    """Base class for contribution errors."""


class ContributionNotFoundError(ContributionError):
    """Raised when no contribution matches the id or payment reference."""


class ContributionValidationError(ContributionError):
    """Raised for invalid contribution input."""
