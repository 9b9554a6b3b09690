"""Contribution domain exports"""

from .exceptions import ContributionError, ContributionNotFoundError, ContributionValidationError
from .models import ANONYMOUS_NAME, Contribution
from .service import ContributionService

__all__ = [
    "ANONYMOUS_NAME",
    "Contribution",
    "ContributionError",
    "ContributionNotFoundError",
    "ContributionService",
    "ContributionValidationError",
]
