"""Account domain exports"""

from .exceptions import (
    AccountAlreadyExistsError,
    AccountError,
    AccountNotFoundError,
    InvalidVerificationTokenError,
)
from .models import UNSET, Account, AccountCreateInput, AccountUpdateInput
from .service import AccountService

__all__ = [
    "Account",
    "AccountAlreadyExistsError",
    "AccountCreateInput",
    "AccountError",
    "AccountNotFoundError",
    "AccountService",
    "AccountUpdateInput",
    "InvalidVerificationTokenError",
    "UNSET",
]
