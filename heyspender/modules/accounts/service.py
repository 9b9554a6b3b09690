"""Domain services for account management."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.core.clock import utcnow
from heyspender.core.crypto import hash_password, verify_password
from heyspender.core.tokens import VERIFY_PURPOSE, TokenError, create_verification_token, decode_token
from heyspender.infrastructure.database.repositories.account_repository import SqlAccountRepository

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError, InvalidVerificationTokenError
from .models import UNSET, Account, AccountCreateInput, AccountUpdateInput
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    async def get_by_username(self, username: str) -> Account | None:
        return await self._repository.get_by_username(username)

    async def get_by_email(self, email: str) -> Account | None:
        return await self._repository.get_by_email(email.strip().lower())

    async def list_accounts(self) -> Sequence[Account]:
        return await self._repository.list_accounts()

    async def list_active_admins(self) -> Sequence[Account]:
        return await self._repository.list_accounts(role="admin", active_only=True)

    async def count_accounts(self) -> int:
        return await self._repository.count_accounts()

    async def authenticate(self, login: str, password: str) -> Account | None:
        """Accept either the username or the email address as login."""
        account = await self._repository.get_by_username(login)
        if account is None and "@" in login:
            account = await self._repository.get_by_email(login.strip().lower())
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        if await self._repository.get_by_username(payload.username) is not None:
            raise AccountAlreadyExistsError(f"Username already exists: {payload.username}")
        email = payload.email.strip().lower() if payload.email else None
        if email and await self._repository.get_by_email(email) is not None:
            raise AccountAlreadyExistsError(f"Email already exists: {email}")

        account = await self._repository.create_account(
            username=payload.username,
            full_name=payload.full_name or payload.username,
            password_hash=hash_password(payload.password),
            role=payload.role,
            email=email,
            phone=payload.phone,
            is_active=payload.is_active,
        )
        logger.info("Account %s created (role=%s)", account.id, account.role)
        return account

    async def update_account(self, account_id: str, payload: AccountUpdateInput) -> Account:
        current = await self._repository.get_by_id(account_id)
        if current is None:
            raise AccountNotFoundError(account_id)

        password_hash = None
        if payload.password is not UNSET and payload.password is not None:
            password_hash = hash_password(payload.password)

        full_name = payload.full_name if payload.full_name not in (UNSET, None) else current.full_name
        email = payload.email if payload.email is not UNSET else current.email
        phone = payload.phone if payload.phone is not UNSET else current.phone
        is_active = payload.is_active if payload.is_active is not UNSET else current.is_active
        role = payload.role if payload.role is not UNSET else current.role

        return await self._repository.update_account(
            account_id,
            full_name=full_name,
            email=email,
            phone=phone,
            is_active=is_active,
            role=role,
            password_hash=password_hash,
        )

    async def set_active(self, account_id: str, is_active: bool) -> Account:
        return await self.update_account(account_id, AccountUpdateInput(is_active=is_active))

    async def delete_account(self, account_id: str) -> None:
        if not await self._repository.delete_account(account_id):
            raise AccountNotFoundError(account_id)

    async def set_last_login(self, account_id: str) -> None:
        await self._repository.set_last_login(account_id, utcnow())

    def issue_verification_token(self, account: Account) -> str:
        if not account.email:
            raise InvalidVerificationTokenError("Account has no email address")
        return create_verification_token(account.id, account.email)

    async def verify_email(self, token: str) -> Account:
        try:
            payload = decode_token(token, VERIFY_PURPOSE)
        except TokenError as exc:
            raise InvalidVerificationTokenError("Verification link is invalid or has expired") from exc

        account = await self._repository.get_by_id(payload["sub"])
        if account is None:
            raise AccountNotFoundError(payload["sub"])
        if account.email != payload.get("email"):
            raise InvalidVerificationTokenError("Verification link does not match the account email")
        if account.is_verified:
            return account
        return await self._repository.mark_email_verified(account.id, utcnow())
