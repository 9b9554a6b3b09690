"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import Account as AccountModel, Wishlist as WishlistModel
from heyspender.modules.accounts.exceptions import AccountNotFoundError
from heyspender.modules.accounts.models import Account


class SqlAccountRepository:
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        model = await self._session.get(AccountModel, account_id)
        return self._to_domain(model)

    async def get_by_username(self, username: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.username == username)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def get_by_email(self, email: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.email == email)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def list_accounts(self, *, role: str | None = None, active_only: bool = False) -> Sequence[Account]:
        stmt = select(AccountModel)
        if role:
            stmt = stmt.where(AccountModel.role == role)
        if active_only:
            stmt = stmt.where(AccountModel.is_active.is_(True))
        stmt = stmt.order_by(AccountModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_accounts(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(AccountModel))
        return result.scalar_one()

    async def create_account(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: str,
        email: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Account:
        model = AccountModel(
            username=username,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            email=email,
            phone=phone,
            is_active=is_active,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_account(
        self,
        account_id: str,
        *,
        full_name: str,
        email: str | None,
        phone: str | None,
        is_active: bool | None = None,
        role: str | None = None,
        password_hash: str | None = None,
    ) -> Account:
        model = await self._session.get(AccountModel, account_id)
        if model is None:
            raise AccountNotFoundError(account_id)

        model.full_name = full_name
        model.email = email
        model.phone = phone
        if is_active is not None:
            model.is_active = is_active
        if role is not None:
            model.role = role
        if password_hash is not None:
            model.password_hash = password_hash

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete_account(self, account_id: str) -> bool:
        model = await self._session.get(AccountModel, account_id)
        if model is None:
            return False
        # Wishlists go through the ORM so items and goals cascade on SQLite too.
        wishlists = await self._session.execute(select(WishlistModel).where(WishlistModel.owner_id == account_id))
        for wishlist in wishlists.scalars().all():
            await self._session.delete(wishlist)
        await self._session.flush()
        result = await self._session.execute(delete(AccountModel).where(AccountModel.id == account_id))
        return result.rowcount > 0

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(last_login_at=timestamp)
        )
        await self._session.execute(stmt)

    async def mark_email_verified(self, account_id: str, timestamp: datetime) -> Account:
        model = await self._session.get(AccountModel, account_id)
        if model is None:
            raise AccountNotFoundError(account_id)
        model.email_verified_at = timestamp
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            username=model.username,
            full_name=model.full_name or model.username,
            role=model.role or "user",
            is_active=bool(model.is_active),
            password_hash=model.password_hash,
            email=model.email,
            phone=model.phone,
            email_verified_at=model.email_verified_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login_at=model.last_login_at,
        )
