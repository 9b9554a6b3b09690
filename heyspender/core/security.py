"""Bearer-token authentication dependencies."""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.core.tokens import ACCESS_PURPOSE, TokenError, create_access_token, decode_token
from heyspender.interfaces.http.deps.database import get_db_session
from heyspender.modules.accounts import Account, AccountService
from heyspender.schemas import TokenData

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> TokenData:
    try:
        payload = decode_token(token, ACCESS_PURPOSE)
    except TokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials") from exc

    account_id = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    if not all([account_id, username, role]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")
    return TokenData(account_id=account_id, username=username, role=role)


async def _load_account(token: str, db: AsyncSession) -> Account:
    token_data = decode_access_token(token)
    account = await AccountService.with_session(db).get_by_id(token_data.account_id)
    if account is None or not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account missing or disabled")
    return account


async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db_session),
) -> Account:
    return await _load_account(credentials.credentials, db)


async def get_optional_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Account]:
    """Signed-in account for endpoints that also serve anonymous spenders."""
    if credentials is None:
        return None
    return await _load_account(credentials.credentials, db)


async def get_current_admin(account: Account = Depends(get_current_account)) -> Account:
    if not account.is_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return account


__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_account",
    "get_current_admin",
    "get_optional_account",
]
