import os
import sys
import tempfile
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE__URL", f"sqlite+aiosqlite:///{tempfile.gettempdir()}/heyspender-test.db")

# The app module wires every router and so imports every service; load it first.
from heyspender.main import app  # noqa: E402
from heyspender.core.config import get_settings  # noqa: E402
from heyspender.db import models  # noqa: E402,F401
from heyspender.infrastructure.database import Base, get_session  # noqa: E402
from heyspender.modules.accounts import AccountCreateInput, AccountService, AccountUpdateInput  # noqa: E402
from heyspender.modules.wishlists import GoalInput, ItemInput, WishlistService  # noqa: E402


@pytest.fixture()
async def session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db:
        yield db
    await engine.dispose()


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE__URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    get_settings.cache_clear()

    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c

    get_settings.cache_clear()


async def make_account(db: AsyncSession, username: str, *, verified: bool = False, role: str = "user"):
    service = AccountService.with_session(db)
    account = await service.create_account(
        AccountCreateInput(username=username, password="secret123", email=f"{username}@example.com", role=role)
    )
    if verified:
        account = await service.verify_email(service.issue_verification_token(account))
    return account


async def make_wishlist(db: AsyncSession, owner_id: str, *, qty_total: int = 1, price_kobo: int = 500_000):
    return await WishlistService.with_session(db).create_wishlist(
        owner_id=owner_id,
        title="Ada's 30th Birthday",
        occasion="birthday",
        visibility="public",
        items=[ItemInput(name="Blender", unit_price_kobo=price_kobo, qty_total=qty_total)],
        goals=[GoalInput(title="Trip to Zanzibar", target_amount_kobo=1_000_000)],
    )


def register(client, username: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"username": username, "password": "secret123", "email": f"{username}@example.com"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(body: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {body['access_token']}"}


def promote_to_admin(client, username: str) -> None:
    async def _promote():
        async for db in get_session():
            service = AccountService.with_session(db)
            account = await service.get_by_username(username)
            await service.update_account(account.id, AccountUpdateInput(role="admin"))

    client.portal.call(_promote)
