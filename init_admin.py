"""
Create the first admin account.

Username, email and password default to admin / admin@heyspender.com /
admin123 and can be overridden with HEYSPENDER_ADMIN_USERNAME,
HEYSPENDER_ADMIN_EMAIL and HEYSPENDER_ADMIN_PASSWORD.
"""
import asyncio
import os

from heyspender.infrastructure.database import get_session, init_db
from heyspender.modules.accounts import AccountCreateInput, AccountService


async def create_default_admin():
    await init_db()

    async for db in get_session():
        service = AccountService.with_session(db)
        if await service.list_active_admins():
            print("An admin account already exists, nothing to do")
            return

        username = os.environ.get("HEYSPENDER_ADMIN_USERNAME", "admin")
        password = os.environ.get("HEYSPENDER_ADMIN_PASSWORD", "admin123")
        await service.create_account(
            AccountCreateInput(
                username=username,
                password=password,
                role="admin",
                email=os.environ.get("HEYSPENDER_ADMIN_EMAIL", "admin@heyspender.com"),
            )
        )
        await db.commit()

        print("=" * 50)
        print("Admin account created")
        print(f"username: {username}")
        print(f"password: {password}")
        print("Change the password after the first login!")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_default_admin())
