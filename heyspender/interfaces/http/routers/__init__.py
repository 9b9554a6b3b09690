from fastapi import APIRouter

from heyspender.interfaces.http.routers import (
    admin,
    auth,
    claims,
    notifications,
    payments,
    payouts,
    wallet,
    wishlists,
)


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(wishlists.router, prefix="/wishlists", tags=["wishlists"])
    router.include_router(claims.router, tags=["claims"])
    router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
    router.include_router(payouts.router, prefix="/payouts", tags=["payouts"])
    router.include_router(payments.router, prefix="/payments", tags=["payments"])
    router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
    router.include_router(admin.router, prefix="/admin", tags=["admin"])
    return router


__all__ = [
    "create_api_router",
]
