"""Registration, login and email verification."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from heyspender.core.config import get_settings
from heyspender.core.security import create_access_token, get_current_account
from heyspender.interfaces.http.deps import get_account_service, get_notification_service
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.modules.accounts import Account, AccountCreateInput, AccountService
from heyspender.modules.notifications import NotificationService
from heyspender.schemas import (
    AccountResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    VerificationTokenResponse,
    VerifyEmailRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def _send_verification(account: Account, service: AccountService, notifications: NotificationService) -> str:
    token = service.issue_verification_token(account)
    await notifications.notify(
        account.id,
        "verify_email",
        "Verify your email",
        f"Confirm {account.email} to unlock instant withdrawals.",
        {"token": token},
    )
    return token


def _expose_token(token: str) -> str | None:
    # Tokens are only returned to the client outside production; there they travel by email.
    return token if get_settings().environment != "production" else None


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED, summary="Create an account")
async def register(
    payload: RegisterRequest,
    account_service: AccountService = Depends(get_account_service),
    notifications: NotificationService = Depends(get_notification_service),
) -> RegisterResponse:
    try:
        account = await account_service.create_account(
            AccountCreateInput(
                username=payload.username,
                password=payload.password,
                full_name=payload.full_name,
                email=payload.email,
                phone=payload.phone,
            )
        )
        token = await _send_verification(account, account_service, notifications)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc

    return RegisterResponse(
        account=AccountResponse.model_validate(account),
        access_token=create_access_token(account.id, account.username, account.role),
        verification_token=_expose_token(token),
    )


@router.post("/login", response_model=TokenResponse, summary="Log in with username or email")
async def login(
    payload: LoginRequest,
    account_service: AccountService = Depends(get_account_service),
) -> TokenResponse:
    account = await account_service.authenticate(payload.login, payload.password)
    if not account:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    await account_service.set_last_login(account.id)
    logger.info("Account %s logged in", account.id)
    return TokenResponse(
        access_token=create_access_token(account.id, account.username, account.role),
        account_id=account.id,
        username=account.username,
        role=account.role,
    )


@router.post("/verify", response_model=AccountResponse, summary="Confirm an email address")
async def verify_email(
    payload: VerifyEmailRequest,
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await account_service.verify_email(payload.token)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return AccountResponse.model_validate(account)


@router.post("/verify/resend", response_model=VerificationTokenResponse, summary="Issue a new verification token")
async def resend_verification(
    account: Account = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
    notifications: NotificationService = Depends(get_notification_service),
):
    if account.is_verified:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already verified")
    try:
        token = await _send_verification(account, account_service, notifications)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return VerificationTokenResponse(verification_token=_expose_token(token))


@router.get("/me", response_model=AccountResponse, summary="Current account")
async def me(account: Account = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)
