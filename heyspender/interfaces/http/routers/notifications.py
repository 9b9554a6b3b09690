"""In-app notifications."""
from fastapi import APIRouter, Depends, Query

from heyspender.core.security import get_current_account
from heyspender.interfaces.http.deps import get_notification_service
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.modules.accounts import Account
from heyspender.modules.notifications import NotificationService
from heyspender.schemas import NotificationListResponse, NotificationResponse

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    account: Account = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    rows = await service.list_for_user(account.id, unread_only=unread_only, limit=limit)
    return NotificationListResponse(notifications=[NotificationResponse.model_validate(n) for n in rows])


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    account: Account = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    try:
        notification = await service.mark_read(notification_id, account.id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return NotificationResponse.model_validate(notification)
