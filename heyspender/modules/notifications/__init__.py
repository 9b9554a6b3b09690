from .exceptions import NotificationError, NotificationNotFoundError
from .models import Notification
from .service import NotificationService

__all__ = [
    "Notification",
    "NotificationError",
    "NotificationNotFoundError",
    "NotificationService",
]
