"""Notification domain exceptions."""


class NotificationError(Exception):
    """Base class for notification errors."""


class NotificationNotFoundError(NotificationError):
    """Raised when a notification does not exist or belongs to someone else."""
