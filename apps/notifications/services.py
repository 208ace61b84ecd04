"""Notification helpers used by other apps inside their transactions."""

import logging

from apps.accounts.models import User

from .models import Notification, NotificationType

logger = logging.getLogger(__name__)


def notify(*, user: User, message: str, type: str = NotificationType.INFO) -> Notification:
    """Create a notification for ``user``.

    Runs in the caller's transaction, so a rolled back order never leaves
    a notification behind.
    """
    notification = Notification.objects.create(user=user, message=message, type=type)
    logger.debug("Notification %s created for user %s", notification.id, user.id)
    return notification


def mark_all_read(*, user: User) -> int:
    """Mark every unread notification of ``user`` as read and return the count."""
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
