"""
Notification outbox service.

Ledger services call ``enqueue`` inside their own transaction. Delivery
runs after commit; any sink error is logged and stored on the row, never
raised back to the caller.
"""
import logging
from typing import Iterable, List

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User

from .models import Notification, NotificationStatus
from .sinks import get_sink

logger = logging.getLogger(__name__)


DELIVERABLE_STATUSES = (NotificationStatus.PENDING, NotificationStatus.FAILED)


def enqueue(*, event_type: str, recipients: Iterable[User], payload: dict) -> List[Notification]:
    """
    Write one pending outbox row per recipient.

    When ``NOTIFICATIONS_DISPATCH_ON_COMMIT`` is set, delivery of these rows
    is scheduled with ``transaction.on_commit``; a rollback discards both the
    rows and the callback.

    Args:
        event_type: NotificationEvent value
        recipients: Users to notify
        payload: JSON-serializable event data

    Returns:
        Created Notification rows
    """
    notifications = [
        Notification.objects.create(
            event_type=event_type,
            recipient=recipient,
            payload=payload,
        )
        for recipient in recipients
    ]

    if notifications and settings.NOTIFICATIONS_DISPATCH_ON_COMMIT:
        ids = [notification.id for notification in notifications]
        transaction.on_commit(lambda: dispatch_after_commit(ids))

    return notifications


def dispatch_after_commit(notification_ids) -> None:
    """
    on_commit hook. The ledger change is already committed, so nothing
    raised here may reach the caller; undelivered rows stay in the outbox
    for ``send_notifications``.
    """
    try:
        dispatch_pending(notification_ids=notification_ids)
    except Exception as e:
        logger.error(
            f"Dispatch of {len(notification_ids)} notification(s) failed: {e}",
            exc_info=True,
        )


def _claim(notification_id) -> bool:
    """Move a deliverable row to ``sending``. Only one caller can win."""
    claimed = Notification.objects.filter(
        id=notification_id,
        status__in=DELIVERABLE_STATUSES,
        attempts__lt=settings.NOTIFICATIONS_MAX_ATTEMPTS,
    ).update(status=NotificationStatus.SENDING, attempts=F('attempts') + 1)
    return claimed == 1


def dispatch_pending(*, notification_ids=None, limit: int = 500) -> int:
    """
    Deliver pending (and previously failed) outbox rows to the sink.

    Each row is claimed with a conditional update before delivery, so a
    concurrent dispatcher skips it. Rows that reached
    ``NOTIFICATIONS_MAX_ATTEMPTS`` stay failed.

    Args:
        notification_ids: Restrict delivery to these rows
        limit: Maximum number of rows handled in one call

    Returns:
        Number of rows delivered successfully
    """
    try:
        sink = get_sink()
    except Exception as e:
        logger.error(f"Notification sink {settings.NOTIFICATION_SINK} unavailable: {e}", exc_info=True)
        return 0

    queryset = Notification.objects.filter(
        status__in=DELIVERABLE_STATUSES,
        attempts__lt=settings.NOTIFICATIONS_MAX_ATTEMPTS,
    )
    if notification_ids is not None:
        queryset = queryset.filter(id__in=notification_ids)

    candidate_ids = list(queryset.order_by('created_at').values_list('id', flat=True)[:limit])
    delivered = 0

    for notification_id in candidate_ids:
        if not _claim(notification_id):
            continue

        notification = Notification.objects.select_related('recipient').get(id=notification_id)
        try:
            sink.notify(
                notification.event_type,
                [notification.recipient],
                notification.payload,
            )
        except Exception as e:
            logger.error(
                f"Notification {notification.id} ({notification.event_type}) failed "
                f"on attempt {notification.attempts}: {e}",
                exc_info=True,
            )
            notification.status = NotificationStatus.FAILED
            notification.last_error = str(e)
            notification.save(update_fields=['status', 'last_error'])
            continue

        notification.status = NotificationStatus.SENT
        notification.sent_at = timezone.now()
        notification.last_error = ''
        notification.save(update_fields=['status', 'sent_at', 'last_error'])
        delivered += 1

    return delivered
