"""Notification fan-out.

One business event becomes one :class:`Notification` row per active user
in the target roles. Delivery is best-effort: failures are logged and never
reach the operation that triggered them.
"""

import logging

from django.contrib.auth import get_user_model

from .models import Notification

logger = logging.getLogger(__name__)


def notify_roles(roles, *, title, message, type='system', related_id=None, related_type='', action_url=''):
    """Create a notification for every active user whose role is in ``roles``.

    Returns the number of rows created (0 on failure).
    """
    try:
        recipients = get_user_model().objects.filter(role__in=list(roles), is_active=True).values_list('pk', flat=True)
        rows = [
            Notification(
                user_id=user_id,
                title=title[:200],
                message=message[:500],
                type=type,
                related_id=related_id,
                related_type=related_type,
                action_url=action_url,
            )
            for user_id in recipients
        ]
        Notification.objects.bulk_create(rows)
    except Exception:
        logger.exception('Notification fan-out failed: %s', title)
        return 0
    logger.debug('Notification "%s" sent to %d users', title, len(rows))
    return len(rows)
