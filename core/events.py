"""Publishing helper for domain events.

Domain events are plain Django signals. They are delivered after the
surrounding transaction commits so that receivers (notification fan-out,
cache invalidation) never observe or affect an uncommitted write.
"""

import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def publish(signal, sender, **payload):
    """Send ``signal`` on commit; receiver failures are logged, not raised."""

    def _deliver():
        for receiver, result in signal.send_robust(sender=sender, **payload):
            if isinstance(result, Exception):
                logger.error(
                    'Receiver %r failed for %s',
                    getattr(receiver, '__qualname__', receiver),
                    sender.__name__,
                    exc_info=result,
                )

    transaction.on_commit(_deliver)
