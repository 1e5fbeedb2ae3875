"""
Notification sinks.

A sink receives already-committed events and delivers them somewhere.
The active sink is the dotted path in ``settings.NOTIFICATION_SINK``.
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class BaseNotificationSink:
    """Interface every sink implements."""

    def notify(self, event_type, recipients, payload):
        """
        Deliver one event.

        Args:
            event_type: NotificationEvent value
            recipients: list of User instances
            payload: JSON-serializable dict describing the event
        """
        raise NotImplementedError


class LoggingNotificationSink(BaseNotificationSink):
    """Writes every event to the application log."""

    def notify(self, event_type, recipients, payload):
        names = ', '.join(user.get_display_name() for user in recipients)
        logger.info(f"Notification {event_type} to [{names}]: {payload}")


class MemoryNotificationSink(BaseNotificationSink):
    """
    Keeps delivered events in memory. Used by tests.

    A sink is built per dispatch, so deliveries are collected on the class.
    The test suite calls ``reset()`` before every test.
    """

    outbox = []

    @classmethod
    def reset(cls):
        cls.outbox = []
        return cls.outbox

    def notify(self, event_type, recipients, payload):
        self.outbox.append({
            'event_type': event_type,
            'recipients': [str(user.id) for user in recipients],
            'payload': payload,
        })


def get_sink():
    """Instantiate the configured sink."""
    sink_class = import_string(settings.NOTIFICATION_SINK)
    return sink_class()
