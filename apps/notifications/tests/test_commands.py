"""
Tests for the send_notifications management command.
"""

import pytest
from io import StringIO

from django.core.management import call_command

from apps.notifications.models import Notification, NotificationEvent, NotificationStatus
from apps.notifications.services import enqueue


@pytest.mark.django_db
class TestSendNotificationsCommand:
    """Tests for send_notifications."""

    def test_nothing_waiting(self):
        out = StringIO()

        call_command('send_notifications', stdout=out)

        assert 'No notifications waiting' in out.getvalue()

    def test_delivers_pending(self, member, memory_outbox):
        enqueue(event_type=NotificationEvent.ORDER_REMINDER, recipients=[member], payload={})
        out = StringIO()

        call_command('send_notifications', stdout=out)

        assert 'Delivered 1 of 1' in out.getvalue()
        assert Notification.objects.get().status == NotificationStatus.SENT
        assert len(memory_outbox) == 1

    def test_reports_failures(self, member, settings):
        settings.NOTIFICATION_SINK = 'apps.notifications.tests.test_services.FailingSink'
        enqueue(event_type=NotificationEvent.ORDER_REMINDER, recipients=[member], payload={})
        out = StringIO()

        call_command('send_notifications', '--limit', '10', stdout=out)

        assert 'Delivered 0 of 1' in out.getvalue()
        assert '1 notification(s) failed' in out.getvalue()
