"""
Management command to deliver queued notifications.

Picks up outbox rows that were never delivered (for example when the
process died right after commit) and retries failed ones until they
reach NOTIFICATIONS_MAX_ATTEMPTS.

Usage:
    python manage.py send_notifications [--limit N]
"""

from django.conf import settings
from django.core.management.base import BaseCommand

from apps.notifications.models import Notification, NotificationStatus
from apps.notifications.services import DELIVERABLE_STATUSES, dispatch_pending


class Command(BaseCommand):
    help = 'Deliver pending and failed notifications to the configured sink'

    def add_arguments(self, parser):
        parser.add_argument(
            '--limit',
            type=int,
            default=500,
            help='Maximum number of notifications to deliver',
        )

    def handle(self, *args, **options):
        waiting = Notification.objects.filter(
            status__in=DELIVERABLE_STATUSES,
            attempts__lt=settings.NOTIFICATIONS_MAX_ATTEMPTS,
        ).count()

        if waiting == 0:
            self.stdout.write(self.style.SUCCESS('No notifications waiting.'))
            return

        delivered = dispatch_pending(limit=options['limit'])
        failed = Notification.objects.filter(status=NotificationStatus.FAILED).count()

        self.stdout.write(self.style.SUCCESS(f'Delivered {delivered} of {waiting} notification(s).'))
        if failed:
            self.stdout.write(self.style.WARNING(f'{failed} notification(s) failed; see the logs.'))
