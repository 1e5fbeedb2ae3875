"""
Management command to remind users who have not joined today's lunch.

Meant to run from cron every half hour in the morning on weekdays, e.g.
    0,30 9-11 * * 1-5  python manage.py remind_lunch_orders

Usage:
    python manage.py remind_lunch_orders [--date YYYY-MM-DD] [--dry-run]
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User
from apps.lunch.models import LunchOrder, SessionStatus, OrderStatus
from apps.lunch.services import get_session_for_date, office_today
from apps.notifications.models import NotificationEvent
from apps.notifications.services import enqueue


class Command(BaseCommand):
    help = "Remind users who have not ordered lunch yet"

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=date.fromisoformat,
            help='Session date (defaults to today in the office time zone)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List who would be reminded without sending anything',
        )

    def handle(self, *args, **options):
        session_date = options['date'] or office_today()

        session = get_session_for_date(session_date=session_date)
        if session is None or session.status != SessionStatus.ORDERING:
            self.stdout.write(f'No ordering session for {session_date}, nothing to remind.')
            return

        users = list(
            User.objects
            .active()
            .filter(notifications_enabled=True)
            .exclude(
                id__in=LunchOrder.objects
                .filter(session=session, status=OrderStatus.CONFIRMED)
                .values('user_id')
            )
            .order_by('email')
        )

        if not users:
            self.stdout.write(self.style.SUCCESS('Everybody has ordered. All good!'))
            return

        if options['dry_run']:
            for user in users:
                self.stdout.write(f'  - {user.get_display_name()}')
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No reminders sent.'))
            return

        with transaction.atomic():
            enqueue(
                event_type=NotificationEvent.ORDER_REMINDER,
                recipients=users,
                payload={
                    'session_id': str(session.id),
                    'session_date': session_date.isoformat(),
                },
            )

        self.stdout.write(self.style.SUCCESS(f'Queued reminders for {len(users)} user(s).'))
