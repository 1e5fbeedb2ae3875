"""
Management command to select the day's lunch buyers.

Meant to run from cron shortly before lunch on weekdays, e.g.
    30 11 * * 1-5  python manage.py select_lunch_buyers

Usage:
    python manage.py select_lunch_buyers [--date YYYY-MM-DD] [--force] [--dry-run]
"""

from datetime import date

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.lunch.models import SessionStatus
from apps.lunch.services import (
    get_session_for_date,
    get_session_participants,
    pick_buyers,
    select_buyers,
    office_today,
    is_weekday,
    LedgerServiceError,
)
from apps.lunch.services.rotation import get_previous_buyer_ids


class Command(BaseCommand):
    help = "Select buyers for the day's lunch session"

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=date.fromisoformat,
            help='Session date (defaults to today in the office time zone)',
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Run on weekends too',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show who would be selected without making changes',
        )

    def handle(self, *args, **options):
        session_date = options['date'] or office_today()

        if not is_weekday(session_date) and not options['force']:
            self.stdout.write(f'{session_date} is a weekend, skipping buyer selection.')
            return

        session = get_session_for_date(session_date=session_date)
        if session is None or session.status != SessionStatus.ORDERING:
            self.stdout.write(
                self.style.WARNING(f'No ordering session for {session_date}, skipping.')
            )
            return

        if options['dry_run']:
            participants = list(get_session_participants(session))
            buyers = pick_buyers(
                participants,
                get_previous_buyer_ids(session),
                settings.LUNCH_BUYER_COUNT,
            )
            self.stdout.write(f'\n{len(participants)} participant(s) for {session_date}:')
            for buyer in buyers:
                self.stdout.write(f'  - {buyer.get_display_name()} (index {buyer.rotation_index})')
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        try:
            buyers = select_buyers(session_id=session.id)
        except LedgerServiceError as e:
            raise CommandError(f'Buyer selection failed for {session_date}: {e}')

        names = ', '.join(buyer.get_display_name() for buyer in buyers)
        self.stdout.write(
            self.style.SUCCESS(f'Selected {len(buyers)} buyer(s) for {session_date}: {names}')
        )
