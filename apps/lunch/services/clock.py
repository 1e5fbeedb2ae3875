"""
Office clock.

All "today" decisions are made in the office time zone, not in UTC.
"""
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def office_now() -> datetime:
    """Current time in the office time zone."""
    return timezone.now().astimezone(ZoneInfo(settings.LUNCH_TIME_ZONE))


def office_today() -> date:
    return office_now().date()


def order_target_date(now: datetime = None) -> date:
    """
    Date users are ordering for.

    After LUNCH_ORDER_CUTOFF_HOUR today's lunch is over, so joins and
    leaves apply to tomorrow's session. Buyer actions stay on
    office_today().
    """
    now = now or office_now()
    if now.hour >= settings.LUNCH_ORDER_CUTOFF_HOUR:
        return now.date() + timedelta(days=1)
    return now.date()


def is_weekday(day: date) -> bool:
    return day.weekday() < 5
