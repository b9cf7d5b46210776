from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from flask import current_app

DEFAULT_TIMEZONE = 'Europe/Paris'


def _app_timezone():
    try:
        return ZoneInfo(current_app.config.get('APP_TIMEZONE', DEFAULT_TIMEZONE))
    except RuntimeError:
        # outside of an application context
        return ZoneInfo(DEFAULT_TIMEZONE)


def local_now():
    """Current wall-clock time in the association's timezone, as a naive datetime.

    Ages and document dates are French civil dates, so the submission instant
    is taken in APP_TIMEZONE and stored without tzinfo like the other columns.
    """
    return datetime.now(_app_timezone()).replace(tzinfo=None)


def format_date_fr(value):
    """dd/mm/yyyy for a date or datetime; empty string when absent."""
    if value is None:
        return ''
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime('%d/%m/%Y')
    return str(value)


def format_datetime_fr(value):
    if value is None:
        return ''
    return f"{value.strftime('%d/%m/%Y')} à {value.strftime('%H:%M')}"


def safe_iso(dt):
    """Return an ISO 8601 string for a datetime-like value in a safe way.

    Naive datetimes are interpreted in APP_TIMEZONE and converted to UTC,
    aware ones are converted to UTC, falsy values give None.
    """
    if not dt:
        return None

    if isinstance(dt, datetime):
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=_app_timezone())
        return dt.astimezone(timezone.utc).isoformat()

    if hasattr(dt, 'isoformat'):
        return dt.isoformat()

    return str(dt)
