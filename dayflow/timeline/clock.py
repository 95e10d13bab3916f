"""Day-key and day-window helpers. All day-keys are local calendar dates."""

from datetime import date, datetime, time, timedelta, tzinfo


def local_now() -> datetime:
    """Current wall-clock time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


def day_key(moment: date) -> str:
    """YYYY-MM-DD for a date, or for the calendar date of a datetime."""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.isoformat()


def parse_day_key(key: str) -> date | None:
    try:
        return date.fromisoformat(key)
    except (TypeError, ValueError):
        return None


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def day_bounds(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """
    [00:00:00, 23:59:59.999999] of a day as aware datetimes.

    Without tz the bounds are interpreted in the local zone.
    """
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time.max)
    if tz is None:
        return start.astimezone(), end.astimezone()
    return start.replace(tzinfo=tz), end.replace(tzinfo=tz)
