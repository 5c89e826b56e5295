from datetime import datetime, date, timedelta
from typing import Optional, Tuple


def to_local(moment: datetime) -> datetime:
    """
    Returns a naive local-time datetime.
    Aware datetimes are converted to the local timezone first; naive ones are
    assumed to already be local.
    """
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def local_date(moment: datetime) -> date:
    """Calendar day of `moment` in local time."""
    return to_local(moment).date()


def start_of_day(moment: datetime) -> datetime:
    local = to_local(moment)
    return datetime(local.year, local.month, local.day)


def start_of_month(moment: datetime) -> datetime:
    local = to_local(moment)
    return datetime(local.year, local.month, 1)


def weekend_span(now: datetime) -> Tuple[datetime, datetime]:
    """
    Returns the [saturday 00:00, monday 00:00) span of the weekend containing
    `now`. On a weekday this is the upcoming weekend.
    """
    today = start_of_day(now)
    weekday = today.weekday()  # Monday == 0
    if weekday == 5:
        offset = 0
    elif weekday == 6:
        offset = -1
    else:
        offset = 5 - weekday
    saturday = today + timedelta(days=offset)
    return saturday, saturday + timedelta(days=2)


def format_runtime(minutes: Optional[int], compact: bool = False) -> str:
    """
    Converts a number of minutes into a human-readable string.
    Above one day only days and hours are shown ("3 days, 4h" or "3d 4h" when
    compact), otherwise hours and minutes ("2h 15min").
    """
    if not minutes or minutes < 0:
        minutes = 0

    hours = minutes // 60
    days = hours // 24
    if days > 0:
        if compact:
            return f"{days}d {hours % 24}h"
        unit = "day" if days == 1 else "days"
        return f"{days} {unit}, {hours % 24}h"
    return f"{hours}h {minutes % 60}min"
