from datetime import date, datetime, timedelta, timezone


DATE_KEY_FORMAT = "%Y-%m-%d"


def local_now() -> datetime:
    """Naive local wall-clock time of the host."""
    return datetime.now()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def date_key(d: date) -> str:
    """Format a date as YYYY-MM-DD from its local calendar fields."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date_key(value: str) -> date:
    """Parse a YYYY-MM-DD key. Raises ValueError on anything else."""
    raw = (value or "").strip()
    if len(raw) != 10:
        raise ValueError(f"Invalid date key: {value!r}")
    return datetime.strptime(raw, DATE_KEY_FORMAT).date()


def is_date_key(value: str) -> bool:
    try:
        parse_date_key(value)
    except (TypeError, ValueError):
        return False
    return True


def shift_date_key(value: str, days: int) -> str:
    """Move a date key by whole calendar days (month/year rollover safe)."""
    return date_key(parse_date_key(value) + timedelta(days=int(days)))


def relative_date_label(value: str, today: str) -> str:
    delta = (parse_date_key(today) - parse_date_key(value)).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Yesterday"
    if delta == -1:
        return "Tomorrow"
    if delta > 1:
        return f"{delta} days ago"
    return f"In {-delta} days"
