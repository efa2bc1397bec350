from datetime import date, datetime, timezone


def current_time() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    """Server calendar date in UTC."""
    return current_time().date()
