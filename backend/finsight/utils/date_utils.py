from datetime import datetime, timezone


def add_months(year: int, month: int, n: int) -> tuple[int, int]:
    """Shift (year, month) by ``n`` months, ``n`` may be negative."""
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
