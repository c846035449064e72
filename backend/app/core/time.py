"""UTC helpers shared by the models and the debt timeline."""

from datetime import UTC, date, datetime, time


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for DateTime(timezone=True) columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)
