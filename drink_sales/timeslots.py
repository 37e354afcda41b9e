"""Time-bucketing helpers: hour slots, day bounds and date strings."""

from __future__ import annotations

from datetime import date, datetime, time

from drink_sales.errors import ValidationError

_END_OF_DAY = time(23, 59, 59, 999000)


def _local(instant: datetime) -> datetime:
    # Naive datetimes are interpreted as local wall-clock time.
    if instant.tzinfo is None:
        return instant
    return instant.astimezone()


def now() -> datetime:
    """Current instant as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def today() -> date:
    return now().date()


def slot_label(start_hour: int) -> str:
    return f"{start_hour:02d}:00-{(start_hour + 1) % 24:02d}:00"


def time_slot_of(instant: datetime) -> str:
    """Return the "HH:00-HH:00" label of the hour containing ``instant``."""
    return slot_label(_local(instant).hour)


def day_bounds_of(day: date) -> tuple[datetime, datetime]:
    """Inclusive local midnight .. 23:59:59.999 range for ``day``."""
    start = datetime.combine(day, time.min).astimezone()
    end = datetime.combine(day, _END_OF_DAY).astimezone()
    return (start, end)


def format_date(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def local_date_of(instant: datetime) -> str:
    return format_date(_local(instant).date())


def parse_date(text: str) -> date:
    """Parse a "YYYY-MM-DD" string."""
    raw = text.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"날짜는 YYYY-MM-DD 형식이어야 합니다: {raw!r}") from exc


def business_hour_slots(open_hour: int, close_hour: int) -> list[str]:
    """Canonical slot labels covering ``open_hour`` up to ``close_hour``."""
    return [slot_label(hour) for hour in range(open_hour, close_hour)]
