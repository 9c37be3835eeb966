from datetime import date, datetime, time, timezone
from typing import Optional


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp, the form every column holds."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    # naive values are taken to be UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# -------------------------------
# Combine a calendar date and a HH:MM time-of-day into one timestamp
# -------------------------------
def combine_schedule(day: date, time_of_day: time) -> datetime:
    combined = datetime.combine(day, time_of_day.replace(second=0, microsecond=0))
    return to_utc(combined)


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Strip a free-text value; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()
