"""Shared date utilities used by the models, the generator and the stores.

parse_date_input:  raises ValueError on bad input (strict, for stored records)
iso_or_none:       date → "YYYY-MM-DD" or None
add_months:        calendar month arithmetic clamped to month end
today:             current UTC calendar date
"""
import calendar
from datetime import date, datetime, timezone


def parse_date_input(value):
    """Parse a date string, raising ValueError on bad input.

    Accepts YYYY-MM-DD or DD.MM.YYYY; date objects pass through. Used when
    decoding persisted records, where a bad date means the entry is corrupt.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date value: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        try:
            return datetime.strptime(value, "%d.%m.%Y").date()
        except ValueError as exc:
            raise ValueError(
                "Invalid date format. Use YYYY-MM-DD or DD.MM.YYYY."
            ) from exc


def iso_or_none(value):
    """Serialize a date to ISO format, passing None through."""
    return value.isoformat() if value else None


def add_months(value: date, months: int) -> date:
    """Return ``value`` shifted by ``months`` calendar months.

    The day is clamped to the last day of the target month
    (2024-01-31 + 1 month → 2024-02-29).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def today() -> date:
    return datetime.now(timezone.utc).date()
