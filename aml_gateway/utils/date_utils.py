"""Date parsing and month bucketing utilities"""

import calendar
from datetime import date, datetime
from typing import Optional

# Non-ISO layouts seen on UK statements
_STATEMENT_FORMATS = ("%d/%m/%Y", "%d %b %Y", "%d %B %Y")


def parse_transaction_date(value: Optional[str]) -> Optional[date]:
    """Parse a statement date string, returning None when it is not a valid date"""
    if not value:
        return None
    text = value.strip()

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _STATEMENT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def month_key(day: date) -> str:
    """Canonical YYYY-MM bucket for a date"""
    return f"{day.year:04d}-{day.month:02d}"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]
