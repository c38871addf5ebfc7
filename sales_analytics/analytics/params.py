"""
Request Parameter Parsing

Date ranges are validated strictly: a request with a bad range is rejected
before any query runs. Numeric paging and limit parameters are parsed
leniently and fall back to their defaults instead of failing.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
import re
from typing import Any, Dict, List, Optional

from sales_analytics.exceptions import (
    FutureEndDate,
    InvalidDateFormat,
    RangeInverted,
    ValidationError,
)

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_FIELD_LABELS = {
    "startDate": "Start date",
    "endDate": "End date",
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days"""
    start: date
    end: date

    @property
    def start_at(self) -> datetime:
        """Midnight at the start of the first day"""
        return datetime.combine(self.start, time.min)

    @property
    def end_at(self) -> datetime:
        """Last instant of the final day"""
        return datetime.combine(self.end, time.max)


def _parse_date(value: str) -> Optional[date]:
    if not _DATE_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
    today: Optional[date] = None,
) -> DateRange:
    """
    Validate a start/end pair of YYYY-MM-DD strings.

    Args:
        start_date: First day of the range
        end_date: Last day of the range, inclusive
        today: Reference date for the future check; defaults to the local date

    Returns:
        DateRange covering both days in full

    Raises:
        ValidationError: A field is missing
        InvalidDateFormat: A field is not a calendar date
        RangeInverted: start_date is after end_date
        FutureEndDate: end_date is after today
    """
    errors: List[Dict[str, str]] = []
    missing = False
    parsed: Dict[str, date] = {}

    for field, value in (("startDate", start_date), ("endDate", end_date)):
        label = _FIELD_LABELS[field]
        if value is None or not str(value).strip():
            missing = True
            errors.append({"field": field, "message": f"{label} is required"})
            continue

        day = _parse_date(str(value).strip())
        if day is None:
            errors.append({"field": field, "message": f"{label} must be in YYYY-MM-DD format"})
            continue
        parsed[field] = day

    if errors:
        if missing:
            raise ValidationError(errors)
        raise InvalidDateFormat(errors)

    start, end = parsed["startDate"], parsed["endDate"]
    if start > end:
        raise RangeInverted()
    if end > (today or date.today()):
        raise FutureEndDate()

    return DateRange(start=start, end=end)


def parse_positive_int(
    raw: Any,
    default: int,
    maximum: Optional[int] = None,
) -> int:
    """
    Parse a positive integer query parameter.

    Only whole decimal integers are accepted: "2.5" and "5abc" are treated
    as non-numeric rather than truncated to a leading number. Missing,
    non-numeric and non-positive values give `default`; values above
    `maximum` are clamped to it.
    """
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default

    if value < 1:
        return default
    if maximum is not None and value > maximum:
        return maximum
    return value
