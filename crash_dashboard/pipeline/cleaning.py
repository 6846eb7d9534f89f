# ========================
# crash_dashboard/pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Normalizes the two fields the dashboard consumes: the incident date, mapped
to a calendar-month bucket key, and the injury severity, filtered against
the excluded sentinel values.
"""

import re
import logging
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, NamedTuple, Optional

logger = logging.getLogger(__name__)

MONTHS = [
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec'
]

DEFAULT_EXCLUDED_SEVERITIES = frozenset({'Unknown'})

# Fractional seconds and zone designators after a time component
_TIME_SUFFIX = re.compile(r'(\.\d+)?\s*(Z|UTC|GMT|[+-]\d{2}:?\d{2})?$', re.IGNORECASE)


class MonthKey(NamedTuple):
    """Month bucket identity and labels derived from one date."""
    sort_key: str
    display_label: str
    axis_label: str


class DateBucketer:
    """
    Maps incident date strings to month buckets.
    Unparseable dates yield None; no exception reaches the caller.
    """

    DATE_FORMATS = [
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%d %H:%M",
        "%Y-%m-%dT%H:%M",
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %H:%M",
        "%m/%d/%Y %I:%M:%S %p",
        "%m/%d/%Y %I:%M %p",
        "%m/%d/%Y",
        "%d-%b-%Y",
        "%b-%Y",     # NHTSA SGO style, e.g. JUL-2021
        "%B-%Y",
        "%b %Y",
        "%B %Y",
        "%b %d, %Y",
        "%B %d, %Y",
        "%b %d %Y",
        "%B %d %Y",
        "%Y-%m",
    ]

    def __init__(self):
        self.dates_seen = 0
        self.dates_invalid = 0

    def parse_date(self, value: Any) -> Optional[datetime]:
        """
        Parses a date string in the supported formats.
        Date-only values resolve to midnight. Returns None if malformed.
        """
        if not value or not isinstance(value, str):
            return None

        text = value.strip()
        if not text:
            return None
        if ':' in text:
            text = _TIME_SUFFIX.sub('', text)

        for fmt in self.DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        return None

    def bucket(self, value: Any) -> Optional[MonthKey]:
        """
        Map a date string to its month bucket.

        Args:
            value (str): Raw incident date

        Returns:
            MonthKey or None: Bucket key and labels, None if the date is invalid
        """
        self.dates_seen += 1
        date = self.parse_date(value)
        if date is None:
            self.dates_invalid += 1
            logger.debug(f"Unparseable incident date: {value!r}")
            return None
        return month_key(date)

    def get_statistics(self) -> Dict[str, int]:
        return {
            'dates_seen': self.dates_seen,
            'dates_invalid': self.dates_invalid,
            'dates_valid': self.dates_seen - self.dates_invalid,
        }


def month_key(date: datetime) -> MonthKey:
    """Build the "YYYY-MM" key, "Mon YYYY" label and "MM-YYYY" axis label."""
    month = f"{date.month:02d}"
    return MonthKey(
        sort_key=f"{date.year}-{month}",
        display_label=f"{MONTHS[date.month - 1]} {date.year}",
        axis_label=f"{month}-{date.year}",
    )


class SeverityFilter:
    """
    Decides which injury severity values are counted.
    Missing, empty and excluded values (by default "Unknown") are dropped.
    """

    def __init__(self, excluded: Optional[Iterable[str]] = None):
        """
        Args:
            excluded (iterable[str]): Sentinel values to ignore
        """
        self.excluded: FrozenSet[str] = (
            DEFAULT_EXCLUDED_SEVERITIES if excluded is None else frozenset(excluded)
        )
        self.values_seen = 0
        self.values_excluded = 0

    def clean(self, value: Any) -> Optional[str]:
        """Return the severity to count, or None if it should be excluded."""
        self.values_seen += 1
        if value is None or not isinstance(value, str) or value == '' or value in self.excluded:
            self.values_excluded += 1
            return None
        return value

    def get_statistics(self) -> Dict[str, int]:
        return {
            'values_seen': self.values_seen,
            'values_excluded': self.values_excluded,
            'values_counted': self.values_seen - self.values_excluded,
        }
