# ========================
# crash_dashboard/pipeline/transformation.py
# ========================

"""
Data Transformation Module

In-memory aggregations of parsed incident records into chart-ready values:
monthly incident counts across both feeds and injury severity counts per feed.
"""

import logging
from operator import attrgetter
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .cleaning import DateBucketer, SeverityFilter
from .models import CategoryCount, IncidentRecord, MonthBucket

logger = logging.getLogger(__name__)

DATE_FIELD = 'Incident Date'
SEVERITY_FIELD = 'Highest Injury Severity Alleged'


class MonthlyAggregator:
    """
    Counts incidents per calendar month.
    Records may be fed in any order and from any number of feeds.
    """

    def __init__(self, date_field: str = DATE_FIELD, bucketer: Optional[DateBucketer] = None):
        """
        Initialize the monthly aggregator.

        Args:
            date_field (str): Column holding the incident date
            bucketer (DateBucketer): Date-to-month mapper
        """
        self.date_field = date_field
        self.bucketer = bucketer or DateBucketer()
        self._reset_aggregations()

    def _reset_aggregations(self) -> None:
        # sort_key -> {'display_label', 'axis_label', 'count'}
        self.monthly_counts: Dict[str, Dict[str, Any]] = {}
        self.records_processed = 0
        self.records_skipped = 0

    def process_chunk(self, chunk: Iterable[IncidentRecord]) -> None:
        """
        Add a batch of records to the monthly counts.

        Args:
            chunk (iterable[dict]): Parsed incident records
        """
        for record in chunk:
            self.records_processed += 1
            key = self.bucketer.bucket(record.get(self.date_field))
            if key is None:
                self.records_skipped += 1
                continue

            bucket = self.monthly_counts.get(key.sort_key)
            if bucket is None:
                # Labels are fixed by the first record seen for the month
                bucket = self.monthly_counts[key.sort_key] = {
                    'display_label': key.display_label,
                    'axis_label': key.axis_label,
                    'count': 0,
                }
            bucket['count'] += 1

    def finalize_aggregations(self) -> List[MonthBucket]:
        """
        Produce the month buckets sorted ascending by "YYYY-MM" key.

        Returns:
            list[MonthBucket]: One bucket per month with at least one incident
        """
        buckets = [
            MonthBucket(
                sort_key=sort_key,
                display_label=data['display_label'],
                axis_label=data['axis_label'],
                count=data['count'],
            )
            for sort_key, data in self.monthly_counts.items()
        ]
        buckets.sort(key=attrgetter('sort_key'))

        logger.info(
            f"Monthly aggregation complete: {len(buckets)} months from "
            f"{self.records_processed - self.records_skipped}/{self.records_processed} dated records"
        )
        return buckets

    def get_aggregation_summary(self) -> Dict[str, int]:
        return {
            'records_processed': self.records_processed,
            'records_skipped': self.records_skipped,
            'monthly_periods': len(self.monthly_counts),
        }


class CategoryAggregator:
    """
    Counts incidents per injury severity value for a single feed.
    One instance is used per feed.
    """

    def __init__(self,
                 category_field: str = SEVERITY_FIELD,
                 excluded_values: Optional[Iterable[str]] = None,
                 name: str = ''):
        """
        Initialize the category aggregator.

        Args:
            category_field (str): Column holding the severity value
            excluded_values (iterable[str]): Sentinel values to ignore, default {"Unknown"}
            name (str): Feed label used in log messages
        """
        self.category_field = category_field
        self.name = name
        self.severity_filter = SeverityFilter(excluded_values)
        self._reset_aggregations()

    def _reset_aggregations(self) -> None:
        # Insertion order follows the first occurrence of each category
        self.category_counts: Dict[str, int] = {}
        self.records_processed = 0
        self.records_skipped = 0

    def process_chunk(self, chunk: Iterable[IncidentRecord]) -> None:
        """
        Add a batch of records to the category counts.

        Args:
            chunk (iterable[dict]): Parsed incident records of one feed
        """
        for record in chunk:
            self.records_processed += 1
            severity = self.severity_filter.clean(record.get(self.category_field))
            if severity is None:
                self.records_skipped += 1
                continue
            self.category_counts[severity] = self.category_counts.get(severity, 0) + 1

    def finalize_aggregations(self) -> Tuple[List[CategoryCount], int]:
        """
        Produce the category counts and their total.

        Returns:
            tuple: (list of CategoryCount, total count)
        """
        counts = [CategoryCount(name=name, value=value) for name, value in self.category_counts.items()]
        total = sum(item.value for item in counts)

        logger.info(
            f"Category aggregation complete{' for ' + self.name if self.name else ''}: "
            f"{len(counts)} categories, {total} counted, {self.records_skipped} excluded"
        )
        return counts, total

    def get_aggregation_summary(self) -> Dict[str, int]:
        return {
            'records_processed': self.records_processed,
            'records_skipped': self.records_skipped,
            'categories': len(self.category_counts),
        }


def aggregate_monthly(records: Iterable[IncidentRecord], date_field: str = DATE_FIELD) -> List[MonthBucket]:
    """Run a fresh MonthlyAggregator over ``records``."""
    aggregator = MonthlyAggregator(date_field=date_field)
    aggregator.process_chunk(records)
    return aggregator.finalize_aggregations()


def aggregate_categories(records: Iterable[IncidentRecord],
                         category_field: str = SEVERITY_FIELD,
                         excluded_values: Optional[Iterable[str]] = None) -> Tuple[List[CategoryCount], int]:
    """Run a fresh CategoryAggregator over one feed's ``records``."""
    aggregator = CategoryAggregator(category_field=category_field, excluded_values=excluded_values)
    aggregator.process_chunk(records)
    return aggregator.finalize_aggregations()
