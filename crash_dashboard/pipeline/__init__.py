# ========================
# crash_dashboard/pipeline/__init__.py
# ========================

"""
Data Pipeline Package

This package contains all core components of the dashboard data pipeline:
- fetching: Concurrent retrieval of the two feeds
- ingestion: CSV parsing into field-keyed records
- cleaning: Date bucketing and severity filtering
- transformation: Monthly and per-feed category aggregations
- orchestrator: Pipeline coordination and view state
- presentation: Chart-ready payload for the dashboard
"""

from .exceptions import PipelineError, FetchError, DecodeError, ParseError
from .models import MonthBucket, CategoryCount, DashboardData, PipelineState
from .fetching import FeedFetcher
from .ingestion import CSVParser, parse_csv_text
from .cleaning import DateBucketer, SeverityFilter
from .transformation import MonthlyAggregator, CategoryAggregator
from .orchestrator import DashboardPipeline
from .presentation import build_chart_payload, describe_state

__all__ = [
    'PipelineError',
    'FetchError',
    'DecodeError',
    'ParseError',
    'MonthBucket',
    'CategoryCount',
    'DashboardData',
    'PipelineState',
    'FeedFetcher',
    'CSVParser',
    'parse_csv_text',
    'DateBucketer',
    'SeverityFilter',
    'MonthlyAggregator',
    'CategoryAggregator',
    'DashboardPipeline',
    'build_chart_payload',
    'describe_state'
]
