# ========================
# crash_dashboard/pipeline/models.py
# ========================

"""
Data Models

Value types passed from the aggregation pipeline to the presentation
boundary. All of them are immutable snapshots built once per page load.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

# A parsed CSV row: field name -> raw string value
IncidentRecord = Dict[str, str]


@dataclass(frozen=True)
class MonthBucket:
    """Number of incidents reported in one calendar month."""
    sort_key: str       # "YYYY-MM"
    display_label: str  # "Mon YYYY"
    axis_label: str     # "MM-YYYY"
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sortKey': self.sort_key,
            'date': self.display_label,
            'axisDate': self.axis_label,
            'count': self.count,
        }


@dataclass(frozen=True)
class CategoryCount:
    """Number of incidents of one injury severity within a feed."""
    name: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class DashboardData:
    """
    Composite result handed to the presentation layer.

    ``monthly`` covers both feeds combined; the category sequences and
    totals are computed per feed.
    """
    monthly: Tuple[MonthBucket, ...]
    category_a: Tuple[CategoryCount, ...]
    category_b: Tuple[CategoryCount, ...]
    total_a: int
    total_b: int
    label_a: str = 'ADAS'
    label_b: str = 'ADS'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'monthly': [bucket.to_dict() for bucket in self.monthly],
            'categoryA': [item.to_dict() for item in self.category_a],
            'categoryB': [item.to_dict() for item in self.category_b],
            'totalA': self.total_a,
            'totalB': self.total_b,
            'labelA': self.label_a,
            'labelB': self.label_b,
        }


@dataclass(frozen=True)
class PipelineState:
    """
    View state exposed to the boundary: exactly one of loading, ready
    (with ``data``) or error (with ``error``).
    """
    LOADING = 'loading'
    READY = 'ready'
    ERROR = 'error'

    status: str
    data: Optional[DashboardData] = None
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> 'PipelineState':
        return cls(status=cls.LOADING)

    @classmethod
    def ready(cls, data: DashboardData) -> 'PipelineState':
        return cls(status=cls.READY, data=data)

    @classmethod
    def failed(cls, message: str) -> 'PipelineState':
        return cls(status=cls.ERROR, error=message)

    @property
    def is_loading(self) -> bool:
        return self.status == self.LOADING

    @property
    def is_ready(self) -> bool:
        return self.status == self.READY

    @property
    def is_error(self) -> bool:
        return self.status == self.ERROR


@dataclass
class FeedText:
    """Decoded body of one fetched feed."""
    source: str
    text: str
    status_code: Optional[int] = None
