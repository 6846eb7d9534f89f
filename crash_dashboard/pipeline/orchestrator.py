# ========================
# crash_dashboard/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Main orchestrator class that loads both incident feeds and turns them into
the composite result consumed by the dashboard.
"""

import logging
from typing import Callable, List, Optional

from .exceptions import PipelineError
from .fetching import FeedFetcher
from .ingestion import CSVParser
from .models import DashboardData, IncidentRecord, PipelineState
from .transformation import CategoryAggregator, MonthlyAggregator
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)

StateListener = Callable[[PipelineState], None]


class DashboardPipeline:
    """
    Orchestrates the dashboard data pipeline.
    Coordinates fetching, parsing and aggregating the two feeds.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 fetcher: Optional[FeedFetcher] = None,
                 on_state_change: Optional[StateListener] = None):
        """
        Initialize the dashboard pipeline.

        Args:
            config (Config): Configuration object
            fetcher (FeedFetcher): Feed fetcher, built from ``config`` if omitted
            on_state_change (callable): Called with each new PipelineState
        """
        self.config = config or Config()
        self.fetcher = fetcher or FeedFetcher(
            base_url=self.config.BASE_URL or None,
            encoding=self.config.CSV_ENCODING,
            timeout=self.config.FETCH_TIMEOUT,
        )
        self.on_state_change = on_state_change
        self.state = PipelineState.loading()

        logger.info("DashboardPipeline initialized:")
        for label, source in self.config.feeds():
            logger.info(f"  {label}: {source}")

    def run(self) -> DashboardData:
        """
        Execute the pipeline from fetch to composite result.

        Returns:
            DashboardData: Aggregated monthly and severity data

        Raises:
            PipelineError: If either feed cannot be fetched or decoded
        """
        with monitor_performance("Dashboard pipeline") as monitor:
            logger.info("Fetching CSV files...")
            feed_a, feed_b = self.fetcher.fetch_all([source for _, source in self.config.feeds()])

            logger.info("Parsing CSV data...")
            records_a = self._parse(feed_a.text)
            records_b = self._parse(feed_b.text)
            monitor.update_progress(len(records_a) + len(records_b))

            data = self.aggregate(records_a, records_b)

        logger.info("Data loaded successfully")
        return data

    def aggregate(self, records_a: List[IncidentRecord], records_b: List[IncidentRecord]) -> DashboardData:
        """
        Aggregate already-parsed feeds into the composite result.

        Args:
            records_a (list[dict]): Records of feed A
            records_b (list[dict]): Records of feed B

        Returns:
            DashboardData: Composite result
        """
        logger.info("Processing monthly data...")
        monthly = MonthlyAggregator(date_field=self.config.DATE_FIELD)
        monthly.process_chunk(records_a)
        monthly.process_chunk(records_b)
        buckets = monthly.finalize_aggregations()

        logger.info("Processing injury data...")
        category_a, total_a = self._aggregate_feed(records_a, self.config.FEED_A_LABEL)
        category_b, total_b = self._aggregate_feed(records_b, self.config.FEED_B_LABEL)

        return DashboardData(
            monthly=tuple(buckets),
            category_a=tuple(category_a),
            category_b=tuple(category_b),
            total_a=total_a,
            total_b=total_b,
            label_a=self.config.FEED_A_LABEL,
            label_b=self.config.FEED_B_LABEL,
        )

    def load(self) -> PipelineState:
        """
        Run the pipeline and report the outcome as a view state.

        Returns:
            PipelineState: ``ready`` with the data, or ``error`` with a message
        """
        self._set_state(PipelineState.loading())
        try:
            data = self.run()
        except PipelineError as e:
            logger.error(f"Error loading data: {e}", exc_info=True)
            self._set_state(PipelineState.failed(str(e)))
        except Exception as e:
            logger.error(f"Unexpected error loading data: {e}", exc_info=True)
            self._set_state(PipelineState.failed(f"Unexpected error: {e}"))
        else:
            self._set_state(PipelineState.ready(data))
        return self.state

    def _parse(self, text: str) -> List[IncidentRecord]:
        return CSVParser(encoding=self.config.CSV_ENCODING).parse(text)

    def _aggregate_feed(self, records: List[IncidentRecord], label: str):
        aggregator = CategoryAggregator(
            category_field=self.config.SEVERITY_FIELD,
            excluded_values=self.config.EXCLUDED_SEVERITIES,
            name=label,
        )
        aggregator.process_chunk(records)
        return aggregator.finalize_aggregations()

    def _set_state(self, state: PipelineState) -> None:
        self.state = state
        logger.debug(f"Pipeline state: {state.status}")
        if self.on_state_change is not None:
            self.on_state_change(state)
