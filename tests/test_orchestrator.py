# ========================
# tests/test_orchestrator.py
# ========================

import unittest
import tempfile
import os
import sys
from unittest import mock

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crash_dashboard.pipeline.exceptions import FetchError
from crash_dashboard.pipeline.fetching import FeedFetcher
from crash_dashboard.pipeline.models import CategoryCount, PipelineState
from crash_dashboard.pipeline.orchestrator import DashboardPipeline
from crash_dashboard.utils.config import Config
from crash_dashboard.utils.data_generator import IncidentDataGenerator

ADAS_CSV = """Report ID,Make,Incident Date,City,Highest Injury Severity Alleged
A-1,Tesla,2023-01-15,"Austin, TX",Minor
A-2,Tesla,2023-01-20,Phoenix,Minor
A-3,Honda,2023-02-01,Phoenix,Unknown
A-4,Subaru,,Houston,Serious
"""

ADS_CSV = """Report ID,Make,Incident Date,City,Highest Injury Severity Alleged
B-1,Waymo,JAN-2023,San Francisco,No Injuries Reported
B-2,Cruise,2022-12-30,San Francisco,
B-3,Zoox,N/A,Las Vegas,Moderate
"""

def fake_response(body, status_code=200, reason="OK"):
    response = mock.Mock()
    response.content = body.encode('utf-8')
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 300
    return response

class TestDashboardPipeline(unittest.TestCase):
    """Test the pipeline end to end with a simulated file server."""

    def setUp(self):
        self.config = Config({
            'base_url': 'http://localhost:5173',
            'feed_a_source': '/SGO202101_Incident_Reports_ADAS.csv',
            'feed_b_source': '/SGO202101_Incident_Reports_ADS.csv',
        })
        self.responses = {
            'http://localhost:5173/SGO202101_Incident_Reports_ADAS.csv': fake_response(ADAS_CSV),
            'http://localhost:5173/SGO202101_Incident_Reports_ADS.csv': fake_response(ADS_CSV),
        }
        self.session = mock.Mock()
        self.session.get.side_effect = lambda url, timeout=None: self.responses[url]
        self.fetcher = FeedFetcher(base_url=self.config.BASE_URL, session=self.session)

    def _pipeline(self, **kwargs):
        return DashboardPipeline(config=self.config, fetcher=self.fetcher, **kwargs)

    def test_run_builds_composite_result(self):
        data = self._pipeline().run()

        self.assertEqual(
            [(b.sort_key, b.display_label, b.axis_label, b.count) for b in data.monthly],
            [
                ('2022-12', 'Dec 2022', '12-2022', 1),
                ('2023-01', 'Jan 2023', '01-2023', 3),
                ('2023-02', 'Feb 2023', '02-2023', 1),
            ]
        )
        self.assertEqual(list(data.category_a), [
            CategoryCount('Minor', 2),
            CategoryCount('Serious', 1),
        ])
        self.assertEqual(data.total_a, 3)
        self.assertEqual(list(data.category_b), [
            CategoryCount('No Injuries Reported', 1),
            CategoryCount('Moderate', 1),
        ])
        self.assertEqual(data.total_b, 2)
        self.assertEqual((data.label_a, data.label_b), ('ADAS', 'ADS'))

    def test_totals_match_category_sums(self):
        data = self._pipeline().run()

        self.assertEqual(data.total_a, sum(item.value for item in data.category_a))
        self.assertEqual(data.total_b, sum(item.value for item in data.category_b))

    def test_load_reports_loading_then_ready(self):
        states = []
        pipeline = self._pipeline(on_state_change=states.append)

        self.assertTrue(pipeline.state.is_loading)
        state = pipeline.load()

        self.assertEqual([s.status for s in states], [PipelineState.LOADING, PipelineState.READY])
        self.assertTrue(state.is_ready)
        self.assertIsNone(state.error)
        self.assertEqual(state.data.total_a, 3)

    def test_http_404_gives_error_state(self):
        self.responses['http://localhost:5173/SGO202101_Incident_Reports_ADS.csv'] = fake_response(
            "Not Found", status_code=404, reason="Not Found"
        )
        pipeline = self._pipeline()

        with mock.patch('crash_dashboard.pipeline.orchestrator.MonthlyAggregator') as monthly, \
                mock.patch('crash_dashboard.pipeline.orchestrator.CategoryAggregator') as category:
            state = pipeline.load()

        self.assertTrue(state.is_error)
        self.assertIsNone(state.data)
        self.assertIn("404", state.error)
        monthly.assert_not_called()
        category.assert_not_called()

    def test_unknown_encoding_gives_error_state(self):
        self.config.CSV_ENCODING = 'no-such-codec'
        states = []
        pipeline = DashboardPipeline(config=self.config, on_state_change=states.append,
                                     fetcher=FeedFetcher(base_url=self.config.BASE_URL,
                                                         encoding=self.config.CSV_ENCODING,
                                                         session=self.session))

        state = pipeline.load()

        self.assertTrue(state.is_error)
        self.assertIn("no-such-codec", state.error)
        self.assertEqual([s.status for s in states], [PipelineState.LOADING, PipelineState.ERROR])

    def test_unexpected_failure_gives_error_state(self):
        pipeline = self._pipeline()

        with mock.patch.object(pipeline, 'run', side_effect=RuntimeError("boom")):
            state = pipeline.load()

        self.assertTrue(state.is_error)
        self.assertIn("boom", state.error)

    def test_run_propagates_fetch_error(self):
        self.session.get.side_effect = None
        self.session.get.return_value = fake_response("", status_code=503, reason="Service Unavailable")

        with self.assertRaises(FetchError):
            self._pipeline().run()

    def test_excluded_severities_from_config(self):
        self.config.EXCLUDED_SEVERITIES = ['Unknown', 'No Injuries Reported']

        data = self._pipeline().run()

        self.assertEqual(list(data.category_b), [CategoryCount('Moderate', 1)])
        self.assertEqual(data.total_b, 1)

    def test_rerun_is_idempotent(self):
        first = self._pipeline().run()
        second = self._pipeline().run()

        self.assertEqual(first.monthly, second.monthly)
        self.assertEqual((first.total_a, first.total_b), (second.total_a, second.total_b))

class TestGeneratedFeeds(unittest.TestCase):
    """Run the pipeline over generated local feeds and compare with the generator's tally."""

    def test_generated_feeds_aggregate_to_expected_counts(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            generator = IncidentDataGenerator(seed=7)
            stats = generator.generate_feeds(tmp_dir, num_rows=300, error_rate=0.3)
            config = Config({
                'base_url': '',
                'feed_a_source': os.path.join(tmp_dir, 'SGO202101_Incident_Reports_ADAS.csv'),
                'feed_b_source': os.path.join(tmp_dir, 'SGO202101_Incident_Reports_ADS.csv'),
            })

            data = DashboardPipeline(config=config).run()

        expected_monthly = {}
        for feed_stats in stats.values():
            for key, count in feed_stats['monthly_counts'].items():
                expected_monthly[key] = expected_monthly.get(key, 0) + count

        self.assertEqual({b.sort_key: b.count for b in data.monthly}, expected_monthly)
        self.assertEqual(
            sum(b.count for b in data.monthly),
            stats['ADAS']['dated_rows'] + stats['ADS']['dated_rows']
        )
        self.assertEqual({c.name: c.value for c in data.category_a}, stats['ADAS']['severity_counts'])
        self.assertEqual({c.name: c.value for c in data.category_b}, stats['ADS']['severity_counts'])
        self.assertNotIn('Unknown', {c.name for c in data.category_a + data.category_b})

if __name__ == '__main__':
    unittest.main()
