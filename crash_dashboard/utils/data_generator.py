# ========================
# crash_dashboard/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Generates sample incident report feeds shaped like the NHTSA Standing General
Order ADAS/ADS files, with controlled defect injection.
"""

import csv
import random
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Dict, Any, Optional

logger = logging.getLogger(__name__)

HEADER = [
    'Report ID', 'Report Version', 'Make', 'Model', 'Model Year',
    'Incident Date', 'Incident Time (24:00)', 'City', 'State',
    'Roadway Type', 'Highest Injury Severity Alleged'
]

DATE_INDEX = HEADER.index('Incident Date')
SEVERITY_INDEX = HEADER.index('Highest Injury Severity Alleged')

class IncidentDataGenerator:
    """
    Data generator for realistic incident report feeds.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"IncidentDataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize vehicle, location and severity distributions."""
        self.vehicles = {
            'ADAS': [
                ("Tesla", "Model 3"), ("Tesla", "Model Y"), ("Honda", "Accord"),
                ("Subaru", "Outback"), ("Ford", "Mustang Mach-E"), ("Toyota", "RAV4"),
            ],
            'ADS': [
                ("Waymo", "Jaguar I-Pace"), ("Cruise", "Bolt"), ("Zoox", "Robotaxi"),
                ("Transdev", "EZ10"), ("Nuro", "R2"),
            ],
        }

        self.locations = [
            ("San Francisco", "CA"), ("Phoenix", "AZ"), ("Austin, Downtown", "TX"),
            ("Los Angeles", "CA"), ("Mountain View", "CA"), ("Houston", "TX"),
        ]

        self.roadway_types = ["Intersection", "Street", "Highway / Freeway", "Parking Lot"]

        # Severity -> relative weight
        self.severities = {
            "No Injuries Reported": 0.55,
            "Minor": 0.2,
            "Moderate": 0.05,
            "Serious": 0.03,
            "Fatality": 0.02,
            "Unknown": 0.15,
        }

        self.date_formats = ["%b-%Y", "%Y-%m-%d", "%m/%d/%Y"]

    def generate_feed(self,
                      file_path: str,
                      num_rows: int,
                      feed: str = 'ADAS',
                      error_rate: float = 0.1,
                      start_date: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Generate one incident report feed with controlled defect injection.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to generate
            feed (str): 'ADAS' or 'ADS', selects the vehicle catalogue
            error_rate (float): Fraction of rows with an injected defect
            start_date (datetime): Start of the incident date range

        Returns:
            dict: Generation statistics, including the expected aggregates
        """
        logger.info(f"Generating {num_rows:,} {feed} rows with {error_rate:.1%} error rate...")

        if start_date is None:
            start_date = datetime(2021, 7, 1)

        stats = {
            'feed': feed,
            'total_rows': num_rows,
            'error_rate': error_rate,
            'dated_rows': 0,
            'monthly_counts': {},
            'severity_counts': {},
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)

            for i in range(num_rows):
                row, incident_date = self._generate_single_record(i, feed, start_date, error_rate, stats)
                writer.writerow(row)
                self._track_expected(stats, row, incident_date)

        logger.info(f"Feed generated: {file_path}")
        logger.info(f"Error breakdown: {stats['error_types']}")
        return stats

    def generate_feeds(self,
                       data_dir: str,
                       num_rows: int,
                       file_names: Optional[Dict[str, str]] = None,
                       error_rate: float = 0.1) -> Dict[str, Dict[str, Any]]:
        """Generate the ADAS and ADS feeds side by side in ``data_dir``."""
        file_names = file_names or {
            'ADAS': 'SGO202101_Incident_Reports_ADAS.csv',
            'ADS': 'SGO202101_Incident_Reports_ADS.csv',
        }
        return {
            feed: self.generate_feed(str(Path(data_dir) / name), num_rows, feed=feed, error_rate=error_rate)
            for feed, name in file_names.items()
        }

    def _generate_single_record(self,
                                index: int,
                                feed: str,
                                start_date: datetime,
                                error_rate: float,
                                stats: Dict[str, Any]):
        """Generate a single row and the incident date it encodes, if any."""
        make, model = self.random.choice(self.vehicles[feed])
        city, state = self.random.choice(self.locations)
        incident_date = start_date + timedelta(days=self.random.randint(0, 900))
        severity = self.random.choices(
            list(self.severities), weights=list(self.severities.values())
        )[0]

        row: List[Any] = [
            f"{index + 1:05d}-{self.random.randint(1000, 9999)}",
            self.random.randint(1, 3),
            make,
            model,
            self.random.randint(2018, 2023),
            incident_date.strftime(self.random.choice(self.date_formats)).upper(),
            f"{self.random.randint(0, 23):02d}:{self.random.randint(0, 59):02d}",
            city,
            state,
            self.random.choice(self.roadway_types),
            severity,
        ]

        if self.random.random() < error_rate:
            row, incident_date = self._inject_errors(row, incident_date, stats)

        return row, incident_date

    def _inject_errors(self, row: List[Any], incident_date: datetime, stats: Dict[str, Any]):
        """Inject one defect into the row."""
        error_type = self.random.choice([
            'empty_date', 'invalid_date', 'empty_severity', 'short_row'
        ])

        if error_type == 'empty_date':
            row[DATE_INDEX] = ''
            incident_date = None
        elif error_type == 'invalid_date':
            row[DATE_INDEX] = self.random.choice(['N/A', '2021-13-45', 'sometime'])
            incident_date = None
        elif error_type == 'empty_severity':
            row[SEVERITY_INDEX] = ''
        elif error_type == 'short_row':
            # Drop the trailing roadway and severity columns
            row = row[:SEVERITY_INDEX - 1]

        self._track_error_type(stats, error_type)
        return row, incident_date

    def _track_expected(self, stats: Dict[str, Any], row: List[Any], incident_date: Optional[datetime]) -> None:
        """Record what the aggregators should derive from this row."""
        if incident_date is not None:
            stats['dated_rows'] += 1
            key = incident_date.strftime("%Y-%m")
            stats['monthly_counts'][key] = stats['monthly_counts'].get(key, 0) + 1

        severity = row[SEVERITY_INDEX] if len(row) > SEVERITY_INDEX else ''
        if severity and severity != 'Unknown':
            stats['severity_counts'][severity] = stats['severity_counts'].get(severity, 0) + 1

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1
