# ========================
# crash_dashboard/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the dashboard pipeline with environment support.
"""

import codecs
import json
import os
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value not in (None, '') else None

def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]

def _is_known_encoding(name: str) -> bool:
    try:
        codecs.lookup(name)
    except (LookupError, TypeError):
        return False
    return True

class Config:
    """
    Configuration class for the dashboard pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Feed Sources (URL, server path joined to BASE_URL, or local file)
        self.BASE_URL = os.getenv('BASE_URL', '')
        self.FEED_A_SOURCE = os.getenv('FEED_A_SOURCE', 'data/raw/SGO202101_Incident_Reports_ADAS.csv')
        self.FEED_B_SOURCE = os.getenv('FEED_B_SOURCE', 'data/raw/SGO202101_Incident_Reports_ADS.csv')
        self.FEED_A_LABEL = os.getenv('FEED_A_LABEL', 'ADAS')
        self.FEED_B_LABEL = os.getenv('FEED_B_LABEL', 'ADS')

        # Fetch Settings
        self.CSV_ENCODING = os.getenv('CSV_ENCODING', 'utf-8')
        self.FETCH_TIMEOUT = _optional_float(os.getenv('FETCH_TIMEOUT'))

        # Record Schema
        self.DATE_FIELD = os.getenv('DATE_FIELD', 'Incident Date')
        self.SEVERITY_FIELD = os.getenv('SEVERITY_FIELD', 'Highest Injury Severity Alleged')
        self.EXCLUDED_SEVERITIES = _split_list(os.getenv('EXCLUDED_SEVERITIES', 'Unknown'))

        # Static Feed Server
        self.DATA_DIR = os.getenv('DATA_DIR', 'data/raw')
        self.SERVER_HOST = os.getenv('SERVER_HOST', '0.0.0.0')
        self.SERVER_PORT = int(os.getenv('SERVER_PORT', '5173'))

        # Data Generation Settings
        self.DEFAULT_SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '500'))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')
        self.LOG_FILE = os.getenv('LOG_FILE', 'crash_dashboard.log')

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def feeds(self) -> List[Tuple[str, str]]:
        """Return the (label, source) pair of each feed, in display order."""
        return [(self.FEED_A_LABEL, self.FEED_A_SOURCE), (self.FEED_B_LABEL, self.FEED_B_SOURCE)]

    def get_data_paths(self) -> Dict[str, Path]:
        """Get all configured data paths as Path objects."""
        return {
            'data_dir': Path(self.DATA_DIR),
            'logs_dir': Path(self.LOG_DIR)
        }

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        for path in self.get_data_paths().values():
            path.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['feed_sources'] = bool(self.FEED_A_SOURCE) and bool(self.FEED_B_SOURCE)
        validations['distinct_feeds'] = self.FEED_A_SOURCE != self.FEED_B_SOURCE
        validations['schema_fields'] = bool(self.DATE_FIELD) and bool(self.SEVERITY_FIELD)
        validations['base_url'] = not self.BASE_URL or self.BASE_URL.lower().startswith(('http://', 'https://'))
        validations['csv_encoding'] = _is_known_encoding(self.CSV_ENCODING)
        validations['fetch_timeout'] = self.FETCH_TIMEOUT is None or self.FETCH_TIMEOUT > 0
        validations['sample_rows'] = self.DEFAULT_SAMPLE_ROWS > 0
        validations['server_port'] = 1000 <= self.SERVER_PORT <= 65535

        # Validate log level
        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Return the settings as a dict keyed by their upper-case names."""
        return {name: value for name, value in vars(self).items() if name.isupper()}

    def save_to_file(self, file_path: str) -> None:
        """Save the settings to a JSON file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, sort_keys=True)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load settings from a JSON file; environment values fill the gaps."""
        with open(file_path, 'r', encoding='utf-8') as f:
            return cls(json.load(f))

    def __str__(self) -> str:
        lines = ["Dashboard settings:"]
        lines.extend(f"  {name}: {value}" for name, value in sorted(self.to_dict().items()))
        lines.append("Feeds:")
        lines.extend(f"  {label}: {source}" for label, source in self.feeds())
        return "\n".join(lines)
