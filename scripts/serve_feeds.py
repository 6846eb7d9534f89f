#!/usr/bin/env python3
# ========================
# scripts/serve_feeds.py
# ========================

"""
Serve the incident feeds for the dashboard.

Generates the sample ADAS/ADS files into DATA_DIR when they are missing,
then starts the static feed server.

Usage: python scripts/serve_feeds.py [num_rows]
"""

import sys
import os
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crash_dashboard.server import start_server
from crash_dashboard.utils import Config, IncidentDataGenerator, setup_logging_from_config

def main():
    """Generate missing feeds and serve them."""
    if len(sys.argv) > 1:
        try:
            num_rows = int(sys.argv[1])
        except ValueError:
            print("Usage: python serve_feeds.py [num_rows]")
            print("Example: python serve_feeds.py 2000")
            sys.exit(1)
    else:
        num_rows = None

    config = Config()
    setup_logging_from_config(config)

    data_dir = Path(config.DATA_DIR)
    file_names = {
        'ADAS': 'SGO202101_Incident_Reports_ADAS.csv',
        'ADS': 'SGO202101_Incident_Reports_ADS.csv',
    }
    if num_rows is not None or not all((data_dir / name).exists() for name in file_names.values()):
        generator = IncidentDataGenerator(seed=42)
        generator.generate_feeds(str(data_dir), num_rows or config.DEFAULT_SAMPLE_ROWS, file_names)

    print(f"Serving {data_dir} on http://{config.SERVER_HOST}:{config.SERVER_PORT}/")
    print(f"Point the pipeline at it with BASE_URL=http://localhost:{config.SERVER_PORT} "
          f"FEED_A_SOURCE=/{file_names['ADAS']} FEED_B_SOURCE=/{file_names['ADS']}")
    start_server(config=config)

if __name__ == "__main__":
    main()
