#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Crash Analysis Dashboard Pipeline

Loads the ADAS and ADS incident feeds, aggregates them, and prints the
dashboard as text. Local feed files that do not exist yet are generated
from sample data first.
"""

import sys
import logging
from pathlib import Path

from crash_dashboard.pipeline import DashboardPipeline
from crash_dashboard.pipeline.presentation import describe_state, summary_lines
from crash_dashboard.utils import Config, setup_logging_from_config, IncidentDataGenerator

def main():
    """Main execution function."""
    config = Config()

    setup_logging_from_config(config)

    logger = logging.getLogger(__name__)
    logger.info("="*60)
    logger.info("CRASH ANALYSIS DASHBOARD PIPELINE")
    logger.info("="*60)

    logger.debug(str(config))

    invalid = [name for name, ok in config.validate_config().items() if not ok]
    if invalid:
        logger.error(f"Invalid configuration: {', '.join(invalid)}")
        return 1

    try:
        config.ensure_directories()
        _ensure_sample_feeds(config)

        pipeline = DashboardPipeline(
            config=config,
            on_state_change=_report_state
        )
        state = pipeline.load()
    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1

    if state.is_error:
        return 1

    _print_execution_summary(state.data)
    return 0

def _report_state(state) -> None:
    """Print loading and error states; the ready dashboard is printed below."""
    if not state.is_ready:
        print(describe_state(state))

def _ensure_sample_feeds(config: Config) -> None:
    """Generate sample data for local feed files that are missing."""
    if config.BASE_URL:
        return

    generator = IncidentDataGenerator(seed=42)  # Reproducible data
    for label, source in config.feeds():
        if source.lower().startswith(('http://', 'https://')) or Path(source).exists():
            continue
        logging.info(f"Generating sample {label} feed at {source}")
        generator.generate_feed(
            file_path=source,
            num_rows=config.DEFAULT_SAMPLE_ROWS,
            feed='ADS' if label.upper() == 'ADS' else 'ADAS'
        )

def _print_execution_summary(data) -> None:
    """Print the dashboard as text."""
    print("\n" + "="*70)
    for line in summary_lines(data):
        print(line)
    print("="*70)

if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
