# ========================
# crash_dashboard/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Tracks wall time, throughput and memory of a pipeline run.
"""

import os
import time
import logging
from contextlib import contextmanager
from typing import Dict, Any

import psutil

logger = logging.getLogger(__name__)

class PerformanceMonitor:
    """
    Performance monitoring utility for the dashboard pipeline.
    Tracks memory usage, processing time, and throughput.
    """

    def __init__(self, name: str = "Pipeline"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.records_processed = 0

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.time()
        self.peak_memory_mb = self._get_memory_usage_mb()
        logger.debug(f"{self.name} - monitoring started, memory: {self.peak_memory_mb:.2f} MB")

    def update_progress(self, records: int) -> None:
        """
        Record processed rows and sample memory.

        Args:
            records (int): Number of records processed since the last update
        """
        self.records_processed += records
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.time()
        total_time = self.end_time - self.start_time if self.start_time else 0
        throughput = self.records_processed / total_time if total_time > 0 else 0
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'records_processed': self.records_processed,
            'average_throughput_records_per_second': throughput,
            'peak_memory_usage_mb': self.peak_memory_mb,
        }

        logger.info(
            f"{self.name} - {total_time:.2f}s, {self.records_processed:,} records, "
            f"{throughput:.0f} records/sec, peak memory {self.peak_memory_mb:.2f} MB"
        )
        return summary

    def _get_memory_usage_mb(self) -> float:
        """Get current memory usage in MB."""
        try:
            process = psutil.Process(os.getpid())
            return process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            logger.debug(f"Could not get memory usage: {e}")
            return self.peak_memory_mb

@contextmanager
def monitor_performance(name: str = "Pipeline"):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
