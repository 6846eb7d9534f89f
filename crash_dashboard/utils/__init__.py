# ========================
# crash_dashboard/utils/__init__.py
# ========================

"""
Utilities Package

Common utilities and helper functions for the dashboard pipeline.
"""

from .config import Config
from .performance_monitor import monitor_performance, PerformanceMonitor
from .logging_setup import setup_logging, setup_logging_from_config
from .data_generator import IncidentDataGenerator

__all__ = [
    'Config',
    'monitor_performance',
    'PerformanceMonitor',
    'setup_logging',
    'setup_logging_from_config',
    'IncidentDataGenerator'
]
