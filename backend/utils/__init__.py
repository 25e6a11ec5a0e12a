"""
Utility modules for the catalog backend.
"""

from utils.health_monitor import HealthMonitor, check_health, get_health_monitor

__all__ = [
    'HealthMonitor',
    'get_health_monitor',
    'check_health',
]
