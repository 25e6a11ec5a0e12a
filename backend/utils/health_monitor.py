"""
Health Monitoring Module
========================

Process and host resource snapshot for the /api/health endpoint. Cheap by
design of its callers: no database or engine calls happen here.
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional

import psutil

logger = logging.getLogger(__name__)


class HealthMonitor:
    """Tracks uptime and reports memory, CPU and disk headroom."""

    def __init__(
        self,
        memory_threshold_mb: float = 1024.0,
        disk_free_threshold_mb: float = 512.0,
        data_dir: Optional[str] = None,
    ):
        self.start_time = time.time()
        self.memory_threshold_mb = memory_threshold_mb
        self.disk_free_threshold_mb = disk_free_threshold_mb
        self.data_dir = data_dir or os.path.join(os.path.dirname(__file__), "..", "data")

    def check_system_health(self) -> Dict[str, Any]:
        recommendations: List[str] = []
        try:
            process = psutil.Process(os.getpid())
            memory_mb = process.memory_info().rss / 1024 / 1024
            cpu_percent = process.cpu_percent()
            disk_free_mb = self._disk_free_mb()
        except (psutil.Error, OSError) as e:
            logger.error(f"❌ Health check failed: {e}")
            return {
                "overall_status": "error",
                "error": str(e),
                "recommendations": ["Restart the application"],
            }

        status = "healthy"
        if memory_mb > self.memory_threshold_mb:
            status = "warning"
            recommendations.append("Memory usage above threshold")
        if disk_free_mb is not None and disk_free_mb < self.disk_free_threshold_mb:
            status = "warning"
            recommendations.append("Low disk space for the catalog database")

        return {
            "memory_usage_mb": round(memory_mb, 1),
            "cpu_percent": round(cpu_percent, 1),
            "uptime_seconds": round(time.time() - self.start_time, 1),
            "disk_free_mb": round(disk_free_mb, 1) if disk_free_mb is not None else None,
            "overall_status": status,
            "recommendations": recommendations,
        }

    def _disk_free_mb(self) -> Optional[float]:
        path = os.path.abspath(self.data_dir)
        # walk up to the nearest existing directory
        while not os.path.exists(path):
            parent = os.path.dirname(path)
            if parent == path:
                return None
            path = parent
        return psutil.disk_usage(path).free / 1024 / 1024


_health_monitor: Optional[HealthMonitor] = None


def get_health_monitor() -> HealthMonitor:
    """Get the global health monitor instance."""
    global _health_monitor
    if _health_monitor is None:
        _health_monitor = HealthMonitor()
    return _health_monitor


def check_health() -> Dict[str, Any]:
    return get_health_monitor().check_system_health()
