"""Service modules"""
from .health_factor import HealthFactorService
from .monitor import HealthMonitor

__all__ = ["HealthFactorService", "HealthMonitor"]
