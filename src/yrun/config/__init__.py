"""
Configuration Module

Modules:
- logging.py: structlog configuration
- settings.py: Settings singleton and RunnerConfig
"""

from .logging import configure_logging, get_logger
from .settings import RunnerConfig, Settings, get_settings

__all__ = [
    "RunnerConfig",
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
