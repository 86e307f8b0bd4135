"""
Utilities: validation, environment settings and logging setup.
"""

from .env_config import AppSettings, get_settings, reload_settings
from .logging_config import setup_logging
from .validators import OperationValidator

__all__ = ["AppSettings", "get_settings", "reload_settings", "setup_logging", "OperationValidator"]
