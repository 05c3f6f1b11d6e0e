"""
Utilities Module
================

Common utilities shared across the application:
- logger: Context logging with levels
- config: Environment configuration
"""

from aicr.utils.logger import Logger, logger
from aicr.utils.config import get_config, Config

__all__ = ["Logger", "logger", "get_config", "Config"]
