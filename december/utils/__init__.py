"""
Utilities Module
================

Common utilities shared across the application:
- logger: Leveled logging with component context
- config: Centralized configuration management
"""

from december.utils.logger import Logger, logger
from december.utils.config import get_config, Config

__all__ = ["Logger", "logger", "get_config", "Config"]
