"""Configuration module for TickerPulse.

Centralized configuration management using pydantic-settings.
"""

from config.settings import FailurePolicy, GlobalConfig, get_config

__all__ = ["FailurePolicy", "GlobalConfig", "get_config"]
