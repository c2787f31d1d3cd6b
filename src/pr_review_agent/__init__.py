"""
PR Review Agent

Prompt assembly and response extraction core for automated pull request reviews.
"""

__version__ = "0.1.0"

from .api import ReviewAgent
from .config import AppConfig, ConfigError, load_config

__all__ = ["ReviewAgent", "AppConfig", "ConfigError", "load_config"]
