"""
Configuration package for abbrex

Provides application settings via environment variables using pydantic-settings,
the default option tables, and per-expansion config resolution.
"""

from .settings import appsettings, AppSettings
from .resolve import Config, SnippetCache, resolve_config

__all__ = ["appsettings", "AppSettings", "Config", "SnippetCache", "resolve_config"]
