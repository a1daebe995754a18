"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from db_compare.config import load_db_config, DatabaseProfile, DatabaseConfig
"""

from db_compare.config.loader import load_db_config
from db_compare.config.models import CompareSettings, DatabaseConfig, DatabaseProfile

__all__ = ["load_db_config", "CompareSettings", "DatabaseConfig", "DatabaseProfile"]
