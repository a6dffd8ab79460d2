"""Configuration module for the Sumo Logic connector."""
from .settings import REGION_BASE_URLS, ConfigurationError, ConnectorConfig, load_settings

__all__ = ["REGION_BASE_URLS", "ConfigurationError", "ConnectorConfig", "load_settings"]
