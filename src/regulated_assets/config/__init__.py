"""Client configuration."""

from regulated_assets.config.settings import LoggingConfig, NetworkConfig, Settings, load_settings

__all__ = ["LoggingConfig", "NetworkConfig", "Settings", "load_settings"]
