"""
Pydantic Settings Configuration
=================================

Type-safe configuration management using Pydantic.
Validates all configuration values at startup and fails fast with clear error messages.
"""

from typing import Optional
from pathlib import Path
from importlib import metadata
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings
import yaml


def _project_version() -> str:
    """Resolve the project version from package metadata."""
    try:
        return metadata.version("regulated-assets")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


PUBLIC_NETWORK_PASSPHRASE = "Public Global Stellar Network ; September 2015"
TESTNET_NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"
FUTURENET_NETWORK_PASSPHRASE = "Test SDF Future Network ; October 2022"

DEFAULT_HORIZON_URLS = {
    PUBLIC_NETWORK_PASSPHRASE: "https://horizon.stellar.org",
    TESTNET_NETWORK_PASSPHRASE: "https://horizon-testnet.stellar.org",
    FUTURENET_NETWORK_PASSPHRASE: "https://horizon-futurenet.stellar.org",
}


class NetworkConfig(BaseModel):
    """Stellar network and HTTP transport configuration"""
    horizon_url: Optional[str] = Field(None, description="Horizon URL (overrides stellar.toml HORIZON_URL)")
    network_passphrase: Optional[str] = Field(None, description="Network passphrase (overrides stellar.toml)")
    timeout_seconds: float = Field(30.0, gt=0, le=600, description="HTTP request timeout in seconds")
    user_agent: str = Field("regulated-assets", description="User-Agent header sent with every request")

    @field_validator('horizon_url')
    @classmethod
    def validate_horizon_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("horizon_url must be an http(s) URL")
        return v.rstrip("/")

    model_config = ConfigDict(extra='allow')


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = Field("WARNING", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field("json", description="Log format (json, text)")

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @field_validator('format')
    @classmethod
    def validate_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {'json', 'text'}:
            raise ValueError("Log format must be 'json' or 'text'")
        return v_lower

    model_config = ConfigDict(extra='allow')


class Settings(BaseSettings):
    """
    Main client settings with type validation.

    Configuration is loaded from:
    1. YAML config file (if provided)
    2. Environment variables with REGULATED_ASSETS_ prefix (override)
    3. Default values (fallback)

    Environment variable mapping uses double-underscore nesting:
      REGULATED_ASSETS_NETWORK__HORIZON_URL
      REGULATED_ASSETS_NETWORK__TIMEOUT_SECONDS
      REGULATED_ASSETS_LOGGING__LEVEL
    """

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    version: str = Field(default_factory=_project_version, description="Project version")

    model_config = ConfigDict(
        env_prefix='REGULATED_ASSETS_',
        env_nested_delimiter='__',
        extra='allow',
        validate_assignment=True,
    )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "Settings":
        """
        Load settings from a YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Settings instance with validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables only."""
        return cls()

    def http_headers(self) -> dict[str, str]:
        """Default headers for outbound requests."""
        return {"User-Agent": f"{self.network.user_agent}/{self.version}"}


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """
    Load and validate client settings.

    Args:
        config_path: Optional path to YAML config file

    Returns:
        Validated Settings instance
    """
    if config_path:
        return Settings.from_yaml(config_path)
    return Settings.from_env()


__all__ = [
    'DEFAULT_HORIZON_URLS',
    'FUTURENET_NETWORK_PASSPHRASE',
    'LoggingConfig',
    'NetworkConfig',
    'PUBLIC_NETWORK_PASSPHRASE',
    'Settings',
    'TESTNET_NETWORK_PASSPHRASE',
    'load_settings',
]
