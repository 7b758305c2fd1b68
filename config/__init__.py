"""
Configuration module for the Public Health Gateway.

This module provides access to configuration settings loaded from TOML files.
Primary configuration file: config/gateway.toml

Usage:
    from config import get_gateway_config

    config = get_gateway_config()
    print(config.api.base_url)
    print(config.api.timeout_seconds)
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


ENV_API_BASE_URL = "GATEWAY_API_BASE_URL"
ENV_API_TIMEOUT = "GATEWAY_API_TIMEOUT"
ENV_LOG_LEVEL = "GATEWAY_LOG_LEVEL"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ApiConfig:
    """REST backend settings."""
    base_url: str = "http://localhost:5000"
    timeout_seconds: float = 10.0


@dataclass
class ServerConfig:
    """Dash development server settings."""
    host: str = "127.0.0.1"
    port: int = 8050
    debug: bool = False


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file_logging: bool = False
    log_dir: str = "logs"


@dataclass
class GatewayConfig:
    """Complete application configuration."""
    api: ApiConfig = field(default_factory=ApiConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # Environment overrides that could not be applied
    override_errors: list = field(default_factory=list)

    def validate(self) -> list[str]:
        """
        Validate the configuration.

        Returns:
            List of error messages (empty if valid).
        """
        errors = list(self.override_errors)

        if not self.api.base_url:
            errors.append("API base URL is not configured (api.base_url)")
        elif not self.api.base_url.startswith(("http://", "https://")):
            errors.append(f"API base URL must start with http:// or https://: {self.api.base_url}")

        if self.api.timeout_seconds <= 0:
            errors.append("API timeout must be positive (api.timeout_seconds)")

        if not 0 < self.server.port < 65536:
            errors.append(f"Invalid server port: {self.server.port}")

        if self.logging.level.upper() not in _VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.logging.level}")

        return errors


def _apply_env_overrides(config: GatewayConfig) -> GatewayConfig:
    """Override file settings with GATEWAY_* environment variables."""
    base_url = os.environ.get(ENV_API_BASE_URL)
    if base_url:
        config.api.base_url = base_url.rstrip("/")

    timeout = os.environ.get(ENV_API_TIMEOUT)
    if timeout:
        try:
            config.api.timeout_seconds = float(timeout)
        except ValueError:
            config.override_errors.append(
                f"{ENV_API_TIMEOUT} must be a number of seconds: {timeout!r}"
            )

    level = os.environ.get(ENV_LOG_LEVEL)
    if level:
        config.logging.level = level

    return config


def load_gateway_config(config_path: Optional[Path] = None) -> GatewayConfig:
    """
    Load gateway configuration from TOML file.

    Args:
        config_path: Path to the TOML config file. Defaults to config/gateway.toml
                     relative to the project root.

    Returns:
        GatewayConfig dataclass with all settings, environment overrides applied.

    Raises:
        tomllib.TOMLDecodeError: If the TOML is invalid.
    """
    if config_path is None:
        config_path = Path(__file__).parent / "gateway.toml"

    if not config_path.exists():
        # Defaults when no file is present
        return _apply_env_overrides(GatewayConfig())

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    api_data = data.get("api", {})
    api = ApiConfig(
        base_url=api_data.get("base_url", "http://localhost:5000").rstrip("/"),
        timeout_seconds=float(api_data.get("timeout_seconds", 10.0)),
    )

    server_data = data.get("server", {})
    server = ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=server_data.get("port", 8050),
        debug=server_data.get("debug", False),
    )

    logging_data = data.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        file_logging=logging_data.get("file_logging", False),
        log_dir=logging_data.get("log_dir", "logs"),
    )

    return _apply_env_overrides(
        GatewayConfig(api=api, server=server, logging=logging_config)
    )


# Module-level cached config (loaded on first access)
_cached_config: Optional[GatewayConfig] = None


def get_gateway_config() -> GatewayConfig:
    """
    Get the gateway configuration (cached after first load).

    Returns:
        GatewayConfig dataclass with all settings.
    """
    global _cached_config
    if _cached_config is None:
        _cached_config = load_gateway_config()
    return _cached_config


def reload_gateway_config() -> GatewayConfig:
    """
    Reload the gateway configuration from disk.

    Returns:
        GatewayConfig dataclass with all settings.
    """
    global _cached_config
    _cached_config = load_gateway_config()
    return _cached_config


# Export public API
__all__ = [
    "GatewayConfig",
    "ApiConfig",
    "ServerConfig",
    "LoggingConfig",
    "load_gateway_config",
    "get_gateway_config",
    "reload_gateway_config",
]
