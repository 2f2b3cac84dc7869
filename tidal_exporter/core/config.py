"""
Configuration management for tidal-exporter.

This module handles loading, validating, and providing access to the
application configuration. Values come from three places, in increasing
order of precedence:

    1. Built-in defaults
    2. config.yaml (current working directory, or an explicit path)
    3. Environment variables (CLIENT_ID, CLIENT_SECRET), including a .env file

Only the credentials are required. config.yaml is optional.

Example config.yaml:
    tidal:
      client_id: "your_client_id_here"
      client_secret: "your_client_secret_here"
      country_code: "US"

    export:
      directory: "~/Music/Playlist"
      checkpoint_interval: 5

    network:
      base_delay: 0.5
      max_retries: 5
      default_retry_after: 5
      rate_limit_wait_ratio: 0.3333
      request_timeout: null
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from tidal_exporter.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Environment variables holding the credentials
ENV_CLIENT_ID = "CLIENT_ID"
ENV_CLIENT_SECRET = "CLIENT_SECRET"

DEFAULT_COUNTRY_CODE = "US"
DEFAULT_EXPORT_DIRECTORY = "~/Music/Playlist"
DEFAULT_CHECKPOINT_INTERVAL = 5
DEFAULT_BASE_DELAY = 0.5
DEFAULT_MAX_RETRIES = 5
DEFAULT_RETRY_AFTER = 5.0
DEFAULT_RATE_LIMIT_WAIT_RATIO = 1 / 3


@dataclass(frozen=True)
class TidalConfig:
    """
    TIDAL API credentials and catalog settings.

    Credentials are obtained from the TIDAL Developer Portal.

    Attributes:
        client_id: The TIDAL application client ID.
        client_secret: The TIDAL application client secret.
        country_code: Catalog country passed as countryCode on every request.
    """
    client_id: str
    client_secret: str
    country_code: str = DEFAULT_COUNTRY_CODE


@dataclass(frozen=True)
class ExportConfig:
    """
    Export output configuration.

    Attributes:
        directory: Base directory; each playlist gets its own subdirectory.
        checkpoint_interval: Write the JSON document every N processed tracks.
    """
    directory: Path
    checkpoint_interval: int = DEFAULT_CHECKPOINT_INTERVAL


@dataclass(frozen=True)
class NetworkConfig:
    """
    Request pacing and retry configuration.

    Attributes:
        base_delay: Seconds to sleep before every page and track request.
        max_retries: Total attempts for a request that keeps returning 429.
        default_retry_after: Seconds assumed when a 429 has no retry-after header.
        rate_limit_wait_ratio: Fraction of retry-after actually waited.
                               The default of one third deliberately under-waits
                               the server hint to finish large playlists faster.
        request_timeout: Optional per-request timeout in seconds. None means
                         requests are not separately bounded.
    """
    base_delay: float = DEFAULT_BASE_DELAY
    max_retries: int = DEFAULT_MAX_RETRIES
    default_retry_after: float = DEFAULT_RETRY_AFTER
    rate_limit_wait_ratio: float = DEFAULT_RATE_LIMIT_WAIT_RATIO
    request_timeout: float | None = None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Saving to: {config.export.directory}")
    """
    tidal: TidalConfig
    export: ExportConfig
    network: NetworkConfig


def load_config(config_path: Path | None = None, env_file: Path | None = None) -> Config:
    """
    Load and validate the configuration.

    Args:
        config_path: Optional explicit path to config file. If None, config.yaml
                     in the current working directory is used when present.
                     An explicit path that does not exist is an error.
        env_file: Optional .env file to load. If None, python-dotenv searches
                  for one starting from the current directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the credentials are missing, the YAML is invalid,
                     or a value has the wrong type or range.
    """
    load_dotenv(dotenv_path=env_file)

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    raw_config: dict[str, Any] = {}
    if config_path.exists():
        raw_config = _read_yaml(config_path)
    elif explicit:
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    tidal_config = _parse_tidal_config(_section(raw_config, "tidal"))
    export_config = _parse_export_config(_section(raw_config, "export"))
    network_config = _parse_network_config(_section(raw_config, "network"))

    return Config(
        tidal=tidal_config,
        export=export_config,
        network=network_config
    )


def _read_yaml(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file parses to None
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_tidal_config(tidal_section: dict[str, Any]) -> TidalConfig:
    """
    Parse the credentials, letting the environment override config.yaml.

    Raises:
        ConfigError: If client_id or client_secret is missing or empty.
    """
    client_id = os.getenv(ENV_CLIENT_ID) or tidal_section.get("client_id") or ""
    client_secret = os.getenv(ENV_CLIENT_SECRET) or tidal_section.get("client_secret") or ""

    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            f"Missing credentials: set {ENV_CLIENT_ID} in your environment or .env",
            details={"field": "tidal.client_id"}
        )

    if not isinstance(client_secret, str) or not client_secret.strip():
        raise ConfigError(
            f"Missing credentials: set {ENV_CLIENT_SECRET} in your environment or .env",
            details={"field": "tidal.client_secret"}
        )

    country_code = tidal_section.get("country_code", DEFAULT_COUNTRY_CODE)
    if not isinstance(country_code, str) or len(country_code.strip()) != 2:
        raise ConfigError(
            "'tidal.country_code' must be a two-letter country code",
            details={"field": "tidal.country_code", "value": country_code}
        )

    return TidalConfig(
        client_id=client_id.strip(),
        client_secret=client_secret.strip(),
        country_code=country_code.strip().upper()
    )


def _parse_export_config(export_section: dict[str, Any]) -> ExportConfig:
    """
    Parse the export section. Expands ~ but does NOT create the directory.
    """
    directory = export_section.get("directory", DEFAULT_EXPORT_DIRECTORY)
    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'export.directory' must be a non-empty string",
            details={"field": "export.directory"}
        )

    interval = export_section.get("checkpoint_interval", DEFAULT_CHECKPOINT_INTERVAL)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise ConfigError(
            "'export.checkpoint_interval' must be a positive integer",
            details={"field": "export.checkpoint_interval", "value": interval}
        )

    return ExportConfig(
        directory=Path(directory.strip()).expanduser().resolve(),
        checkpoint_interval=interval
    )


def _parse_network_config(network_section: dict[str, Any]) -> NetworkConfig:
    base_delay = _non_negative_number(network_section, "base_delay", DEFAULT_BASE_DELAY)
    default_retry_after = _non_negative_number(
        network_section, "default_retry_after", DEFAULT_RETRY_AFTER
    )
    ratio = _non_negative_number(
        network_section, "rate_limit_wait_ratio", DEFAULT_RATE_LIMIT_WAIT_RATIO
    )

    max_retries = network_section.get("max_retries", DEFAULT_MAX_RETRIES)
    if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 1:
        raise ConfigError(
            "'network.max_retries' must be a positive integer",
            details={"field": "network.max_retries", "value": max_retries}
        )

    timeout = network_section.get("request_timeout")
    if timeout is not None:
        timeout = _non_negative_number(network_section, "request_timeout", None)
        if timeout == 0:
            raise ConfigError(
                "'network.request_timeout' must be positive or null",
                details={"field": "network.request_timeout"}
            )

    return NetworkConfig(
        base_delay=base_delay,
        max_retries=max_retries,
        default_retry_after=default_retry_after,
        rate_limit_wait_ratio=ratio,
        request_timeout=timeout
    )


def _non_negative_number(section: dict[str, Any], key: str, default: float | None) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(
            f"'network.{key}' must be a non-negative number",
            details={"field": f"network.{key}", "value": value}
        )
    return float(value)
