"""
Core module for tidal-exporter.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs
    - progress: tqdm progress bar for the export loop

Usage:
    from tidal_exporter.core import (
        Config, load_config,
        setup_logging, get_logger,
        TidalExporterError, ConfigError, TidalError
    )
"""

from tidal_exporter.core.config import (
    Config,
    ExportConfig,
    NetworkConfig,
    TidalConfig,
    load_config,
)
from tidal_exporter.core.exceptions import (
    ConfigError,
    ExportError,
    RateLimitTimeoutError,
    TidalAuthError,
    TidalError,
    TidalExporterError,
    TidalHTTPError,
)
from tidal_exporter.core.logger import (
    get_logger,
    log_track_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "TidalConfig",
    "ExportConfig",
    "NetworkConfig",
    "load_config",
    # Exceptions
    "TidalExporterError",
    "ConfigError",
    "TidalError",
    "TidalAuthError",
    "TidalHTTPError",
    "RateLimitTimeoutError",
    "ExportError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_track_failure",
    "shutdown_logging",
]
