"""
tidal-exporter: Export TIDAL playlists to JSON.

This package exports a playlist's track listing through the TIDAL Open API:
it walks the paginated playlist items, looks up each track's title, artists,
album and ISRC, and saves the result to a JSON file that is checkpointed
while the export runs.

Modules:
    core/       - Configuration, logging, exceptions, progress bar
    tidal/      - API client, URL normalization, pagination and enrichment
    export/     - JSON export writer and run orchestration
    utils/      - URL parsing and filename helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        tidal-export
        tidal-export --url "https://tidal.com/browse/playlist/<uuid>"

    Python API:
        from tidal_exporter.core import load_config, setup_logging
        from tidal_exporter.tidal import TidalClient
        from tidal_exporter.export import PlaylistExporter

        config = load_config()
        setup_logging()
        client = TidalClient(config.tidal.client_id, config.tidal.client_secret, config.network)
        result = PlaylistExporter(client, config).export(playlist_id)

Dependencies:
    - requests: HTTP client
    - rich-click: CLI framework
    - tqdm: Progress bar
    - colorama: Console colors
    - pyyaml: Configuration file parsing
    - python-dotenv: .env credentials
"""

__version__ = "0.1.0"
__author__ = "tidal-exporter"
__license__ = "MIT"

# Convenience imports for common usage
from tidal_exporter.core import (
    Config,
    ConfigError,
    ExportError,
    TidalError,
    TidalExporterError,
    get_logger,
    load_config,
    setup_logging,
)
from tidal_exporter.export import PlaylistExporter
from tidal_exporter.tidal import ExportedTrack, TidalClient, TrackRef

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "TidalExporterError",
    "ConfigError",
    "TidalError",
    "ExportError",
    # API
    "TidalClient",
    "PlaylistExporter",
    "TrackRef",
    "ExportedTrack",
]
