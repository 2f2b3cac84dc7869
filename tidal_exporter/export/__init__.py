"""
Export module for tidal-exporter.

    - writer: Checkpointed JSON export (ExportWriter, get_output_path)
    - exporter: Run orchestration (PlaylistExporter)

Usage:
    from tidal_exporter.export import PlaylistExporter

    result = PlaylistExporter(client, config).export(playlist_id)
    print(result.path)
"""

from tidal_exporter.export.exporter import ExportResult, PlaylistExporter
from tidal_exporter.export.writer import ExportWriter, get_output_path

__all__ = [
    "ExportWriter",
    "get_output_path",
    "PlaylistExporter",
    "ExportResult",
]
