"""
Export orchestration for tidal-exporter.

One linear run per invocation:

    authenticate -> playlist metadata -> walk items -> enrich each track
    (checkpointing every N) -> result

Nothing is written to disk until the reference list is complete, so a
failure while mapping the playlist leaves no partial output behind.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from tidal_exporter.core.config import Config
from tidal_exporter.core.logger import get_logger
from tidal_exporter.core.progress import ExportProgressBar
from tidal_exporter.export.writer import ExportWriter, get_output_path
from tidal_exporter.tidal.client import TidalClient
from tidal_exporter.tidal.fetcher import TidalFetcher
from tidal_exporter.tidal.models import (
    STATUS_ERROR,
    STATUS_UNAVAILABLE,
    ExportedTrack,
    Playlist,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """
    Summary of a finished export.

    Attributes:
        path: The JSON file written.
        playlist: Playlist metadata.
        tracks: All records, in playlist order.
    """
    path: Path
    playlist: Playlist
    tracks: tuple[ExportedTrack, ...]

    @property
    def total(self) -> int:
        return len(self.tracks)

    @property
    def unavailable(self) -> int:
        return sum(1 for t in self.tracks if t.status == STATUS_UNAVAILABLE)

    @property
    def failed(self) -> int:
        return sum(1 for t in self.tracks if t.status == STATUS_ERROR)

    @property
    def exported(self) -> int:
        return self.total - self.unavailable - self.failed


class PlaylistExporter:
    """
    Runs a complete playlist export.

    Example:
        client = TidalClient(config.tidal.client_id, config.tidal.client_secret, config.network)
        result = PlaylistExporter(client, config).export(playlist_id)
    """

    def __init__(
        self,
        client: TidalClient,
        config: Config,
        sleep: Callable[[float], None] = time.sleep,
        show_progress: bool | None = True,
    ) -> None:
        """
        Args:
            client: TidalClient, authenticated here if it has no token yet.
            config: Application configuration.
            sleep: Wait function for the courtesy delays.
            show_progress: False hides the progress bar, None hides it on non-TTY.
        """
        self.client = client
        self.config = config
        self.show_progress = show_progress
        self.fetcher = TidalFetcher(
            client,
            country_code=config.tidal.country_code,
            base_delay=config.network.base_delay,
            sleep=sleep,
        )

    def export(self, playlist_id: str) -> ExportResult:
        """
        Export a playlist to JSON.

        Raises:
            TidalAuthError: Token exchange failed.
            TidalError: Playlist not found, or a page request failed.
            ExportError: The export file could not be written.
        """
        if self.client.access_token is None:
            logger.info("Authenticating...")
            self.client.authenticate()

        playlist = self.fetcher.fetch_playlist(playlist_id)
        output_path = get_output_path(self.config.export.directory, playlist.name)

        refs = self.fetcher.walk_playlist_items(playlist_id)
        total = len(refs)

        writer = ExportWriter(output_path, playlist.name, self.config.export.checkpoint_interval)
        tracks: list[ExportedTrack] = []

        if total == 0:
            logger.warning("Playlist has no items")
            writer.write(tracks)
        else:
            disable = None if self.show_progress is None else not self.show_progress
            with ExportProgressBar(total=total, disable=disable) as progress:
                for index, track in enumerate(self.fetcher.enrich_tracks(refs)):
                    tracks.append(track)
                    progress.update(track)
                    writer.checkpoint(index, total, tracks)

        return ExportResult(path=output_path, playlist=playlist, tracks=tuple(tracks))
