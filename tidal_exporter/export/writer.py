"""
JSON export writer for tidal-exporter.

The export is a single pretty-printed JSON document:

    {
      "playlist": "Road Trip",
      "tracks": [
        {"order": 1, "title": "...", "artists": ["..."], "album": "...",
         "id": "...", "isrc": "..."},
        ...
      ]
    }

It is rewritten in full at every checkpoint (every N tracks and after the
last one), always holding the contiguous prefix of tracks processed so far.
Each write goes to a temporary file that then replaces the target, so an
interrupted run leaves the last complete checkpoint on disk.
"""

import json
import os
from pathlib import Path
from typing import Sequence

from tidal_exporter.core.config import DEFAULT_CHECKPOINT_INTERVAL
from tidal_exporter.core.exceptions import ExportError
from tidal_exporter.core.logger import get_logger
from tidal_exporter.tidal.models import ExportDocument, ExportedTrack
from tidal_exporter.utils import ensure_directory, sanitize_filename

logger = get_logger(__name__)


def get_output_path(base_dir: Path, playlist_name: str) -> Path:
    """
    Path of the export file for a playlist.

    Example:
        get_output_path(Path("~/Music/Playlist").expanduser(), "Road Trip: 2024")
        # ~/Music/Playlist/Road Trip_ 2024/Road Trip_ 2024.json
    """
    safe_name = sanitize_filename(playlist_name)
    return base_dir / safe_name / f"{safe_name}.json"


class ExportWriter:
    """
    Writes checkpoints of the export document.

    Attributes:
        path: Target JSON file.
        playlist_name: Display name stored in the document.
        interval: Checkpoint every N processed tracks.
        writes: Number of checkpoints written so far.
    """

    def __init__(
        self,
        path: Path,
        playlist_name: str,
        interval: int = DEFAULT_CHECKPOINT_INTERVAL
    ) -> None:
        if interval < 1:
            raise ValueError("interval must be a positive integer")
        self.path = path
        self.playlist_name = playlist_name
        self.interval = interval
        self.writes = 0

    def should_checkpoint(self, index: int, total: int) -> bool:
        """
        True after every interval-th track and after the last one.

        Args:
            index: 0-based index of the track just processed.
            total: Number of tracks in the playlist.
        """
        return (index + 1) % self.interval == 0 or index == total - 1

    def checkpoint(self, index: int, total: int, tracks: Sequence[ExportedTrack]) -> bool:
        """
        Write the document if a checkpoint is due.

        Returns:
            True if the file was written.
        """
        if not self.should_checkpoint(index, total):
            return False
        self.write(tracks)
        return True

    def write(self, tracks: Sequence[ExportedTrack]) -> None:
        """
        Overwrite the export file with all given tracks.

        Raises:
            ExportError: If the directory cannot be created or the file
                         cannot be written.
        """
        document = ExportDocument(playlist=self.playlist_name, tracks=tuple(tracks))
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            ensure_directory(self.path.parent)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ExportError(
                f"Failed to write export file: {e}",
                details={"file_path": str(self.path), "original_error": str(e)}
            ) from e

        self.writes += 1
        logger.debug(f"Checkpoint {self.writes}: {len(document.tracks)} track(s) -> {self.path}")
