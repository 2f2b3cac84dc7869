"""
Progress bar for the track enrichment loop.

Usage:
    from tidal_exporter.core.progress import ExportProgressBar

    with ExportProgressBar(total=len(refs)) as progress:
        for track in enricher:
            progress.update(track)
"""

from tqdm import tqdm

from tidal_exporter.tidal.models import ExportedTrack


class ExportProgressBar:
    """
    tqdm progress bar with ok / unavailable / error counters.

    Example:
        Exporting:  64%|██████████████████▌          | 32/50 [00:21<00:12] ok=30 unavailable=1 error=1
    """

    BAR_FORMAT = "{desc}: {percentage:3.0f}%|{bar:30}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]{postfix}"

    def __init__(self, total: int, description: str = "Exporting", disable: bool | None = False) -> None:
        """
        Args:
            total: Number of track references to process.
            description: Label shown on the left of the bar.
            disable: Passed to tqdm; None disables the bar on non-TTY output.
        """
        self.total = total
        self.description = description
        self.disable = disable
        self.ok = 0
        self.unavailable = 0
        self.failed = 0
        self._bar: tqdm | None = None

    def __enter__(self) -> "ExportProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        if self._bar is None:
            self._bar = tqdm(
                total=self.total,
                desc=self.description,
                unit="track",
                bar_format=self.BAR_FORMAT,
                disable=self.disable,
            )

    def stop(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def update(self, track: ExportedTrack) -> None:
        """Count one processed track by its status."""
        if track.status is None:
            self.ok += 1
        elif track.status == "unavailable":
            self.unavailable += 1
        else:
            self.failed += 1

        if self._bar is not None:
            self._bar.set_postfix_str(
                f"ok={self.ok} unavailable={self.unavailable} error={self.failed}",
                refresh=False,
            )
            self._bar.update(1)
