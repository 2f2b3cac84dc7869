"""
Playlist metadata fetcher for tidal-exporter.

Workflow:
    1. Fetch playlist metadata (/playlists/<id>) for the display name
    2. Walk the paginated /playlists/<id>/relationships/items listing,
       following links.next, to collect every TrackRef in order
    3. Enrich each reference with one /tracks/<id>?include=artists,albums
       request, resolving artist and album names from the "included"
       side-loaded entities

Requests are strictly sequential, each preceded by a fixed courtesy delay
on top of any rate-limit backoff done by the client.

Error Policy:
    Errors while fetching the playlist or walking its pages propagate: the
    export cannot continue without the full reference list. Errors while
    enriching a single track are caught and turned into an "error"
    placeholder record so the run always produces one record per reference.
"""

import time
from typing import Any, Callable, Iterator

from tidal_exporter.core.config import DEFAULT_BASE_DELAY, DEFAULT_COUNTRY_CODE
from tidal_exporter.core.exceptions import TidalError
from tidal_exporter.core.logger import get_logger, log_track_failure
from tidal_exporter.tidal.client import TidalClient
from tidal_exporter.tidal.models import (
    MISSING_ISRC,
    UNKNOWN_ALBUM,
    UNKNOWN_ARTIST,
    ExportedTrack,
    Playlist,
    TrackRef,
)
from tidal_exporter.tidal.urls import normalize_tidal_url
from tidal_exporter.utils import truncate

logger = get_logger(__name__)


def build_track(order: int, ref: TrackRef, payload: dict[str, Any]) -> ExportedTrack:
    """
    Build an ExportedTrack from a /tracks/<id>?include=artists,albums response.

    Args:
        order: 1-based playlist position.
        ref: The reference the payload was fetched for.
        payload: JSON:API document with "data" (the track) and "included".

    Returns:
        The populated track record (no status).

    Raises:
        KeyError, TypeError: If the payload lacks the track attributes or
                             the artists relationship.
    """
    track = payload["data"]
    attributes = track["attributes"]
    included = payload.get("included") or []

    side_table = {(entity.get("type"), entity.get("id")): entity for entity in included}

    artists = []
    for relation in track["relationships"]["artists"]["data"]:
        entity = side_table.get(("artists", relation["id"]))
        name = (entity or {}).get("attributes", {}).get("name")
        artists.append(name or UNKNOWN_ARTIST)

    album = UNKNOWN_ALBUM
    for entity in included:
        if entity.get("type") == "albums":
            album = entity.get("attributes", {}).get("title") or UNKNOWN_ALBUM
            break

    return ExportedTrack(
        order=order,
        title=attributes["title"],
        artists=artists,
        album=album,
        id=ref.id,
        isrc=attributes.get("isrc") or MISSING_ISRC,
    )


class TidalFetcher:
    """
    Fetches playlist structure and track details through a TidalClient.

    Attributes:
        client: Authenticated TidalClient.
        country_code: Catalog country for every request.
        base_delay: Seconds slept before each page and track request.
    """

    def __init__(
        self,
        client: TidalClient,
        country_code: str = DEFAULT_COUNTRY_CODE,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.country_code = country_code
        self.base_delay = base_delay
        self._sleep = sleep

    def _url(self, link: str) -> str | None:
        return normalize_tidal_url(link, country_code=self.country_code)

    def fetch_playlist(self, playlist_id: str) -> Playlist:
        """
        Fetch playlist metadata.

        Raises:
            TidalError: If the playlist does not exist (404) or the response
                        has no name.
        """
        url = self._url(f"/playlists/{playlist_id}")
        payload = self.client.get(url)
        if payload is None:
            raise TidalError(
                f"Playlist not found: {playlist_id}",
                details={"playlist_id": playlist_id, "status_code": 404}
            )

        try:
            playlist = Playlist.from_api(playlist_id, payload)
        except (KeyError, TypeError) as e:
            raise TidalError(
                f"Unexpected playlist response for {playlist_id}",
                details={"playlist_id": playlist_id, "original_error": str(e)}
            ) from e

        logger.info(f'Found: "{playlist.name}"')
        return playlist

    def walk_playlist_items(self, playlist_id: str) -> list[TrackRef]:
        """
        Collect every item reference of a playlist, following links.next.

        Stops when a page returns 404 or has no next link. Any other error
        aborts the walk and propagates.

        Returns:
            References in playlist order, duplicates included.
        """
        logger.info("Mapping playlist structure...")

        refs: list[TrackRef] = []
        next_url = self._url(f"/playlists/{playlist_id}/relationships/items")
        pages = 0

        while next_url:
            self._sleep(self.base_delay)
            page = self.client.get(next_url)
            if page is None:
                break

            pages += 1
            for entry in page.get("data") or []:
                refs.append(TrackRef.from_api(entry))

            next_link = (page.get("links") or {}).get("next")
            next_url = self._url(next_link) if next_link else None

        logger.debug(f"Walked {pages} page(s), {len(refs)} item(s)")
        return refs

    def fetch_track(self, order: int, ref: TrackRef, total: int | None = None) -> ExportedTrack:
        """
        Fetch and build one track record. Never raises.

        Returns:
            A populated record, an "unavailable" placeholder for a 404, or an
            "error" placeholder if anything went wrong.
        """
        self._sleep(self.base_delay)
        label = f"[{order}/{total}]" if total is not None else f"[{order}]"

        try:
            payload = self.client.get(self._url(f"/tracks/{ref.id}?include=artists,albums"))

            if payload and payload.get("data"):
                track = build_track(order, ref, payload)
                logger.info(
                    f'{label} Processing "{truncate(track.title, 30)}" - '
                    f'{truncate(", ".join(track.artists), 25)}'
                )
                return track

            log_track_failure(logger, order, ref.id, "unavailable", total=total)
            return ExportedTrack.unavailable(order, ref.id)

        except Exception as e:
            log_track_failure(logger, order, ref.id, "error", reason=str(e) or type(e).__name__, total=total)
            logger.debug(f"Track {ref.id} failed", exc_info=True)
            return ExportedTrack.failed(order, ref.id)

    def enrich_tracks(self, refs: list[TrackRef]) -> Iterator[ExportedTrack]:
        """
        Yield one record per reference, in order, one request at a time.

        The i-th yielded record (0-based) always has order i + 1.
        """
        total = len(refs)
        logger.info(f"Processing {total} items...")
        for index, ref in enumerate(refs):
            yield self.fetch_track(index + 1, ref, total=total)
