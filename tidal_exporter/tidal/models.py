"""
Data models for TIDAL entities and the export document.

All dataclasses are frozen: a track record is created once, appended to the
export in playlist order and never modified afterwards.

Usage:
    from tidal_exporter.tidal.models import TrackRef, ExportedTrack, ExportDocument

    refs = [TrackRef.from_api(entry) for entry in page["data"]]
    track = ExportedTrack.unavailable(order=3, track_id=refs[2].id)
"""

from dataclasses import dataclass, field
from typing import Any


STATUS_UNAVAILABLE = "unavailable"
STATUS_ERROR = "error"

UNKNOWN_ARTIST = "Unknown"
UNKNOWN_ALBUM = "Unknown Album"
PLACEHOLDER_ALBUM = "Unknown"
MISSING_ISRC = "N/A"

UNAVAILABLE_TITLE = "Unavailable Track"
ERROR_TITLE = "Error Fetching Track"


@dataclass(frozen=True)
class TrackRef:
    """
    Lightweight pointer to a catalog item, as listed by the playlist's
    items relationship.

    Order is significant and duplicates are kept: the same track added
    twice to a playlist yields two references.

    Attributes:
        id: TIDAL resource ID (numeric string for tracks).
        type: JSON:API resource type, usually "tracks".
    """
    id: str
    type: str = "tracks"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TrackRef":
        """Build a reference from one entry of a relationship "data" array."""
        return cls(id=str(data["id"]), type=data.get("type") or "tracks")


@dataclass(frozen=True)
class Playlist:
    """
    Playlist metadata needed for the export.

    Attributes:
        id: TIDAL playlist UUID.
        name: Display name, used in the document and the output path.
    """
    id: str
    name: str

    @classmethod
    def from_api(cls, playlist_id: str, payload: dict[str, Any]) -> "Playlist":
        """Build from a /playlists/<id> response (data.attributes.name)."""
        return cls(id=playlist_id, name=payload["data"]["attributes"]["name"])


@dataclass(frozen=True)
class ExportedTrack:
    """
    One track of the export document.

    Attributes:
        order: 1-based position in the playlist. Assigned once from the
               reference's index and never recomputed.
        title: Track title, or a placeholder for failed lookups.
        artists: Artist names in the order listed by the track.
        album: Album title.
        id: TIDAL track ID.
        isrc: International Standard Recording Code, "N/A" when unknown.
        status: None for a successful lookup, "unavailable" for a 404,
                "error" when the lookup raised.
    """
    order: int
    title: str
    artists: list[str] = field(hash=False)
    album: str
    id: str
    isrc: str = MISSING_ISRC
    status: str | None = None

    @classmethod
    def unavailable(cls, order: int, track_id: str) -> "ExportedTrack":
        """Placeholder for a track the catalog no longer has (404)."""
        return cls(
            order=order,
            title=UNAVAILABLE_TITLE,
            artists=[UNKNOWN_ARTIST],
            album=PLACEHOLDER_ALBUM,
            id=track_id,
            isrc=MISSING_ISRC,
            status=STATUS_UNAVAILABLE,
        )

    @classmethod
    def failed(cls, order: int, track_id: str) -> "ExportedTrack":
        """Placeholder for a track whose lookup raised an error."""
        return cls(
            order=order,
            title=ERROR_TITLE,
            artists=[UNKNOWN_ARTIST],
            album=PLACEHOLDER_ALBUM,
            id=track_id,
            isrc=MISSING_ISRC,
            status=STATUS_ERROR,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON. The status key is only present on placeholders."""
        data: dict[str, Any] = {
            "order": self.order,
            "title": self.title,
            "artists": list(self.artists),
            "album": self.album,
            "id": self.id,
            "isrc": self.isrc,
        }
        if self.status is not None:
            data["status"] = self.status
        return data


@dataclass(frozen=True)
class ExportDocument:
    """
    The persisted artifact: playlist name plus every track processed so far.
    """
    playlist: str
    tracks: tuple[ExportedTrack, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "playlist": self.playlist,
            "tracks": [track.to_dict() for track in self.tracks],
        }
