"""
TIDAL module for tidal-exporter.

This module handles all communication with the TIDAL Open API:
    - urls: Normalize API links onto the trusted host
    - client: Token exchange and GET with rate-limit retry
    - fetcher: Playlist metadata, pagination walk and track enrichment
    - models: TrackRef, Playlist, ExportedTrack, ExportDocument

Usage:
    from tidal_exporter.tidal import TidalClient, TidalFetcher

    client = TidalClient(client_id, client_secret)
    client.authenticate()
    fetcher = TidalFetcher(client)
    refs = fetcher.walk_playlist_items(playlist_id)
"""

from tidal_exporter.tidal.client import TidalClient
from tidal_exporter.tidal.fetcher import TidalFetcher, build_track
from tidal_exporter.tidal.models import (
    ExportDocument,
    ExportedTrack,
    Playlist,
    TrackRef,
)
from tidal_exporter.tidal.urls import normalize_tidal_url

__all__ = [
    "TidalClient",
    "TidalFetcher",
    "build_track",
    "normalize_tidal_url",
    "TrackRef",
    "Playlist",
    "ExportedTrack",
    "ExportDocument",
]
