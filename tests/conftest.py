"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path
from unittest.mock import Mock

from tidal_exporter.core.config import Config, ExportConfig, NetworkConfig, TidalConfig


PLAYLIST_ID = "0a1b2c3d-4e5f-6789-abcd-ef0123456789"


def make_response(status_code=200, body=None, headers=None):
    """Build a stand-in for requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = headers or {}
    response.json.return_value = body
    return response


def make_track_payload(track_id, title, artists, album="Album Y", isrc="US123"):
    """Track document as returned by /tracks/<id>?include=artists,albums"""
    included = [
        {"type": "artists", "id": f"a{i}", "attributes": {"name": name}}
        for i, name in enumerate(artists)
    ]
    if album is not None:
        included.append({"type": "albums", "id": "al1", "attributes": {"title": album}})
    return {
        "data": {
            "id": track_id,
            "type": "tracks",
            "attributes": {"title": title, "isrc": isrc},
            "relationships": {
                "artists": {"data": [{"type": "artists", "id": f"a{i}"} for i in range(len(artists))]},
            },
        },
        "included": included,
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def no_sleep():
    """Records requested waits instead of sleeping"""
    return Mock()


@pytest.fixture
def network_config():
    """Network settings with no courtesy delay"""
    return NetworkConfig(base_delay=0.0)


@pytest.fixture
def config(temp_dir, network_config):
    """Complete config writing into a temporary directory"""
    return Config(
        tidal=TidalConfig(client_id="id", client_secret="secret"),
        export=ExportConfig(directory=temp_dir),
        network=network_config,
    )


@pytest.fixture
def authed_client():
    """TidalClient stand-in whose get() is configured per test"""
    client = Mock()
    client.access_token = "token"
    return client
