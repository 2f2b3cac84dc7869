"""Test utilities and helpers"""

import pytest

from tidal_exporter.utils import ensure_directory, extract_playlist_id, sanitize_filename, truncate


class TestExtractPlaylistId:
    """Test playlist URL parsing"""

    @pytest.mark.parametrize("url", [
        "https://tidal.com/browse/playlist/0a1b2c3d-4e5f-6789-abcd-ef0123456789",
        "https://listen.tidal.com/playlist/0a1b2c3d-4e5f-6789-abcd-ef0123456789?u",
        "tidal.com/playlist/0A1B2C3D-4E5F-6789-ABCD-EF0123456789/",
    ])
    def test_valid_urls(self, url):
        """Test the 36-character id is returned exactly"""
        playlist_id = extract_playlist_id(url)
        assert playlist_id is not None
        assert len(playlist_id) == 36
        assert playlist_id.lower() == "0a1b2c3d-4e5f-6789-abcd-ef0123456789"

    @pytest.mark.parametrize("url", [
        "",
        "https://tidal.com/browse/album/12345",
        "https://tidal.com/browse/playlist/0a1b2c3d-4e5f",
        "https://tidal.com/browse/playlist/zzzzzzzz-4e5f-6789-abcd-ef0123456789",
        "0a1b2c3d-4e5f-6789-abcd-ef0123456789",
    ])
    def test_invalid_urls(self, url):
        """Test anything without playlist/<36 chars> is rejected"""
        assert extract_playlist_id(url) is None

    def test_non_string(self):
        assert extract_playlist_id(None) is None


class TestHelpers:
    """Test helper functions"""

    def test_sanitize_filename(self):
        """Test filename sanitization"""
        assert sanitize_filename("Chill: Vibes?") == "Chill_ Vibes_"
        assert sanitize_filename("  AC/DC  ") == "AC_DC"
        assert sanitize_filename('a<>:"/\\|?*b') == "a_b"
        assert sanitize_filename("Road Trip") == "Road Trip"
        assert sanitize_filename("") == "Unknown"
        assert sanitize_filename("???") == "_"

    def test_truncate(self):
        assert truncate("short", 10) == "short"
        assert truncate("a" * 12, 10) == "a" * 10 + "..."

    def test_ensure_directory(self, temp_dir):
        target = temp_dir / "a" / "b"
        assert ensure_directory(target) == target
        assert target.is_dir()
        ensure_directory(target)
