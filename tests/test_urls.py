"""Test TIDAL URL normalization"""

from urllib.parse import parse_qs, urlsplit

import pytest

from tidal_exporter.tidal.urls import normalize_tidal_url


def _query(url):
    return parse_qs(urlsplit(url).query)


class TestNormalizeTidalUrl:
    """Test links are coerced onto the API host with query defaults"""

    def test_relative_path(self):
        url = normalize_tidal_url("/playlists/abc")
        assert url == "https://openapi.tidal.com/v2/playlists/abc?countryCode=US&include=items"

    def test_bare_fragment(self):
        url = normalize_tidal_url("playlists/abc/relationships/items")
        assert urlsplit(url).path == "/v2/playlists/abc/relationships/items"

    def test_version_prefix_not_duplicated(self):
        url = normalize_tidal_url("/v2/tracks/1")
        assert urlsplit(url).path == "/v2/tracks/1"

    @pytest.mark.parametrize("link", [
        "http://evil.example.com/v2/tracks/1",
        "https://attacker.test:8443/tracks/1",
        "//evil.example.com/tracks/1",
    ])
    def test_foreign_host_is_replaced(self, link):
        """Test scheme and host are always the trusted API authority"""
        parts = urlsplit(normalize_tidal_url(link))
        assert parts.scheme == "https"
        assert parts.netloc == "openapi.tidal.com"
        assert parts.path == "/v2/tracks/1"

    def test_explicit_query_values_win(self):
        url = normalize_tidal_url("/tracks/1?include=artists,albums&countryCode=GB")
        query = _query(url)
        assert query["include"] == ["artists,albums"]
        assert query["countryCode"] == ["GB"]

    def test_defaults_are_configurable(self):
        url = normalize_tidal_url("/tracks/1", country_code="NO", default_include="albums")
        query = _query(url)
        assert query["countryCode"] == ["NO"]
        assert query["include"] == ["albums"]

    def test_cursor_is_preserved(self):
        url = normalize_tidal_url("/playlists/abc/relationships/items?page[cursor]=3nI1Esi")
        assert _query(url)["page[cursor]"] == ["3nI1Esi"]

    @pytest.mark.parametrize("link", [
        "/playlists/abc",
        "/tracks/1?include=artists,albums",
        "/playlists/abc/relationships/items?page[cursor]=a%2Fb+c&countryCode=US",
        "https://openapi.tidal.com/v2/playlists/abc?include=items&countryCode=US",
    ])
    def test_idempotent(self, link):
        once = normalize_tidal_url(link)
        assert normalize_tidal_url(once) == once

    @pytest.mark.parametrize("link", [None, "", "http://[::1"])
    def test_unusable_input_returns_none(self, link):
        """Test empty or unparseable links mean no further pages"""
        assert normalize_tidal_url(link) is None
