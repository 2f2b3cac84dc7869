"""Test the TIDAL API client"""

import base64

import pytest
import requests
from unittest.mock import Mock

from tidal_exporter.core.config import NetworkConfig
from tidal_exporter.core.exceptions import (
    RateLimitTimeoutError,
    TidalAuthError,
    TidalError,
    TidalHTTPError,
)
from tidal_exporter.tidal.client import JSON_API_MEDIA_TYPE, TOKEN_URL, TidalClient

from conftest import make_response


URL = "https://openapi.tidal.com/v2/tracks/1?countryCode=US&include=items"


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(session, no_sleep):
    client = TidalClient("my-id", "my-secret", session=session, sleep=no_sleep)
    client.access_token = "token"
    return client


class TestAuthenticate:
    """Test the client-credentials token exchange"""

    def test_success(self, session, no_sleep):
        session.post.return_value = make_response(200, {"access_token": "abc"})
        client = TidalClient("my-id", "my-secret", session=session, sleep=no_sleep)

        assert client.authenticate() == "abc"
        assert client.access_token == "abc"

        args, kwargs = session.post.call_args
        assert args[0] == TOKEN_URL
        expected = base64.b64encode(b"my-id:my-secret").decode()
        assert kwargs["headers"]["Authorization"] == f"Basic {expected}"
        assert kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
        assert kwargs["data"] == {"grant_type": "client_credentials"}

    def test_rejected_credentials(self, session, no_sleep):
        session.post.return_value = make_response(401, {"error": "invalid_client"})
        client = TidalClient("my-id", "bad", session=session, sleep=no_sleep)

        with pytest.raises(TidalAuthError):
            client.authenticate()
        assert client.access_token is None

    def test_redirect_status_is_rejected(self, session, no_sleep):
        session.post.return_value = make_response(302, {"access_token": "abc"})
        client = TidalClient("my-id", "my-secret", session=session, sleep=no_sleep)

        with pytest.raises(TidalAuthError):
            client.authenticate()
        assert client.access_token is None

    def test_missing_token_in_body(self, session, no_sleep):
        session.post.return_value = make_response(200, {})
        client = TidalClient("my-id", "my-secret", session=session, sleep=no_sleep)

        with pytest.raises(TidalAuthError):
            client.authenticate()

    def test_network_failure(self, session, no_sleep):
        session.post.side_effect = requests.ConnectionError("down")
        client = TidalClient("my-id", "my-secret", session=session, sleep=no_sleep)

        with pytest.raises(TidalAuthError):
            client.authenticate()


class TestGet:
    """Test GET with rate-limit-aware retry"""

    def test_requires_token(self, session, no_sleep):
        client = TidalClient("my-id", "my-secret", session=session, sleep=no_sleep)
        with pytest.raises(TidalAuthError):
            client.get(URL)
        session.get.assert_not_called()

    def test_success_returns_body(self, client, session):
        session.get.return_value = make_response(200, {"data": {"id": "1"}})

        assert client.get(URL) == {"data": {"id": "1"}}

        args, kwargs = session.get.call_args
        assert args[0] == URL
        assert kwargs["headers"]["Authorization"] == "Bearer token"
        assert kwargs["headers"]["Accept"] == JSON_API_MEDIA_TYPE

    def test_not_found_returns_none(self, client, session):
        session.get.return_value = make_response(404)
        assert client.get(URL) is None

    @pytest.mark.parametrize("status", [400, 401, 500, 503])
    def test_other_errors_raise_without_retry(self, client, session, no_sleep, status):
        session.get.return_value = make_response(status)

        with pytest.raises(TidalHTTPError) as exc_info:
            client.get(URL)

        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"HTTP {status}"
        assert session.get.call_count == 1
        no_sleep.assert_not_called()

    def test_rate_limit_waits_one_third_then_succeeds(self, client, session, no_sleep):
        """Test retry-after: 3 leads to a single ~1000ms wait"""
        session.get.side_effect = [
            make_response(429, headers={"retry-after": "3"}),
            make_response(200, {"data": []}),
        ]

        assert client.get(URL) == {"data": []}
        assert session.get.call_count == 2
        no_sleep.assert_called_once()
        assert no_sleep.call_args[0][0] == pytest.approx(1.0, abs=0.001)

    def test_rate_limit_default_retry_after(self, client, session, no_sleep):
        """Test a missing header falls back to 5s (waits ceil(5000/3) ms)"""
        session.get.side_effect = [make_response(429), make_response(200, {})]

        client.get(URL)

        assert no_sleep.call_args[0][0] == pytest.approx(1.667)

    def test_rate_limit_unparseable_header(self, client, session, no_sleep):
        session.get.side_effect = [
            make_response(429, headers={"retry-after": "soon"}),
            make_response(200, {}),
        ]

        client.get(URL)

        assert no_sleep.call_args[0][0] == pytest.approx(1.667)

    def test_rate_limit_exhausted(self, client, session, no_sleep):
        """Test five 429s in a row end in a timeout, not a loop"""
        session.get.return_value = make_response(429, headers={"retry-after": "1"})

        with pytest.raises(RateLimitTimeoutError):
            client.get(URL)

        assert session.get.call_count == 5
        assert no_sleep.call_count == 5

    def test_wait_ratio_is_configurable(self, session, no_sleep):
        client = TidalClient(
            "my-id", "my-secret",
            network=NetworkConfig(rate_limit_wait_ratio=1.0, max_retries=2),
            session=session,
            sleep=no_sleep,
        )
        client.access_token = "token"
        session.get.side_effect = [
            make_response(429, headers={"retry-after": "2"}),
            make_response(200, {}),
        ]

        client.get(URL)

        assert no_sleep.call_args[0][0] == pytest.approx(2.0)

    def test_transport_errors_are_wrapped(self, client, session):
        session.get.side_effect = requests.ConnectionError("reset")

        with pytest.raises(TidalError) as exc_info:
            client.get(URL)

        assert exc_info.value.details["url"] == URL
        assert "reset" in exc_info.value.details["original_error"]
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_invalid_json_is_wrapped(self, client, session):
        response = make_response(200)
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with pytest.raises(TidalError):
            client.get(URL)

    @pytest.mark.parametrize("status", [300, 304])
    def test_redirect_statuses_are_errors(self, client, session, status):
        session.get.return_value = make_response(status)

        with pytest.raises(TidalHTTPError) as exc_info:
            client.get(URL)

        assert exc_info.value.status_code == status
        session.get.return_value.json.assert_not_called()
