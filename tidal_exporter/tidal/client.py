"""
TIDAL Open API client for tidal-exporter.

Authentication:
    Client Credentials only. The client id and secret are exchanged for a
    bearer token at https://auth.tidal.com/v1/oauth2/token. Public catalog
    data (playlists, tracks, artists, albums) is all this tool needs.

Rate Limiting:
    A 429 response is retried after waiting a fraction (one third by default)
    of the server's retry-after hint. Waiting less than asked risks a repeat
    429 but finishes large playlists much sooner; the ratio is configurable.
    After max_retries attempts the request fails with RateLimitTimeoutError.

Usage:
    client = TidalClient(client_id, client_secret)
    client.authenticate()
    payload = client.get(normalize_tidal_url("/playlists/<id>"))
"""

import base64
import math
import time
from typing import Any, Callable

import requests

from tidal_exporter.core.config import NetworkConfig
from tidal_exporter.core.exceptions import (
    RateLimitTimeoutError,
    TidalAuthError,
    TidalError,
    TidalHTTPError,
)
from tidal_exporter.core.logger import get_logger

logger = get_logger(__name__)


TOKEN_URL = "https://auth.tidal.com/v1/oauth2/token"
JSON_API_MEDIA_TYPE = "application/vnd.api+json"


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class TidalClient:
    """
    Bearer-authenticated GET client with rate-limit-aware retry.

    Attributes:
        access_token: Bearer token, set by authenticate().
        network: Pacing and retry settings.

    Thread Safety:
        Not thread-safe. The exporter issues one request at a time.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        network: NetworkConfig | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            client_id: TIDAL application client ID.
            client_secret: TIDAL application client secret.
            network: Retry and timeout settings. Defaults to NetworkConfig().
            session: requests session to use (a new one by default).
            sleep: Function used for all waits, in seconds. Tests inject a fake.
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self.network = network or NetworkConfig()
        self._session = session or requests.Session()
        self._sleep = sleep
        self.access_token: str | None = None

    def authenticate(self) -> str:
        """
        Exchange the client credentials for a bearer token.

        Returns:
            The access token (also stored on the client).

        Raises:
            TidalAuthError: On a transport error, a non-success status, or a
                            response without access_token.
        """
        key = f"{self._client_id}:{self._client_secret}"
        basic = base64.b64encode(key.encode()).decode()

        try:
            response = self._session.post(
                TOKEN_URL,
                headers={
                    "Authorization": f"Basic {basic}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data={"grant_type": "client_credentials"},
                timeout=self.network.request_timeout,
            )
        except requests.RequestException as e:
            raise TidalAuthError(
                "Authentication failed.",
                details={"original_error": str(e)}
            ) from e

        if not _is_success(response.status_code):
            raise TidalAuthError(
                "Authentication failed.",
                details={"status_code": response.status_code}
            )

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise TidalAuthError(
                "Authentication failed: no access token in response.",
                details={"original_error": str(e)}
            ) from e

        self.access_token = token
        logger.debug("Obtained TIDAL access token")
        return token

    def get(self, url: str) -> dict[str, Any] | None:
        """
        GET a JSON:API resource, retrying on 429.

        Args:
            url: Absolute URL, normally from normalize_tidal_url().

        Returns:
            The decoded JSON body, or None if the resource does not exist (404).

        Raises:
            TidalAuthError: If authenticate() has not been called.
            TidalHTTPError: For any other non-success status. Not retried.
            RateLimitTimeoutError: If every attempt was answered with 429.
            TidalError: On transport failures or a body that is not JSON.
        """
        if self.access_token is None:
            raise TidalAuthError("Not authenticated. Call authenticate() first.")

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": JSON_API_MEDIA_TYPE,
        }

        for attempt in range(1, self.network.max_retries + 1):
            try:
                response = self._session.get(url, headers=headers, timeout=self.network.request_timeout)
            except requests.RequestException as e:
                raise TidalError(
                    f"Request failed: {e}",
                    details={"url": url, "original_error": str(e)}
                ) from e

            if response.status_code == 429:
                wait_ms = self._rate_limit_wait_ms(response)
                logger.warning(f"Rate Limit: Waiting {wait_ms}ms...")
                logger.debug(f"429 on attempt {attempt}/{self.network.max_retries}: {url}")
                self._sleep(wait_ms / 1000)
                continue

            if response.status_code == 404:
                return None

            if not _is_success(response.status_code):
                raise TidalHTTPError(response.status_code, details={"url": url})

            try:
                return response.json()
            except ValueError as e:
                raise TidalError(
                    "Invalid JSON in response",
                    details={"url": url, "original_error": str(e)}
                ) from e

        raise RateLimitTimeoutError(
            "Timeout",
            details={"url": url, "attempts": self.network.max_retries}
        )

    def _rate_limit_wait_ms(self, response: requests.Response) -> int:
        """Milliseconds to wait before retrying a 429 response."""
        retry_after = self.network.default_retry_after
        header = response.headers.get("retry-after")
        if header:
            try:
                value = float(header)
            except ValueError:
                logger.debug(f"Ignoring unparseable retry-after header: {header!r}")
            else:
                if math.isfinite(value) and value >= 0:
                    retry_after = value

        # round() keeps float noise in the ratio from bumping 1000.0000001 to 1001
        return math.ceil(round(retry_after * 1000 * self.network.rate_limit_wait_ratio, 6))
