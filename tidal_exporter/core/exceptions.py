"""
Exception classes for tidal-exporter.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, so the CLI can print a short line and the log file can keep
the full context.

Exception Hierarchy:
    TidalExporterError (base)
        ConfigError - Missing credentials, bad config.yaml
        TidalError - TIDAL API issues
            TidalAuthError - Token exchange failed
            TidalHTTPError - Non-success HTTP status (other than 404/429)
            RateLimitTimeoutError - Still rate limited after all retries
        ExportError - Writing the JSON export failed
"""


class TidalExporterError(Exception):
    """
    Base exception for all tidal-exporter errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., URL, status code).

    Example:
        try:
            exporter.export(playlist_id)
        except TidalExporterError as e:
            logger.error(f"Export failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': URL that caused the error
                     - 'status_code': HTTP status returned by the API
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(TidalExporterError):
    """
    Raised when the configuration is missing or invalid.

    This is a CRITICAL error raised before any network call is made.

    Common causes:
        - CLIENT_ID / CLIENT_SECRET not set in the environment, .env or config.yaml
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., negative delay)
    """
    pass


class TidalError(TidalExporterError):
    """
    Raised when there's an issue with the TIDAL API.

    Fatal when raised while authenticating or mapping the playlist structure,
    recoverable when raised while enriching a single track.
    """
    pass


class TidalAuthError(TidalError):
    """
    Raised when the client-credentials token exchange fails.

    There is no fallback credential path, so this always stops the run.
    """
    pass


class TidalHTTPError(TidalError):
    """
    Raised for any non-success status other than 404 and 429.

    Attributes:
        status_code: The HTTP status code returned by the API.

    Example:
        raise TidalHTTPError(503, details={'url': url})
        # str(e) == "HTTP 503"
    """

    def __init__(self, status_code: int, details: dict | None = None) -> None:
        details = dict(details or {})
        details.setdefault("status_code", status_code)
        super().__init__(f"HTTP {status_code}", details)
        self.status_code = status_code


class RateLimitTimeoutError(TidalError):
    """
    Raised when a request is still answered with 429 after every retry.
    """
    pass


class ExportError(TidalExporterError):
    """
    Raised when the export document cannot be written to disk.

    Common causes:
        - Permission denied on the output directory
        - Disk full
    """
    pass
