"""
Logging configuration for tidal-exporter.

This module sets up the logging system with multiple outputs:
    - Console: Colored progress lines, tqdm-compatible
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - track_failures.log: Tracks exported as unavailable or error placeholders

Everything shown on screen is also saved to file, then filtered into the
specialized files.

Log File Locations:
    All log files are created in a 'logs' subdirectory of the export directory,
    one set per run (timestamped names).

Usage:
    from tidal_exporter.core.logger import setup_logging, get_logger

    setup_logging(export_dir / "logs")  # Call once at startup
    logger = get_logger(__name__)       # Get logger for each module
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

import colorama
from colorama import Fore, Style
from tqdm import tqdm


LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"
TRACK_FAILURES_PREFIX = "track_failures"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that prefixes console lines with a colored marker.

    Markers mirror the exporter's console vocabulary:
        - DEBUG:    [.] dim
        - INFO:     [*] blue
        - WARNING:  [!] yellow
        - ERROR:    [x] red
        - CRITICAL: [CRITICAL] bright red
    """

    LEVEL_STYLES = {
        logging.DEBUG: (Style.DIM, "[.]"),
        logging.INFO: (Fore.BLUE, "[*]"),
        logging.WARNING: (Fore.YELLOW, "[!]"),
        logging.ERROR: (Fore.RED, "[x]"),
        logging.CRITICAL: (Fore.RED + Style.BRIGHT, "[CRITICAL]"),
    }

    def format(self, record: logging.LogRecord) -> str:
        color, marker = self.LEVEL_STYLES.get(record.levelno, (Fore.WHITE, "[*]"))
        message = f" {color}{marker}{Style.RESET_ALL} {record.getMessage()}"
        if record.exc_info and record.levelno >= logging.ERROR:
            message += "\n" + self.formatException(record.exc_info)
        return message


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    tqdm redraws its bar in place with carriage returns. Plain writes to the
    same stream leave half-drawn bars behind; tqdm.write() clears the bar,
    prints the message above it and redraws.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class FailedTrackHandler(logging.Handler):
    """
    Handler that collects tracks exported as placeholders into a report file.

    Only records carrying the 'failed_track_id' extra field are written.
    Format, one block per track:

        [3] unavailable
        https://tidal.com/track/123456

        [7] error: HTTP 500
        https://tidal.com/track/654321

    Use log_track_failure() to emit such records.
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "failed_track_id"):
            return

        if self.report_file is None:
            return

        try:
            track_id = getattr(record, "failed_track_id")
            order = getattr(record, "failed_track_order", "?")
            status = getattr(record, "failed_track_status", "error")
            reason = getattr(record, "failed_track_reason", None)

            header = f"[{order}] {status}"
            if reason:
                header += f": {reason}"

            self.report_file.write(f"{header}\n")
            self.report_file.write(f"https://tidal.com/track/{track_id}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created. If None, only the
                 console handler is installed.
        verbose: Show DEBUG messages on the console.

    Behavior:
        1. Configure root logger level to DEBUG and drop existing handlers
        2. Console handler (TqdmLoggingHandler), INFO or DEBUG
        3. If log_dir is given:
           - log_dir/log_full_{timestamp}.log (DEBUG)
           - log_dir/log_errors_{timestamp}.log (ERROR+)
           - log_dir/track_failures_{timestamp}.log (FailedTrackHandler)
    """
    colorama.just_fix_windows_console()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        handler.close()
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = FailedTrackHandler(log_dir / f"{TRACK_FAILURES_PREFIX}_{timestamp}.log")
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Loggers obtained before setup_logging() is called have no handlers
    of their own and propagate to whatever the root logger has.
    """
    return logging.getLogger(name)


def log_track_failure(
    logger: logging.Logger,
    order: int,
    track_id: str,
    status: str,
    reason: str | None = None,
    total: int | None = None
) -> None:
    """
    Log a track that was exported as a placeholder record.

    Args:
        logger: The logger to use for the message.
        order: 1-based position of the track in the playlist.
        track_id: TIDAL track ID.
        status: "unavailable" or "error".
        reason: Error message for "error" records.
        total: Total number of tracks, for the [n/total] label.

    Example:
        log_track_failure(logger, 7, "654321", "error", reason="HTTP 500", total=40)
        # Console: [x] [7/40] [ERROR] ID 654321: HTTP 500
        # Unavailable tracks are logged at WARNING, errors at ERROR.
    """
    label = f"[{order}/{total}]" if total is not None else f"[{order}]"
    if status == "unavailable":
        level = logging.WARNING
        message = f"{label} [UNAVAILABLE] ID: {track_id}"
    else:
        level = logging.ERROR
        message = f"{label} [ERROR] ID {track_id}: {reason}"

    logger.log(
        level,
        message,
        extra={
            "failed_track_id": track_id,
            "failed_track_order": order,
            "failed_track_status": status,
            "failed_track_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close all handlers on the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass
        root_logger.removeHandler(handler)
