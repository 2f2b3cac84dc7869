"""
Command-line interface for tidal-exporter.

This module implements the CLI using Click (rich-click for help colors).

Usage:
    # Prompt for the playlist URL
    tidal-export

    # Pass it directly
    tidal-export --url "https://tidal.com/browse/playlist/0a1b2c3d-4e5f-6789-abcd-ef0123456789"

    # Custom output directory / catalog country
    tidal-export --output-dir ~/exports --country-code GB

Configuration:
    Credentials are read from CLIENT_ID and CLIENT_SECRET (environment or a
    .env file), or from the tidal section of config.yaml. See
    tidal_exporter.core.config for all options.

Exit Codes:
    0   Export finished (individual tracks may still be placeholders)
    1   Configuration error (e.g. missing credentials) or unexpected error
    3   TIDAL error (authentication, playlist not found, pagination failure)
    4   Other exporter error (e.g. export file not writable)
    130 Interrupted by user
"""

import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import rich_click as click
from colorama import Fore, Style

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from tidal_exporter import __version__
from tidal_exporter.core import (
    Config,
    ConfigError,
    TidalError,
    TidalExporterError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from tidal_exporter.export import ExportResult, PlaylistExporter
from tidal_exporter.tidal import TidalClient
from tidal_exporter.utils import extract_playlist_id

logger = get_logger(__name__)


def _playlist_id_from_input(value: str) -> str:
    """Prompt value processor: return the playlist ID or re-prompt."""
    playlist_id = extract_playlist_id(value)
    if playlist_id is None:
        raise click.BadParameter("Invalid URL")
    return playlist_id


def _validate_url_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _playlist_id_from_input(value)


@click.command()
@click.option(
    "--url", "playlist_id",
    type=str,
    default=None,
    callback=_validate_url_option,
    metavar="<tidal-url>",
    help="TIDAL playlist URL (prompted for when omitted)"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Base directory for exports (default: ~/Music/Playlist)"
)
@click.option(
    "--country-code",
    type=str,
    default=None,
    metavar="<CC>",
    help="Catalog country code (default: US)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug output on the console"
)
@click.version_option(__version__, prog_name="tidal-exporter")
def cli(
    playlist_id: Optional[str],
    config_path: Optional[Path],
    output_dir: Optional[Path],
    country_code: Optional[str],
    verbose: bool
) -> None:
    """
    tidal-exporter: Export a TIDAL playlist's track listing to JSON.

    Fetches every item of the playlist, looks up title, artists, album and
    ISRC for each track, and saves the result to
    ~/Music/Playlist/<name>/<name>.json, checkpointing as it goes.
    """
    click.echo(f"\n{Style.BRIGHT} TIDAL PLAYLIST EXPORTER{Style.RESET_ALL}")
    click.echo(f"{Style.DIM} -----------------------{Style.RESET_ALL}\n")

    setup_logging(verbose=verbose)

    try:
        config = _load_configuration(config_path, output_dir, country_code)

        if playlist_id is None:
            playlist_id = click.prompt(
                "Enter TIDAL Playlist URL",
                value_proc=_playlist_id_from_input
            )

        setup_logging(config.export.directory / "logs", verbose=verbose)
        logger.debug(f"Exporting playlist {playlist_id}")

        client = TidalClient(
            config.tidal.client_id,
            config.tidal.client_secret,
            network=config.network
        )
        result = PlaylistExporter(client, config).export(playlist_id)
        _print_summary(result)

    except ConfigError as e:
        click.echo(f"{Fore.RED} [ERROR] {e.message}{Style.RESET_ALL}", err=True)
        sys.exit(1)

    except TidalError as e:
        click.echo(f"{Fore.RED}\n [CRITICAL] {e.message}{Style.RESET_ALL}", err=True)
        logger.error(f"TIDAL error: {e.message}", extra={"details": e.details})
        logger.debug("Traceback", exc_info=True)
        sys.exit(3)

    except TidalExporterError as e:
        click.echo(f"{Fore.RED}\n [CRITICAL] {e.message}{Style.RESET_ALL}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except (KeyboardInterrupt, click.Abort):
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"{Fore.RED}\n [CRITICAL] Unexpected error: {e}{Style.RESET_ALL}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _load_configuration(
    config_path: Optional[Path],
    output_dir: Optional[Path],
    country_code: Optional[str]
) -> Config:
    """
    Load the configuration and apply command-line overrides.

    Raises:
        ConfigError: If configuration is invalid or credentials are missing.
    """
    config = load_config(config_path)

    if output_dir is not None:
        config = replace(
            config,
            export=replace(config.export, directory=output_dir.expanduser().resolve())
        )

    if country_code is not None:
        if len(country_code.strip()) != 2:
            raise ConfigError(
                "--country-code must be a two-letter country code",
                details={"value": country_code}
            )
        config = replace(
            config,
            tidal=replace(config.tidal, country_code=country_code.strip().upper())
        )

    return config


def _print_summary(result: ExportResult) -> None:
    logger.info(
        f"{result.total} track(s): {result.exported} exported, "
        f"{result.unavailable} unavailable, {result.failed} error(s)"
    )
    click.echo(f"{Style.BRIGHT}{Fore.GREEN}\n [SUCCESS] JSON Saved to {result.path}\n{Style.RESET_ALL}")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `tidal-export` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
