"""Helper functions for CLI operations."""

import sys
from typing import Any, Dict, NoReturn, Optional

import click

from ...config import DEFAULT_CONFIG, PluginConfig, resolve_api_token
from ...errors import FetchErrorKind, ModelFetchError
from ...fetcher import DEFAULT_API_BASE_URL, FetcherConfig, ModelFetcher


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    CONFIG_ERROR = 3
    DATA_SOURCE_ERROR = 4
    AUTH_ERROR = 5


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    # Auto-detect based on TTY
    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> NoReturn:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def exit_code_for_fetch_error(error: ModelFetchError) -> int:
    """Map a fetch failure to a CLI exit code."""
    if error.kind is FetchErrorKind.AUTH:
        return ExitCode.AUTH_ERROR
    if error.kind is FetchErrorKind.INVALID_RESPONSE:
        return ExitCode.DATA_SOURCE_ERROR
    return ExitCode.GENERIC_ERROR


def create_fetcher(ctx_obj: Dict[str, Any]) -> ModelFetcher:
    """Build a fetcher from the global CLI options.

    Args:
        ctx_obj: Click context object populated by the root group

    Returns:
        Fetcher with the resolved API token applied
    """
    config: PluginConfig = ctx_obj.get("config") or DEFAULT_CONFIG
    fetcher_config = FetcherConfig(
        api_base_url=ctx_obj.get("api_url") or DEFAULT_API_BASE_URL,
        cache_ttl_seconds=config.refresh_interval,
        prefix=config.prefix,
    )

    fetcher = ModelFetcher(fetcher_config)
    fetcher.set_api_token(resolve_api_token(config))
    return fetcher
