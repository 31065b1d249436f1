"""Main CLI application for the Chutes model registry."""

from typing import Optional

import click
import rich_click as rich_click

from ..config import load_config
from ..logging import configure_logging
from .utils import ExitCode, handle_error, resolve_format

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


def _resolve_log_level(verbose: int, quiet: int, debug: bool) -> str:
    """Map verbosity flags to a logging level name."""
    log_level = "WARNING"
    if debug:
        log_level = "DEBUG"
    elif verbose > quiet:
        if verbose >= 2:
            log_level = "DEBUG"
        elif verbose >= 1:
            log_level = "INFO"
    elif quiet > verbose:
        if quiet >= 2:
            log_level = "CRITICAL"
        elif quiet >= 1:
            log_level = "ERROR"
    return log_level


@click.group(invoke_without_command=True)
@click.option(
    "--format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Configuration file. Takes precedence over CHUTES_CONFIG_PATH.",
)
@click.option("--api-url", type=str, help="Override the API base URL (default: https://llm.chutes.ai/v1).")
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--version", is_flag=True, help="Print CLI version information.")
@click.pass_context
def app(
    ctx: click.Context,
    format: Optional[str] = None,
    config_path: Optional[str] = None,
    api_url: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    version: bool = False,
) -> None:
    """chutes-plugin - Chutes models for OpenCode.

    Lists the models served by the Chutes API, installs the OpenCode plugin
    and checks that everything is configured.

    Examples:
      # Install the plugin to the current project
      chutes-plugin install

      # List models that support tool calls
      chutes-plugin list --feature tools

      # Verify the setup
      chutes-plugin doctor
    """
    if version:
        try:
            from .. import __version__

            library_version = __version__
        except ImportError:
            library_version = "unknown"

        click.echo(f"chutes-plugin version: {library_version}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    configure_logging(_resolve_log_level(verbose, quiet, debug))

    result = load_config(config_path)
    if not result.success:
        handle_error(click.BadParameter(result.error or "Invalid configuration"), ExitCode.CONFIG_ERROR)

    # Store global options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "config": result.config,
            "config_path": result.path,
            "api_url": api_url,
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
        }
    )


# Import and register subcommands after the group is defined to avoid
# circular imports at runtime.
from .commands import doctor, install, models, status  # noqa: E402

app.add_command(install.install)
app.add_command(status.status)
app.add_command(models.list_models)
app.add_command(models.refresh)
app.add_command(doctor.doctor)


if __name__ == "__main__":
    app()
