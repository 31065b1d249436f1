"""Model listing and refresh commands for the chutes-plugin CLI."""

from typing import Optional

import click

from ...errors import ModelFetchError
from ...tools import filter_display_models
from ..formatters import (
    create_console,
    format_json,
    format_models_list_json,
    format_models_table,
)
from ..utils import create_fetcher, exit_code_for_fetch_error, handle_error, model_filter_options


@click.command("list")
@model_filter_options
@click.option("--no-pricing", is_flag=True, help="Hide pricing information.")
@click.pass_context
def list_models(
    ctx: click.Context,
    name_filter: Optional[str] = None,
    owner: Optional[str] = None,
    feature: Optional[str] = None,
    no_pricing: bool = False,
) -> None:
    """List available models from the Chutes API.

    Examples:
      chutes-plugin list --owner qwen
      chutes-plugin --format json list --feature tools
    """
    try:
        with create_fetcher(ctx.obj) as fetcher:
            if ctx.obj["format"] != "json":
                click.echo("Fetching models from Chutes API...", err=True)
            fetcher.fetch_models()
            models = filter_display_models(
                fetcher.get_registry().get_all_display_info(),
                name_filter=name_filter,
                owned_by=owner,
                feature=feature,
            )
            cache_age = fetcher.get_cache_age()
    except ModelFetchError as e:
        handle_error(e, exit_code_for_fetch_error(e))

    show_pricing = not no_pricing
    if ctx.obj["format"] == "json":
        format_json(format_models_list_json(models, show_pricing=show_pricing))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_models_table(
            models,
            console,
            show_pricing=show_pricing,
            cache_age_seconds=int((cache_age or 0) // 1000),
        )


@click.command()
@click.pass_context
def refresh(ctx: click.Context) -> None:
    """Force refresh the model list from the Chutes API."""
    try:
        with create_fetcher(ctx.obj) as fetcher:
            models = fetcher.refresh_models(force=True)
            ttl_seconds = int(fetcher.get_cache().ttl_ms // 1000)
    except ModelFetchError as e:
        handle_error(e, exit_code_for_fetch_error(e))

    if ctx.obj["format"] == "json":
        format_json({"success": True, "count": len(models), "cache_ttl_seconds": ttl_seconds})
        return

    console = create_console(no_color=ctx.obj["no_color"])
    console.print(f"✅ [green]Successfully refreshed {len(models)} models[/green]\n")
    console.print("Note: The plugin refreshes its cache automatically when OpenCode restarts.")
    console.print(f"Models are cached in memory for {ttl_seconds}s during each OpenCode session.")
