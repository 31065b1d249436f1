"""Plugin status command for the chutes-plugin CLI."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from ...auth import has_chutes_auth
from ...config import PluginConfig, has_api_token
from ...config_paths import ENV_API_TOKEN, PLUGIN_FILENAME, get_global_plugin_dir, get_project_plugin_dir
from ..formatters import create_console, format_json, format_status_json, format_status_table


def find_installed_plugins(project_dir: Optional[Path] = None) -> List[str]:
    """Return the locations where the plugin file is installed."""
    candidates = [
        get_project_plugin_dir(project_dir) / PLUGIN_FILENAME,
        get_global_plugin_dir() / PLUGIN_FILENAME,
    ]
    return [str(path) for path in candidates if path.is_file()]


def get_token_source(config: Optional[PluginConfig] = None) -> Optional[str]:
    """Name where the API token would come from, or None when there is none."""
    if config is not None and has_api_token(config):
        return "config file"
    if os.environ.get(ENV_API_TOKEN, "").strip():
        return f"{ENV_API_TOKEN} environment variable"
    if has_chutes_auth():
        return "OpenCode auth.json"
    return None


def get_plugin_status(config: Optional[PluginConfig] = None) -> Dict[str, Any]:
    """Collect installation and token status."""
    locations = find_installed_plugins()
    token_source = get_token_source(config)
    return {
        "plugin_installed": bool(locations),
        "plugin_locations": locations,
        "api_token_connected": token_source is not None,
        "api_token_source": token_source,
    }


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Check plugin installation and API token configuration."""
    plugin_status = get_plugin_status(ctx.obj.get("config"))

    if ctx.obj["format"] == "json":
        format_json(format_status_json(plugin_status))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_status_table(plugin_status, console)
