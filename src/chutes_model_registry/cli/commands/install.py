"""Plugin installation command for the chutes-plugin CLI."""

import os
import shutil
from pathlib import Path
from typing import Optional

import click

from ...config_paths import (
    OPENCODE_CONFIG_FILENAME,
    PLUGIN_FILENAME,
    get_global_plugin_dir,
    get_project_plugin_dir,
)
from ...logging import LogEvent, log_error, log_info
from ..formatters import create_console, format_json
from ..utils import ExitCode, handle_error, install_target_option

ENV_PLUGIN_BUNDLE = "CHUTES_PLUGIN_BUNDLE"
DEFAULT_BUNDLE_PATH = Path("dist") / "bundle.js"


def resolve_bundle_path(bundle: Optional[str] = None) -> Path:
    """Resolve the plugin bundle: --bundle, then CHUTES_PLUGIN_BUNDLE, then dist/bundle.js."""
    if bundle:
        return Path(bundle)
    env_bundle = os.environ.get(ENV_PLUGIN_BUNDLE)
    if env_bundle:
        return Path(env_bundle)
    return Path.cwd() / DEFAULT_BUNDLE_PATH


def install_plugin(bundle_path: Path, plugin_dir: Path) -> Path:
    """Copy the bundle into ``plugin_dir``, creating it if needed.

    Returns:
        Path of the installed plugin file

    Raises:
        FileNotFoundError: If the bundle does not exist
    """
    if not bundle_path.is_file():
        raise FileNotFoundError(f"{bundle_path} not found. Build the plugin bundle first.")

    plugin_dir.mkdir(parents=True, exist_ok=True)
    plugin_file = plugin_dir / PLUGIN_FILENAME
    shutil.copyfile(bundle_path, plugin_file)
    log_info(LogEvent.INSTALL, "Installed plugin", source=str(bundle_path), target=str(plugin_file))
    return plugin_file


@click.command()
@click.option("--bundle", type=click.Path(dir_okay=False), help="Plugin bundle to install (default: dist/bundle.js).")
@install_target_option
@click.option("--yes", "-y", is_flag=True, help="Do not prompt; install into the project unless --target is given.")
@click.pass_context
def install(
    ctx: click.Context, bundle: Optional[str] = None, target: Optional[str] = None, yes: bool = False
) -> None:
    """Install the plugin into the current project or globally.

    When an opencode.json exists in the current directory and neither
    --target nor --yes is given, you are asked where to install.
    """
    bundle_path = resolve_bundle_path(bundle)
    if not bundle_path.is_file():
        handle_error(
            FileNotFoundError(f"{bundle_path} not found. Build the plugin bundle first."),
            ExitCode.DATA_SOURCE_ERROR,
        )

    project_dir = Path.cwd()
    console = create_console(no_color=ctx.obj["no_color"])

    if target is None:
        target = "project"
        if not yes and (project_dir / OPENCODE_CONFIG_FILENAME).exists():
            console.print(f"Detected {OPENCODE_CONFIG_FILENAME} in current directory.\n")
            console.print("Where would you like to install the plugin?")
            console.print("  \\[1] Project (./.opencode/plugin/)")
            console.print("  \\[2] Global (~/.config/opencode/plugin/)")
            console.print("  \\[c] Cancel\n")
            answer = click.prompt("Select option [1/2/c]", default="1", show_default=False).strip().lower()
            if answer == "2":
                target = "global"
            elif answer != "1":
                console.print("Installation cancelled.")
                return

    plugin_dir = get_project_plugin_dir(project_dir) if target == "project" else get_global_plugin_dir()

    try:
        plugin_file = install_plugin(bundle_path, plugin_dir)
    except OSError as e:
        log_error(LogEvent.INSTALL, "Failed to install plugin", target=str(plugin_dir), error=str(e))
        handle_error(e, ExitCode.GENERIC_ERROR)

    if ctx.obj["format"] == "json":
        format_json({"success": True, "target": target, "location": str(plugin_file)})
        return

    console.print("✅ [green]Successfully installed![/green]")
    console.print(f"   Location: {plugin_file}\n")
    console.print("Next steps:")
    console.print("1. Restart OpenCode if it's running")
    console.print("2. Run: opencode")
    console.print("3. Connect your token: /connect chutes")
    console.print("4. Select a Chutes model from the dropdown")
    console.print("\nAvailable tools:")
    console.print("   - chutes_list_models")
    console.print("   - chutes_refresh_models")
    console.print("   - chutes_status")
