"""Path resolution for configuration, auth and plugin install locations.

User configuration follows the XDG Base Directory Specification through
platformdirs. The OpenCode host keeps its own files under fixed XDG-style
paths, which are resolved here as well.
"""

import os
from pathlib import Path
from typing import Optional

import platformdirs

# Application name used for directory paths
APP_NAME = "chutes-plugin"

# Environment variable names
ENV_CONFIG_PATH = "CHUTES_CONFIG_PATH"
ENV_API_TOKEN = "CHUTES_API_TOKEN"
ENV_XDG_DATA_HOME = "XDG_DATA_HOME"

# Default filenames
CONFIG_FILENAME = "config.yml"
AUTH_FILENAME = "auth.json"
PLUGIN_FILENAME = "chutes-plugin.js"
OPENCODE_CONFIG_FILENAME = "opencode.json"


def get_user_config_dir() -> Path:
    """Get the path to the user's config directory for this application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_config_path(explicit_path: Optional[str] = None) -> Path:
    """Get the path to the plugin configuration file.

    Args:
        explicit_path: Path passed by the caller, takes precedence

    Returns:
        Path to the configuration file (it may not exist)
    """
    # 1. Explicit argument
    if explicit_path:
        return Path(explicit_path)

    # 2. Check environment variable
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path)

    # 3. Fall back to user config directory
    return get_user_config_dir() / CONFIG_FILENAME


def get_opencode_data_dir() -> Path:
    """Get OpenCode's data directory (``$XDG_DATA_HOME/opencode``)."""
    data_home = os.environ.get(ENV_XDG_DATA_HOME)
    if data_home:
        return Path(data_home) / "opencode"
    return Path.home() / ".local" / "share" / "opencode"


def get_auth_file_path() -> Path:
    """Get the path of OpenCode's ``auth.json``."""
    return get_opencode_data_dir() / AUTH_FILENAME


def get_project_plugin_dir(project_dir: Optional[Path] = None) -> Path:
    """Get the project-local plugin directory (``.opencode/plugin``)."""
    return (project_dir or Path.cwd()) / ".opencode" / "plugin"


def get_global_plugin_dir() -> Path:
    """Get the user-wide plugin directory (``~/.config/opencode/plugin``)."""
    return Path.home() / ".config" / "opencode" / "plugin"
