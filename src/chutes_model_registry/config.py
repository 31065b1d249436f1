"""Plugin configuration: validation, file loading and token resolution."""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .auth import get_chutes_api_key_from_auth
from .config_paths import ENV_API_TOKEN, get_config_path
from .config_result import ConfigResult
from .errors import InvalidConfigError
from .logging import LogEvent, log_debug, log_info, log_warning
from .types import DEFAULT_PREFIX

MIN_REFRESH_INTERVAL = 60
MAX_REFRESH_INTERVAL = 86400
DEFAULT_REFRESH_INTERVAL = 3600

# Host configs use camelCase; snake_case is accepted for YAML files
_FIELD_ALIASES = {
    "apiToken": "api_token",
    "autoRefresh": "auto_refresh",
    "refreshInterval": "refresh_interval",
    "defaultModel": "default_model",
    "modelFilter": "model_filter",
}


@dataclass(frozen=True)
class PluginConfig:
    """Validated plugin configuration."""

    api_token: Optional[str] = None
    auto_refresh: bool = True
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL
    default_model: Optional[str] = None
    model_filter: Optional[List[str]] = field(default=None, hash=False)
    prefix: str = DEFAULT_PREFIX


DEFAULT_CONFIG = PluginConfig()


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def _non_empty_string(data: Dict[str, Any], name: str) -> Optional[str]:
    if name not in data or data[name] is None:
        return None
    value = data[name]
    if not isinstance(value, str):
        raise InvalidConfigError(f"{name} must be a string", field=name)
    if not value.strip():
        raise InvalidConfigError(f"{name} cannot be empty", field=name)
    return value


def validate_config(data: Optional[Mapping[str, Any]] = None) -> PluginConfig:
    """Validate raw configuration values and merge them over the defaults.

    Args:
        data: Mapping with camelCase or snake_case keys; unknown keys are ignored

    Returns:
        Validated configuration

    Raises:
        InvalidConfigError: If a value has the wrong type or is out of range
    """
    values = _normalize_keys(data or {})
    config = DEFAULT_CONFIG

    api_token = _non_empty_string(values, "api_token")
    if api_token is not None:
        config = replace(config, api_token=api_token)

    auto_refresh = values.get("auto_refresh")
    if auto_refresh is not None:
        if not isinstance(auto_refresh, bool):
            raise InvalidConfigError("auto_refresh must be a boolean", field="auto_refresh")
        config = replace(config, auto_refresh=auto_refresh)

    refresh_interval = values.get("refresh_interval")
    if refresh_interval is not None:
        # bool is an int subclass and must not pass as a number
        if isinstance(refresh_interval, bool) or not isinstance(refresh_interval, (int, float)):
            raise InvalidConfigError("refresh_interval must be a number", field="refresh_interval")
        if refresh_interval < MIN_REFRESH_INTERVAL:
            raise InvalidConfigError(
                f"refresh_interval must be at least {MIN_REFRESH_INTERVAL} seconds", field="refresh_interval"
            )
        if refresh_interval > MAX_REFRESH_INTERVAL:
            raise InvalidConfigError(
                f"refresh_interval must be at most {MAX_REFRESH_INTERVAL} seconds (24 hours)",
                field="refresh_interval",
            )
        config = replace(config, refresh_interval=int(refresh_interval))

    default_model = _non_empty_string(values, "default_model")
    if default_model is not None:
        config = replace(config, default_model=default_model)

    model_filter = values.get("model_filter")
    if model_filter is not None:
        if not isinstance(model_filter, list):
            raise InvalidConfigError("model_filter must be a list", field="model_filter")
        if not all(isinstance(item, str) for item in model_filter):
            raise InvalidConfigError("model_filter values must be strings", field="model_filter")
        config = replace(config, model_filter=list(model_filter))

    prefix = _non_empty_string(values, "prefix")
    if prefix is not None:
        if "/" in prefix:
            raise InvalidConfigError("prefix must not contain '/'", field="prefix")
        config = replace(config, prefix=prefix)

    return config


def has_api_token(config: PluginConfig) -> bool:
    """Check whether ``config`` carries a usable API token."""
    return config.api_token is not None and config.api_token.strip() != ""


def load_config(path: Optional[str] = None) -> ConfigResult:
    """Load and validate the YAML configuration file.

    The file is looked up at ``path``, then ``CHUTES_CONFIG_PATH``, then the
    user config directory. A missing file yields the default configuration.

    Args:
        path: Explicit configuration file path

    Returns:
        ConfigResult holding the configuration or the failure
    """
    config_path = get_config_path(path)
    if not config_path.is_file():
        log_debug(LogEvent.CONFIG, "No configuration file, using defaults", path=str(config_path))
        return ConfigResult(success=True, config=DEFAULT_CONFIG, path=str(config_path))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        log_warning(LogEvent.CONFIG, "Failed to read configuration file", path=str(config_path), error=str(e))
        return ConfigResult(
            success=False,
            error=f"Failed to read configuration file: {e}",
            exception=e,
            path=str(config_path),
        )

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        error = InvalidConfigError(
            f"Configuration file must contain a mapping, got {type(raw).__name__}",
            field="<root>",
            path=str(config_path),
        )
        return ConfigResult(success=False, error=str(error), exception=error, path=str(config_path))

    try:
        config = validate_config(raw)
    except InvalidConfigError as e:
        e.path = str(config_path)
        return ConfigResult(success=False, error=str(e), exception=e, path=str(config_path))

    log_info(LogEvent.CONFIG, "Loaded configuration", path=str(config_path))
    return ConfigResult(success=True, config=config, path=str(config_path), from_file=True)


def resolve_api_token(config: Optional[PluginConfig] = None) -> Optional[str]:
    """Resolve the API token: config, then ``CHUTES_API_TOKEN``, then auth.json."""
    if config is not None and has_api_token(config):
        return config.api_token

    env_token = os.environ.get(ENV_API_TOKEN)
    if env_token and env_token.strip():
        return env_token

    return get_chutes_api_key_from_auth()
