"""Registry and cache for models served by the Chutes inference API.

This package lists the models exposed by the Chutes API, caches them for a
bounded time window and maps between the provider's native model ids and the
prefixed display ids (``chutes/<model id>``) used by the OpenCode host.
"""

# Version of the package
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

try:
    __version__ = _version("chutes-model-registry")
except PackageNotFoundError:
    raise ImportError(
        "Failed to determine package version. chutes-model-registry must be installed as a package "
        "(pip install -e . for development)."
    )

# Import main components for easier access
from .cache import ModelCache
from .config import PluginConfig, has_api_token, load_config, resolve_api_token, validate_config
from .errors import (
    ConfigurationError,
    FetchErrorKind,
    InvalidConfigError,
    ModelFetchError,
    ModelRegistryError,
)
from .fetcher import FetcherConfig, ModelFetcher
from .plugin import ChutesPlugin, model_to_opencode_format
from .registry import ModelRegistry
from .types import (
    DEFAULT_CONTEXT_LENGTH,
    CachedModelData,
    ChutesModel,
    ModelDisplayInfo,
    ModelPricing,
    to_display_info,
)

# Define public API
__all__ = [
    # Core
    "ModelCache",
    "ModelRegistry",
    "ModelFetcher",
    "FetcherConfig",
    # Data types
    "ChutesModel",
    "ModelPricing",
    "ModelDisplayInfo",
    "CachedModelData",
    "DEFAULT_CONTEXT_LENGTH",
    "to_display_info",
    # Configuration
    "PluginConfig",
    "validate_config",
    "has_api_token",
    "load_config",
    "resolve_api_token",
    # Host plugin
    "ChutesPlugin",
    "model_to_opencode_format",
    # Errors
    "ModelRegistryError",
    "ModelFetchError",
    "FetchErrorKind",
    "ConfigurationError",
    "InvalidConfigError",
]
