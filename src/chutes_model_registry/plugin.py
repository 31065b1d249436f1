"""Host plugin wiring for OpenCode.

``ChutesPlugin`` registers the ``chutes`` provider in the host configuration,
fills it with the fetched models and exposes the tool handlers.
"""

from typing import Any, Callable, Dict, MutableMapping, Optional

from .auth import get_chutes_api_key_from_auth
from .config import DEFAULT_CONFIG, PluginConfig
from .errors import ModelRegistryError
from .fetcher import DEFAULT_API_BASE_URL, FetcherConfig, ModelFetcher
from .logging import LogEvent, log_info, log_warning
from .tools import list_models_tool, refresh_models_tool, status_tool
from .types import ModelDisplayInfo

PROVIDER_ID = "chutes"
DEFAULT_OUTPUT_LIMIT = 16384
DEFAULT_RELEASE_DATE = "2024-01-01"

ToolHandler = Callable[..., str]


def model_to_opencode_format(model: ModelDisplayInfo) -> Dict[str, Any]:
    """Convert a display entry into the host's model definition."""
    return {
        "id": model.original_id,
        "name": model.display_name,
        "release_date": DEFAULT_RELEASE_DATE,
        "attachment": "image" in model.input_modalities or "file" in model.input_modalities,
        "reasoning": "reasoning" in model.features,
        "temperature": True,
        "tool_call": "tools" in model.features,
        "cost": {
            "input": model.pricing.prompt_per_1m,
            "output": model.pricing.completion_per_1m,
        },
        "limit": {
            "context": model.context_length,
            "output": DEFAULT_OUTPUT_LIMIT,
        },
        "modalities": {
            "input": list(model.input_modalities),
            "output": list(model.output_modalities),
        },
        "options": {},
    }


class ChutesPlugin:
    """OpenCode plugin exposing Chutes models and tools."""

    def __init__(self, fetcher: Optional[ModelFetcher] = None, config: Optional[PluginConfig] = None):
        """Initialize the plugin.

        Args:
            fetcher: Fetcher to use; one is built from ``config`` when None
            config: Plugin configuration
        """
        self.config = config or DEFAULT_CONFIG
        self.fetcher = fetcher or ModelFetcher(
            FetcherConfig(
                api_base_url=DEFAULT_API_BASE_URL,
                cache_ttl_seconds=self.config.refresh_interval,
                prefix=self.config.prefix,
            )
        )
        self.api_token: Optional[str] = self.config.api_token
        if self.api_token:
            self.fetcher.set_api_token(self.api_token)

    @property
    def tools(self) -> Dict[str, ToolHandler]:
        """Tool handlers keyed by the names the host registers."""
        return {
            "chutes_list_models": self.list_models,
            "chutes_refresh_models": self.refresh_models,
            "chutes_status": self.status,
        }

    def list_models(
        self,
        filter: Optional[str] = None,
        owned_by: Optional[str] = None,
        feature: Optional[str] = None,
        show_pricing: bool = True,
    ) -> str:
        """List all available Chutes models with provider, pricing and features."""
        return list_models_tool(
            self.fetcher,
            self.api_token,
            name_filter=filter,
            owned_by=owned_by,
            feature=feature,
            show_pricing=show_pricing,
        )

    def refresh_models(self, force: bool = False) -> str:
        """Refresh the list of available Chutes models from the API."""
        return refresh_models_tool(self.fetcher, self.api_token, force=force)

    def status(self) -> str:
        """Check the status of the plugin and model cache."""
        return status_tool(self.fetcher, self.api_token)

    def _resolve_token(self, user_config: MutableMapping[str, Any]) -> Optional[str]:
        chutes_config = user_config.get("chutes")
        if isinstance(chutes_config, dict) and chutes_config.get("apiToken"):
            return str(chutes_config["apiToken"])

        provider = user_config.get("provider")
        if isinstance(provider, dict):
            provider_data = provider.get(PROVIDER_ID)
            if isinstance(provider_data, dict):
                options = provider_data.get("options")
                if isinstance(options, dict) and options.get("apiKey"):
                    return str(options["apiKey"])

        if self.api_token:
            return self.api_token

        return get_chutes_api_key_from_auth()

    def configure(self, user_config: MutableMapping[str, Any]) -> None:
        """Register the provider in the host configuration, in place.

        When auto refresh is enabled the provider's ``models`` block is filled
        from the API. Fetch failures are logged and the host starts without
        models; they can be refreshed later with the refresh tool.
        """
        auto_refresh = self.config.auto_refresh
        chutes_config = user_config.get("chutes")
        if isinstance(chutes_config, dict) and isinstance(chutes_config.get("autoRefresh"), bool):
            auto_refresh = chutes_config["autoRefresh"]

        self.api_token = self._resolve_token(user_config)
        if self.api_token:
            self.fetcher.set_api_token(self.api_token)

        base_url = self.fetcher.config.api_base_url
        provider_config = user_config.setdefault("provider", {})
        models_config: Dict[str, Any] = {}
        provider_config[PROVIDER_ID] = {
            "api": base_url,
            "name": "Chutes",
            "env": ["CHUTES_API_TOKEN"],
            "id": PROVIDER_ID,
            "models": models_config,
            "options": {
                "apiKey": self.api_token,
                "baseURL": base_url,
            },
        }

        if not auto_refresh:
            return

        try:
            self.fetcher.refresh_models()
        except ModelRegistryError as e:
            log_warning(LogEvent.PLUGIN, "Model refresh failed during configuration", error=str(e))
            return

        registry = self.fetcher.get_registry()
        for model in registry.get_all_display_info():
            model_key = registry.get_original_id(model.id) or model.original_id
            models_config[model_key] = model_to_opencode_format(model)
        log_info(LogEvent.PLUGIN, "Registered models with host", count=len(models_config))
