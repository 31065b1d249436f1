"""Tool handlers exposed to the host application.

Each handler returns markdown for the host to display. Failures are
reported as text starting with ``[ERROR]`` rather than raised, since the
host shows tool output verbatim.
"""

from typing import List, Optional

from .errors import ModelRegistryError
from .fetcher import ModelFetcher
from .logging import LogEvent, log_warning
from .types import ModelDisplayInfo

MISSING_TOKEN_MESSAGE = (
    "[ERROR] No CHUTES_API_TOKEN configured. Please add "
    '"chutes": { "apiToken": "your-token" } to your OpenCode config'
)


def _seconds(milliseconds: Optional[float]) -> int:
    return int((milliseconds or 0) // 1000)


def filter_display_models(
    models: List[ModelDisplayInfo],
    name_filter: Optional[str] = None,
    owned_by: Optional[str] = None,
    feature: Optional[str] = None,
) -> List[ModelDisplayInfo]:
    """Filter display entries by name substring, owner substring and exact feature.

    Name and owner matching is case-insensitive.
    """
    if name_filter:
        needle = name_filter.lower()
        models = [m for m in models if needle in m.display_name.lower()]

    if owned_by:
        owner = owned_by.lower()
        models = [m for m in models if owner in m.owned_by.lower()]

    if feature and feature.strip():
        tag = feature.strip()
        models = [m for m in models if tag in m.features]

    return models


def format_model_markdown(model: ModelDisplayInfo, show_pricing: bool = True) -> str:
    """Render one model as a markdown section."""
    lines = [
        f"## {model.display_name}",
        f"- **ID**: `{model.id}`",
        f"- **Provider**: {model.owned_by}",
    ]
    if model.quantization:
        lines.append(f"- **Quantization**: {model.quantization}")
    lines.append(f"- **Context Length**: {model.context_length:,} tokens")
    if show_pricing:
        lines.append(
            f"- **Pricing**: ${model.pricing.prompt_per_1m:.2f}/1M input, "
            f"${model.pricing.completion_per_1m:.2f}/1M output"
        )
    lines.append(f"- **Features**: {', '.join(model.features)}")
    if model.supports_confidential_compute:
        lines.append("- **Confidential Compute**: Yes")
    return "\n".join(lines) + "\n"


def list_models_tool(
    fetcher: ModelFetcher,
    api_token: Optional[str],
    name_filter: Optional[str] = None,
    owned_by: Optional[str] = None,
    feature: Optional[str] = None,
    show_pricing: bool = True,
) -> str:
    """List available models, fetching them first when the cache is stale."""
    try:
        models = fetcher.get_cached_models()
        if models is None or fetcher.is_cache_stale():
            if not api_token:
                return MISSING_TOKEN_MESSAGE + " to fetch models."
            fetcher.refresh_models()

        display_models = filter_display_models(
            fetcher.get_registry().get_all_display_info(),
            name_filter=name_filter,
            owned_by=owned_by,
            feature=feature,
        )

        if not display_models:
            return "No models found matching the specified criteria."

        output = f"# Available Chutes Models ({len(display_models)})\n\n"
        output += "\n".join(format_model_markdown(model, show_pricing) for model in display_models)
        output += "\n"

        cache_age = fetcher.get_cache_age()
        if cache_age is not None:
            output += f"---\n*Cache age: {_seconds(cache_age)}s ago*"

        return output
    except ModelRegistryError as e:
        log_warning(LogEvent.PLUGIN, "Listing models failed", error=str(e))
        return f"[ERROR] Failed to list models: {e}"


def refresh_models_tool(fetcher: ModelFetcher, api_token: Optional[str], force: bool = False) -> str:
    """Refresh the model list and describe what happened."""
    if not api_token:
        return MISSING_TOKEN_MESSAGE + "."

    try:
        was_stale = fetcher.is_cache_stale()
        fetcher.refresh_models(force)
        count = fetcher.get_registry().size()

        if force and not was_stale:
            message = f"Forced refresh completed. Found {count} models."
        elif was_stale:
            message = f"Cache was stale, refreshed. Found {count} models."
        else:
            remaining = _seconds(fetcher.get_cache_remaining_ttl())
            message = f"Cache still valid ({remaining}s remaining). Found {count} models."

        return f"{message}\n\nUse the chutes_list_models tool to see available models."
    except ModelRegistryError as e:
        log_warning(LogEvent.PLUGIN, "Refreshing models failed", error=str(e))
        return f"[ERROR] Failed to refresh models: {e}"


def status_tool(fetcher: ModelFetcher, api_token: Optional[str]) -> str:
    """Describe the cache state."""
    is_cached = fetcher.is_cache_valid()
    registry = fetcher.get_registry()

    status = "# Chutes Plugin Status\n\n"
    status += f"- **Models Cached**: {registry.size()}\n"
    status += f"- **Cache Valid**: {'Yes' if is_cached else 'No'}\n"

    if is_cached:
        status += f"- **Cache Age**: {_seconds(fetcher.get_cache_age())}s\n"
        status += f"- **Remaining TTL**: {_seconds(fetcher.get_cache_remaining_ttl())}s\n"

    if not api_token:
        status += (
            "\n**Warning**: No API token configured. "
            'Add "chutes": { "apiToken": "your-token" } to your config.\n'
        )

    return status
