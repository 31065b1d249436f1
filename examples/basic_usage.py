#!/usr/bin/env python3
"""Example of basic fetcher and registry usage."""

import sys

from chutes_model_registry import FetcherConfig, ModelFetcher, ModelFetchError, resolve_api_token


def print_model_info(fetcher, display_id):
    """Print information about a model.

    Args:
        fetcher: Fetcher whose registry holds the model
        display_id: Prefixed id such as ``chutes/Qwen/Qwen3-32B``
    """
    registry = fetcher.get_registry()
    info = registry.get_display_info(display_id)
    if info is None:
        print(f"Unknown model: {display_id}\n")
        return

    print(f"Model: {info.display_name}")
    print(f"  Native id: {registry.get_original_id(display_id)}")
    print(f"  Owner: {info.owned_by}")
    print(f"  Context length: {info.context_length:,}")
    print(f"  Pricing: ${info.pricing.prompt_per_1m:.2f} in / ${info.pricing.completion_per_1m:.2f} out per 1M")
    print(f"  Features: {', '.join(info.features) or '-'}")
    print()


def main():
    """Run the example."""
    fetcher = ModelFetcher(FetcherConfig(cache_ttl_seconds=300))
    fetcher.set_api_token(resolve_api_token())

    with fetcher:
        try:
            models = fetcher.fetch_models()
        except ModelFetchError as e:
            print(f"Failed to fetch models ({e.kind.value}): {e}")
            return 1

        print(f"Fetched {len(models)} models\n")

        registry = fetcher.get_registry()
        for info in registry.get_all_display_info()[:3]:
            print_model_info(fetcher, info.id)

        print("Models supporting tool calls:")
        for model in registry.find_by_feature("tools"):
            print(f"  {registry.get_display_id(model.id)}")

        # Served from the cache; no second request is made
        fetcher.fetch_models()
        print(f"\nCache age: {fetcher.get_cache_age() / 1000:.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
