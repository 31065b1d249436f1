"""Common CLI options and decorators."""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

import click

F = TypeVar("F", bound=Callable[..., Any])


def model_filter_options(func: F) -> F:
    """Add --filter, --owner and --feature options to a command."""

    @click.option("--filter", "name_filter", type=str, help="Filter models by name (substring match).")
    @click.option("--owner", type=str, help='Filter models by owner/provider (e.g., "Qwen", "DeepSeek").')
    @click.option("--feature", type=str, help='Filter by supported feature (e.g., "json_mode", "tools").')
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def install_target_option(func: F) -> F:
    """Add --target option to a command."""

    @click.option(
        "--target",
        type=click.Choice(["project", "global"], case_sensitive=False),
        help="Install into ./.opencode/plugin (project) or ~/.config/opencode/plugin (global).",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs.get("target"):
            kwargs["target"] = kwargs["target"].lower()
        return func(*args, **kwargs)

    return cast(F, wrapper)
