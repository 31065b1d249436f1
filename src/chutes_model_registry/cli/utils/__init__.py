"""CLI utilities package."""

from .helpers import (
    ExitCode,
    create_fetcher,
    exit_code_for_fetch_error,
    handle_error,
    resolve_format,
)
from .options import (
    install_target_option,
    model_filter_options,
)

__all__ = [
    "ExitCode",
    "resolve_format",
    "handle_error",
    "create_fetcher",
    "exit_code_for_fetch_error",
    "model_filter_options",
    "install_target_option",
]
