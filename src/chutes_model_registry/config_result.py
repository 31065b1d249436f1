"""Configuration loading result object.

This module defines a standard result object for configuration loading operations.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .config import PluginConfig


@dataclass
class ConfigResult:
    """Result of a configuration loading operation.

    Attributes:
        success: Whether the operation was successful
        config: Validated configuration (defaults when no file exists)
        error: Error message (if unsuccessful)
        exception: Original exception (if an error occurred)
        path: Path to the configuration file (if applicable)
        from_file: Whether values were read from ``path``
    """

    success: bool
    config: Optional["PluginConfig"] = None
    error: Optional[str] = None
    exception: Optional[Exception] = None
    path: Optional[str] = None
    from_file: bool = False
