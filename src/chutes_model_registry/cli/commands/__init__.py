"""CLI commands package."""

# Import all command modules to make them available
from . import doctor, install, models, status

__all__ = ["install", "status", "models", "doctor"]
