"""CLI formatters package."""

from .json import (
    format_doctor_json,
    format_json,
    format_models_list_json,
    format_status_json,
)
from .table import (
    create_console,
    format_doctor_table,
    format_models_table,
    format_status_table,
)

__all__ = [
    "format_json",
    "format_models_list_json",
    "format_status_json",
    "format_doctor_json",
    "create_console",
    "format_models_table",
    "format_status_table",
    "format_doctor_table",
]
