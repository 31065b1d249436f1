"""JSON output formatter for CLI."""

import datetime as _dt
import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, TextIO

from ...types import ModelDisplayInfo


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - datetime/date -> ISO 8601 string
    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_models_list_json(models: List[ModelDisplayInfo], show_pricing: bool = True) -> Dict[str, Any]:
    """Format display models for JSON output.

    Args:
        models: Display entries in registry order
        show_pricing: Include the pricing block

    Returns:
        Formatted data structure
    """
    entries = []
    for model in models:
        entry = model.to_dict()
        if not show_pricing:
            entry.pop("pricing", None)
        entries.append(entry)
    return {"models": entries, "count": len(entries)}


def format_status_json(status: Dict[str, Any]) -> Dict[str, Any]:
    """Format plugin status for JSON output."""
    return {
        "plugin_installed": status.get("plugin_installed", False),
        "plugin_locations": status.get("plugin_locations", []),
        "api_token_connected": status.get("api_token_connected", False),
        "api_token_source": status.get("api_token_source"),
    }


def format_doctor_json(checks: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Format doctor results for JSON output."""
    passed = sum(1 for check in checks if check["passed"])
    return {"checks": checks, "passed": passed, "total": len(checks), "ok": passed == len(checks)}
