"""Access to API keys stored by OpenCode in ``auth.json``.

The file maps provider names to entries such as
``{"chutes": {"type": "api", "key": "..."}}``.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union, cast

from .config_paths import get_auth_file_path
from .logging import LogEvent, log_debug

# Keys accepted as evidence that a Chutes token was connected
_CHUTES_AUTH_KEYS = ("chutes", "CHUTES_API_TOKEN", "chutes_api_token")


def read_opencode_auth(path: Optional[Union[str, Path]] = None) -> Optional[Dict[str, Any]]:
    """Read OpenCode's auth file.

    Args:
        path: Override for the auth file location

    Returns:
        Parsed file contents, or None if the file is missing or unreadable
    """
    auth_path = Path(path) if path is not None else get_auth_file_path()
    if not auth_path.is_file():
        return None

    try:
        with open(auth_path, "r", encoding="utf-8") as f:
            auth = json.load(f)
    except (OSError, ValueError) as e:
        log_debug(LogEvent.AUTH, "Failed to read auth file", path=str(auth_path), error=str(e))
        return None

    if not isinstance(auth, dict):
        log_debug(LogEvent.AUTH, "Auth file is not a JSON object", path=str(auth_path))
        return None
    return cast(Dict[str, Any], auth)


def get_chutes_api_key_from_auth(path: Optional[Union[str, Path]] = None) -> Optional[str]:
    """Return the Chutes API key stored by ``/connect chutes``, if any."""
    auth = read_opencode_auth(path)
    if not auth:
        return None

    entry = auth.get("chutes")
    if not isinstance(entry, dict):
        return None
    key = entry.get("key")
    return key if isinstance(key, str) and key else None


def has_chutes_auth(path: Optional[Union[str, Path]] = None) -> bool:
    """Check whether the auth file holds any Chutes credential."""
    auth = read_opencode_auth(path)
    if not auth:
        return False
    return any(auth.get(key) for key in _CHUTES_AUTH_KEYS)
