"""
Utility helpers for coalescing loosely-shaped provider payloads.
"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def safe_str(value: Any, default: str = "") -> str:
    """
    Safely convert value to string, handling None.

    Args:
        value: Any value to convert
        default: Default string if value is None

    Returns:
        String representation or default
    """
    if value is None:
        return default
    return str(value)


def safe_int(value: Any, default: int = 0) -> int:
    """
    Coerce a counter-like value to int.

    Accepts ints, floats, numeric strings and percent strings ("45%").
    Booleans and anything unparseable fall back to `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r"^\s*(-?\d+(?:\.\d+)?)\s*%?\s*$", str(value))
    if not match:
        return default
    return int(float(match.group(1)))


def safe_dict(value: Any) -> Dict[str, Any]:
    """Return value if it is a dict, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def first_present(*values: Any) -> Optional[Any]:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def short_code(team_name: str) -> str:
    """Generate a short code from team name."""
    if not team_name:
        return "???"

    words = team_name.split()
    if len(words) >= 2:
        # First letter of each word (up to 3)
        return "".join(w[0].upper() for w in words[:3])
    return team_name[:3].upper()


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
