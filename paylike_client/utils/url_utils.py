"""URL path helpers"""

from typing import Dict
from urllib.parse import quote


def build_path(template: str, **segments: str) -> str:
    """Fill a route template such as "/merchants/{merchant_id}" with percent-encoded segments"""
    encoded: Dict[str, str] = {}
    for name, value in segments.items():
        if not value:
            raise ValueError(f"{name} must be a non-empty string")
        encoded[name] = quote(str(value), safe="")
    return template.format(**encoded)


def limit_params(limit: int) -> Dict[str, int]:
    """Query parameters for list endpoints"""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return {"limit": limit}
