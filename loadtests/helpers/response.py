"""Response error extraction for load test observability.

Every storefront error body has the shape
``{"error": {"code": "...", "message": "...", "details": [...]}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        detail = f"{error.get('code', '?')}: {error.get('message', '')}"
        if error.get("details"):
            detail += " | " + " | ".join(str(d) for d in error["details"])
        return detail[:300]

    # Unknown shape, stringify and truncate
    return str(body)[:300]


def error_code(response: Response) -> str | None:
    try:
        return response.json()["error"]["code"]
    except (ValueError, KeyError, TypeError):
        return None
