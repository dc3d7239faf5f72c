"""Response error extraction for load test observability.

Parses inventory API error responses into human-readable messages. Every
error uses the same envelope::

    {"status": "error", "message": "...", "errors": [{"field": "...", "message": "..."}]}

``errors`` is present only for field-level validation failures.
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
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    message = str(body.get("message") or "")
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        parts = [
            f"{err.get('field')}: {err.get('message')}" if isinstance(err, dict) else str(err) for err in errors
        ]
        return f"{message} — {' | '.join(parts)}" if message else " | ".join(parts)

    if message:
        return message

    # Unknown shape: stringify and truncate
    return str(body)[:300]
