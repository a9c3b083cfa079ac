"""Helper utilities (time, responses, request helpers)."""
from datetime import datetime, timezone
from typing import Optional
from fastapi import Request


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_response(data=None, success=True):
    return {"success": success, "data": data}


def get_client_ip(request: Optional[Request]) -> str:
    """Return client's IP address from request headers or connection info.

    Checks `X-Forwarded-For` first (comma-separated), then falls back to
    `request.client.host`. Returns 'unknown' if not found.
    """
    if request is None:
        return "unknown"

    x_forwarded_for = request.headers.get("x-forwarded-for")
    if x_forwarded_for:
        # X-Forwarded-For can contain a list of IPs
        return x_forwarded_for.split(",")[0].strip()

    client = getattr(request, "client", None)
    if client and getattr(client, "host", None):
        return client.host

    return "unknown"


def get_user_agent(request: Optional[Request]) -> str:
    if request is None:
        return ""
    return request.headers.get("user-agent", "")[:512]
