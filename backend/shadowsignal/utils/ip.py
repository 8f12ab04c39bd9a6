from __future__ import annotations

from flask import Request


# Checked in order; the first non-empty value wins.
_PROXY_HEADERS = ("CF-Connecting-IP", "X-Real-IP", "X-Forwarded-For")


def get_client_ip(request: Request, trust_proxy_headers: bool = True) -> str | None:
    """Best guess at the address a Socket.IO connection came from, for logs."""
    if trust_proxy_headers:
        for header in _PROXY_HEADERS:
            raw = request.headers.get(header, "")
            # X-Forwarded-For is a list; the client is the left-most entry.
            first = raw.split(",")[0].strip()
            if first:
                return first

    return request.remote_addr or None
