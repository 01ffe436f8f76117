"""Test helper functions."""

import json
from http.client import HTTPMessage
from io import BytesIO
from typing import Any, Dict, Optional
from unittest.mock import Mock


def call_handler(
    handler_cls,
    method: str = "GET",
    path: str = "/",
    body: Optional[Dict[str, Any]] = None,
    token: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Run one request through a BaseHTTPRequestHandler subclass without a socket.

    Returns {"status", "headers", "body"}.
    """
    raw_body = json.dumps(body).encode("utf-8") if body is not None else b""

    h = handler_cls.__new__(handler_cls)
    h.command = method
    h.path = path
    h.request_version = "HTTP/1.1"
    h.headers = HTTPMessage()
    h.headers["Content-Length"] = str(len(raw_body))
    if body is not None:
        h.headers["Content-Type"] = "application/json"
    if token:
        h.headers["Authorization"] = f"Bearer {token}"
    for name, value in (headers or {}).items():
        h.headers[name] = value
    h.rfile = BytesIO(raw_body)
    h.wfile = BytesIO()

    sent_headers: Dict[str, str] = {}
    h.send_response = Mock()
    h.send_header = Mock(side_effect=lambda name, value: sent_headers.__setitem__(name, value))
    h.end_headers = Mock()

    getattr(h, f"do_{method}")()

    h.wfile.seek(0)
    return {
        "status": h.send_response.call_args[0][0],
        "headers": sent_headers,
        "body": h.wfile.read().decode("utf-8"),
    }
