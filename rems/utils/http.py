"""Shared plumbing for the Vercel function handlers under api/."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import parse_qs, urlparse
from pydantic import BaseModel
from rems.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    FormValidationError,
    NotFoundError,
    SupabaseError,
)
from rems.utils.logging import correlation_context, get_structured_logger
from rems.utils.logging_config import AppConfig, LoggingConfig

logger = get_structured_logger(__name__)

Response = tuple[int, Any]

_logging_configured = False


def ensure_logging() -> None:
    """Configure logging once per warm function instance."""
    global _logging_configured
    if not _logging_configured:
        LoggingConfig.setup_logging()
        _logging_configured = True


def to_json(payload: Any) -> Any:
    """Make pydantic models (and lists of them) JSON serializable."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    if isinstance(payload, list):
        return [to_json(item) for item in payload]
    if isinstance(payload, dict):
        return {key: to_json(value) for key, value in payload.items()}
    return payload


class JsonHandler(BaseHTTPRequestHandler):
    """
    Base handler: subclasses implement ``async get/post/patch/delete`` returning
    ``(status, payload)``. Domain errors are mapped to responses here.
    """

    def send_json(self, status: int, payload: Any, headers: Optional[dict] = None) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(json.dumps(to_json(payload)).encode('utf-8'))

    def read_json(self) -> dict:
        content_length = int(self.headers.get('Content-Length', 0) or 0)
        raw_body = self.rfile.read(content_length).decode('utf-8') if content_length > 0 else ""
        if not raw_body:
            return {}
        try:
            body = json.loads(raw_body)
        except json.JSONDecodeError:
            raise FormValidationError("Request body must be JSON")
        if not isinstance(body, dict):
            raise FormValidationError("Request body must be a JSON object")
        return body

    def query_params(self) -> dict[str, str]:
        query = parse_qs(urlparse(self.path).query)
        return {key: values[0] for key, values in query.items() if values}

    def access_token(self) -> Optional[str]:
        header = self.headers.get("Authorization") or ""
        if header.lower().startswith("bearer "):
            return header[7:].strip() or None
        return None

    def _dispatch(self, method: Optional[Callable[[], Awaitable[Response]]]) -> None:
        ensure_logging()
        if method is None:
            self.send_json(405, {"error": "method not allowed"})
            return

        correlation_id = self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER) if self.headers else None
        with correlation_context(correlation_id) as cid:
            try:
                status, payload = asyncio.run(method())
                self.send_json(status, payload, {LoggingConfig.LOG_CORRELATION_ID_HEADER: cid})
            except (AuthenticationError, AuthorizationError) as e:
                logger.info("Redirecting to login", path=self.path, reason=str(e))
                self.send_json(
                    302,
                    {"error": str(e), "redirect": AppConfig.LOGIN_ROUTE},
                    {"Location": AppConfig.LOGIN_ROUTE},
                )
            except FormValidationError as e:
                self.send_json(400, {"error": str(e), "field": e.field})
            except NotFoundError as e:
                self.send_json(404, {"error": str(e)})
            except SupabaseError as e:
                logger.error("Data store error", path=self.path, error=str(e))
                self.send_json(502, {"error": "data store request failed", "detail": str(e)})
            except Exception as e:
                logger.error("Unhandled error", path=self.path, error=str(e), exc_info=True)
                self.send_json(500, {"error": "internal server error"})

    def do_GET(self):
        self._dispatch(getattr(self, "get", None))

    def do_POST(self):
        self._dispatch(getattr(self, "post", None))

    def do_PATCH(self):
        self._dispatch(getattr(self, "patch", None))

    def do_DELETE(self):
        self._dispatch(getattr(self, "delete", None))
