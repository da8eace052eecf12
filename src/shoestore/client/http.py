"""HTTP transport for the storefront client.

One ``httpx.Client`` per session with a fixed timeout. The bearer token from
the session is attached to every request, and non-2xx responses are turned
into the typed errors of ``shoestore.client.errors``. Nothing is retried.
"""

from typing import Any

import httpx

from shoestore.client.config import ClientConfig
from shoestore.client.errors import (
    AuthError,
    BadRequestError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    StorefrontError,
)
from shoestore.client.session import SessionContext
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_ERRORS = {
    400: BadRequestError,
    401: AuthError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: BadRequestError,
}


def _format_messages(value) -> str:
    if isinstance(value, list):
        return "; ".join(str(v) for v in value)
    return str(value)


def extract_error_detail(response: httpx.Response) -> str | None:
    """Extract a human-readable message from an API error response.

    Handles FastAPI's ``{"detail": ...}`` (string or validation list) and
    Protean's ``{"error": "msg"}`` / ``{"error": {"field": ["msg"]}}`` shapes.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: raw text, truncated
        return (response.text or "")[:300] or None

    if not isinstance(body, dict):
        return str(body)[:300]

    detail = body.get("detail")
    if isinstance(detail, list):
        parts = []
        for err in detail:
            if not isinstance(err, dict):
                parts.append(str(err))
                continue
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)
    if isinstance(detail, str):
        return detail

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(f"{k}: {_format_messages(v)}" for k, v in error.items())
        return str(error)

    if isinstance(body.get("message"), str):
        return body["message"]

    # Unknown shape: stringify and truncate
    return str(body)[:300]


class ApiClient:
    def __init__(self, config: ClientConfig, session: SessionContext, http: httpx.Client | None = None) -> None:
        self.session = session
        self.http = http or httpx.Client(base_url=config.api_url, timeout=config.timeout)

    def close(self) -> None:
        self.http.close()

    def request(self, method: str, path: str, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        try:
            response = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("api_timeout", method=method, path=path)
            raise NetworkError("The server took too long to respond.", detail=str(exc)) from exc
        except httpx.TransportError as exc:
            logger.warning("api_unreachable", method=method, path=path, error=str(exc))
            raise NetworkError(detail=str(exc)) from exc

        if response.is_error:
            self._raise_for_status(method, path, response)

        if not response.content:
            return None
        return response.json()

    def _raise_for_status(self, method: str, path: str, response: httpx.Response) -> None:
        status = response.status_code
        detail = extract_error_detail(response)

        if status == 401:
            self.session.end()

        if status >= 500:
            error_class = ServerError
            message = None
        else:
            error_class = _STATUS_ERRORS.get(status, StorefrontError)
            message = detail

        logger.info("api_error", method=method, path=path, status_code=status, detail=detail)
        raise error_class(message, status_code=status, detail=detail)

    def get(self, path: str, params: dict | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def upload(self, path: str, files: list[tuple[str, bytes, str]]) -> Any:
        """POST multipart ``files`` given as (filename, content, content_type)."""
        return self.request("POST", path, files=[("files", f) for f in files])
