"""Transport client shared by all IntelX resource services."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

import requests

from .analyzer import AnalyzerService
from .config import ClientConfig
from .constants import CONTENT_TYPE_JSON
from .context import Context
from .errors import (
    APITimeoutError,
    HTTPStatusError,
    NetworkError,
    RequestConstructionError,
)

logger = logging.getLogger(__name__)

# Matches sensitive query parameters/header values that may appear in exception messages.
_SENSITIVE_PARAM_RE = re.compile(
    r"((?:key|api_key|Authorization|token|password|secret)[=:]\s*(?:Token\s+)?)[^\s&,;\"']+",
    re.IGNORECASE,
)

_ERROR_BODY_FIELDS = ("detail", "error", "errors", "message")


def _sanitize_message(msg: str) -> str:
    """Redact sensitive parameter values from a string."""
    return _SENSITIVE_PARAM_RE.sub(r"\1[REDACTED]", msg)


def _error_message(response: requests.Response) -> str:
    """Pull a human readable message out of an error response body."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for name in _ERROR_BODY_FIELDS:
            if payload.get(name):
                value = payload[name]
                return value if isinstance(value, str) else json.dumps(value)

    text = response.text.strip()
    return text or response.reason or "unknown error"


@dataclass(frozen=True)
class SuccessResponse:
    """Raw payload of a 2xx response."""

    status_code: int
    data: bytes


class IntelXClient:
    """Low-level HTTP client for an IntelX instance.

    Resource services (``client.analyzer``) build their requests through
    ``build_request()`` and send them with ``execute()``. Only the immutable
    ``ClientConfig`` persists between calls.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.analyzer = AnalyzerService(self)

    @classmethod
    def from_env(cls) -> "IntelXClient":
        """Client configured from INTELX_* environment variables or the keychain."""
        return cls(ClientConfig.from_env())

    def _headers(self, content_type: str) -> dict[str, str]:
        headers = {
            "Content-Type": content_type,
            "Accept": CONTENT_TYPE_JSON,
            "User-Agent": self.config.user_agent,
        }
        if self.config.token:
            headers["Authorization"] = f"Token {self.config.token}"
        return headers

    def build_request(
        self,
        ctx: Optional[Context],
        method: str,
        content_type: str,
        body: Any,
        url: str,
    ) -> requests.PreparedRequest:
        """Build a prepared request ready for ``execute()``.

        Args:
            ctx: Call context; a done context fails construction
            method: HTTP method
            content_type: Value of the Content-Type header, sent even without a body
            body: JSON-serializable object, raw bytes/str, or None
            url: Absolute request URL

        Raises:
            ContextCancelled: If ctx is already cancelled or expired
            RequestConstructionError: If the inputs cannot form a valid request
        """
        ctx = ctx or Context.background()
        ctx.raise_if_done()

        if not method:
            raise RequestConstructionError("HTTP method is required")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise RequestConstructionError(f"Malformed request URL: {url!r}")

        data: Optional[bytes] = None
        if body is not None:
            if isinstance(body, bytes):
                data = body
            elif isinstance(body, str):
                data = body.encode("utf-8")
            else:
                try:
                    data = json.dumps(body).encode("utf-8")
                except (TypeError, ValueError) as e:
                    raise RequestConstructionError(f"Request body is not JSON serializable: {e}") from e

        request = requests.Request(
            method=method.upper(),
            url=url,
            headers=self._headers(content_type),
            data=data,
        )
        try:
            return request.prepare()
        except (requests.RequestException, ValueError) as e:
            raise RequestConstructionError(f"Invalid request: {e}") from e

    def execute(self, ctx: Optional[Context], request: requests.PreparedRequest) -> SuccessResponse:
        """Send a prepared request once and normalize the outcome.

        A context deadline caps the request timeout, but ``requests`` applies
        that timeout per socket operation, so a slowly trickling response can
        outlive the deadline and a ``cancel()`` is only seen once ``send``
        returns.

        Raises:
            ContextCancelled: If ctx is done before or while the call runs
            APITimeoutError: If the request timed out
            NetworkError: On connection, DNS or TLS failures
            HTTPStatusError: On a non-2xx response
        """
        ctx = ctx or Context.background()
        ctx.raise_if_done()

        timeout = self.config.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        logger.debug("%s %s", request.method, request.url)
        try:
            response = self.session.send(
                request,
                timeout=timeout,
                verify=self.config.verify,
                proxies=self.config.proxy.proxies_for(request.url or ""),
            )
        except requests.Timeout as e:
            ctx.raise_if_done()
            raise APITimeoutError(f"Request to {request.url} timed out") from e
        except requests.RequestException as e:
            ctx.raise_if_done()
            raise NetworkError(f"Request failed: {_sanitize_message(str(e))}") from e

        # The caller gave up while the call was in flight.
        ctx.raise_if_done()

        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        if not 200 <= response.status_code < 300:
            raise HTTPStatusError(
                response.status_code,
                _sanitize_message(_error_message(response)),
                body=response.content,
            )

        return SuccessResponse(status_code=response.status_code, data=response.content)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "IntelXClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
