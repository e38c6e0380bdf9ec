"""Analyzer endpoints of the IntelX API."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

from .constants import ANALYZER_CONFIG_URL, ANALYZER_HEALTHCHECK_URL, CONTENT_TYPE_JSON
from .context import Context
from .errors import DecodeError, RequestConstructionError
from .types import AnalyzerConfig, StatusResponse

if TYPE_CHECKING:
    from .client import IntelXClient

logger = logging.getLogger(__name__)


def _decode_json(data: bytes, what: str) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"{what}: invalid JSON payload: {e}") from e


class AnalyzerService:
    """Analyzer related methods of the IntelX API.

    API docs: https://intelx.readthedocs.io/en/latest/Redoc.html#tag/analyzer
    """

    def __init__(self, client: IntelXClient):
        self.client = client

    def _get(self, ctx: Optional[Context], route: str) -> bytes:
        url = self.client.config.url + route
        request = self.client.build_request(ctx, "GET", CONTENT_TYPE_JSON, None, url)
        return self.client.execute(ctx, request).data

    def get_configs(self, ctx: Optional[Context] = None) -> list[AnalyzerConfig]:
        """List every analyzer configuration on the instance.

        Endpoint: GET /api/get_analyzer_configs

        The server answers with an object keyed by analyzer name; the result
        is ordered by that name so output is stable across calls.

        Args:
            ctx: Optional cancellation context

        Returns:
            Analyzer configurations sorted by name
        """
        payload = _decode_json(self._get(ctx, ANALYZER_CONFIG_URL), "analyzer configs")
        if not isinstance(payload, dict):
            raise DecodeError(
                f"analyzer configs: expected JSON object, got {type(payload).__name__}"
            )

        configs = []
        for name in sorted(payload):
            config = AnalyzerConfig.from_dict(payload[name], what=f"analyzer {name!r}")
            if not config.name:
                config.name = name
            configs.append(config)

        logger.debug("Fetched %d analyzer configs", len(configs))
        return configs

    def health_check(self, analyzer_name: str, ctx: Optional[Context] = None) -> bool:
        """Check whether the given analyzer is up and running.

        Endpoint: GET /api/analyzer/{name}/healthcheck

        Args:
            analyzer_name: Analyzer name, used as one URL path segment
            ctx: Optional cancellation context

        Returns:
            The server's status flag

        Raises:
            DecodeError: If the response does not carry a boolean status
        """
        if not analyzer_name:
            raise RequestConstructionError("analyzer name is required")

        route = ANALYZER_HEALTHCHECK_URL.format(name=quote(analyzer_name, safe=""))
        payload = _decode_json(self._get(ctx, route), "health check")
        return StatusResponse.from_dict(payload).status
