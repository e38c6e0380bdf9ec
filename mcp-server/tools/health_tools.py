"""Health check and diagnostic tools for the MCP server."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from mcp.server.fastmcp import FastMCP

from intelx_client import ClientConfig, IntelXError, __version__
from intelx_client.keymanager import list_configured_keys

logger = logging.getLogger("intelx-mcp.health")


def register_tools(mcp: FastMCP) -> None:
    """Register health check tools with the MCP server."""

    @mcp.tool()
    def health_check() -> str:
        """Check MCP server health and IntelX client configuration.

        Returns:
            JSON string with server status, library version and whether the
            IntelX URL and token are configured.
        """
        logger.info("Running health check")

        health = {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "server": {
                "name": "intelx-mcp",
                "python_version": sys.version,
                "intelx_client_version": __version__,
            },
            "settings": list_configured_keys(),
        }

        try:
            config = ClientConfig.from_env()
            health["intelx"] = {
                "status": "configured",
                "url": config.url,
                "token_configured": config.token is not None,
            }
        except IntelXError as e:
            health["status"] = "degraded"
            health["intelx"] = {"status": "error", "error": str(e)}

        return json.dumps(health, indent=2)
