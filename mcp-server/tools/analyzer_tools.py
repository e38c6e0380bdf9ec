"""IntelX analyzer tools."""

from __future__ import annotations

import json
import logging
from functools import lru_cache

from mcp.server.fastmcp import FastMCP

from intelx_client import IntelXClient, IntelXError

logger = logging.getLogger("intelx-mcp.analyzer")


@lru_cache(maxsize=1)
def get_client() -> IntelXClient:
    """Get or create the IntelX client singleton (thread-safe via lru_cache)."""
    return IntelXClient.from_env()


def register_tools(mcp: FastMCP) -> None:
    """Register analyzer tools with the MCP server."""

    @mcp.tool()
    def list_analyzer_configs(include_disabled: bool = True) -> str:
        """List analyzer configurations on the IntelX instance, sorted by name.

        Args:
            include_disabled: Include analyzers that are disabled on the instance

        Returns:
            JSON string with the analyzer count and their configurations.
        """
        logger.info("Listing analyzer configs")

        try:
            configs = get_client().analyzer.get_configs()
        except IntelXError as e:
            return json.dumps({"error": str(e)}, indent=2)

        if not include_disabled:
            configs = [c for c in configs if not c.disabled]

        return json.dumps(
            {
                "count": len(configs),
                "analyzers": [c.to_dict() for c in configs],
            },
            indent=2,
        )

    @mcp.tool()
    def analyzer_health_check(analyzer_name: str) -> str:
        """Check whether an IntelX analyzer is up and running.

        Args:
            analyzer_name: Analyzer name (e.g., "Classic_DNS")

        Returns:
            JSON string with the analyzer's health status, or an error.
        """
        logger.info(f"Health-checking analyzer: {analyzer_name}")

        try:
            up = get_client().analyzer.health_check(analyzer_name)
        except IntelXError as e:
            return json.dumps({"analyzer": analyzer_name, "error": str(e)}, indent=2)

        return json.dumps({"analyzer": analyzer_name, "status": up}, indent=2)
