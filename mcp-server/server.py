#!/usr/bin/env python3
"""MCP server exposing IntelX analyzer endpoints as tools."""

import logging
import sys
from pathlib import Path

# Add parent src/ to path for intelx_client imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mcp.server.fastmcp import FastMCP

# Configure logging (never use print - breaks STDIO transport)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("intelx-mcp")

mcp = FastMCP("intelx")

from tools import analyzer_tools
from tools import health_tools

analyzer_tools.register_tools(mcp)
health_tools.register_tools(mcp)


def main():
    """Run the MCP server with stdio transport."""
    logger.info("Starting IntelX MCP server")
    mcp.run()


if __name__ == "__main__":
    main()
