"""FastMCP server for the music label simulation."""

import argparse
import logging
import sys
from typing import Literal

import anyio

# Configure logging to stderr (required for STDIO transport)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

# Import mcp instance and tools to register them
from label_sim.app import mcp  # noqa: E402
from label_sim.storage import get_storage  # noqa: E402
from label_sim.tools import analytics  # noqa: F401, E402
from label_sim.tools import calculators  # noqa: F401, E402
from label_sim.tools import game  # noqa: F401, E402
from label_sim.tools import planning  # noqa: F401, E402

logger = logging.getLogger(__name__)

Transport = Literal["stdio", "sse", "streamable-http"]


async def _run_server(
    transport: Transport = "stdio",
    mount_path: str | None = None,
) -> None:
    """Run the MCP server on the chosen transport."""
    try:
        match transport:
            case "stdio":
                await mcp.run_stdio_async()
            case "sse":  # pragma: no cover
                await mcp.run_sse_async(mount_path)
            case "streamable-http":  # pragma: no cover
                await mcp.run_streamable_http_async()
            case _:
                raise ValueError(f"Unknown transport: {transport}")
    finally:
        logger.info("Server stopped; games are stored in %s", get_storage().storage_file)


def main() -> None:
    """Run the MCP server."""
    parser = argparse.ArgumentParser(description="Music label simulation MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
    )
    args = parser.parse_args()
    anyio.run(_run_server, args.transport)


if __name__ == "__main__":
    main()
