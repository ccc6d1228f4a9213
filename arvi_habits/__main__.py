# arvi_habits/__main__.py
"""
Entry point for the arvi-habits MCP server (``python -m arvi_habits``).

Importing arvi_habits.server configures stderr logging before anything
else can write to stdout.
"""

import asyncio
import logging
import sys

from arvi_habits.errors import HabitPipelineError
from arvi_habits.server import initialize_services, mcp

logger = logging.getLogger(__name__)


async def main() -> None:
    """Open storage and providers, then serve tools over stdio."""
    try:
        await initialize_services()
    except HabitPipelineError as e:
        # Bad config or unreadable database: nothing to serve
        logger.error(f"Startup failed ({e.kind}): {e}")
        sys.exit(1)

    logger.info("Serving arvi-habits tools on stdio")
    await mcp.run_stdio_async()


if __name__ == "__main__":
    asyncio.run(main())
