# arvi_habits/server.py
"""
FastMCP server instance with tool registration.

CRITICAL: configure_logging() is called first to prevent stdout pollution.
All logging goes to stderr as JSON.
"""

# Configure logging FIRST before any other imports
from arvi_habits.logging_config import configure_logging

configure_logging()

# Now safe to import everything else
import logging

from fastmcp import FastMCP

from arvi_habits.config.loader import load_config
from arvi_habits.config.schema import ArviConfig
from arvi_habits.services import HabitServices, open_services
from arvi_habits.tools.create_series import create_habit_series as _create_habit_series
from arvi_habits.tools.get_series import get_habit_series as _get_habit_series
from arvi_habits.tools.list_series import list_habit_series as _list_habit_series

logger = logging.getLogger(__name__)

# Create FastMCP instance
mcp = FastMCP("arvi-habits")

# Services (initialized by initialize_services() before serving)
_services: HabitServices | None = None


def get_services() -> HabitServices:
    """
    Get the initialized services.

    Raises:
        RuntimeError: If initialize_services() was not called
    """
    if _services is None:
        raise RuntimeError("Services not initialized. Call initialize_services() first.")
    return _services


async def initialize_services(config: ArviConfig | None = None) -> None:
    """
    Open storage and wire providers. Must run before any tool call.

    Args:
        config: ArviConfig instance (loaded from disk if None)
    """
    global _services

    actual_config = config or load_config()
    configure_logging(actual_config.log_level)
    _services = await open_services(actual_config)
    logger.info("Services initialized: SQLite + provider router ready")


@mcp.tool()
async def create_habit_series(
    user_id: str,
    language: str,
    test_data: dict[str, str],
    assistant_context: str | None = None,
) -> dict:
    """Generate a habit series (3-5 actions) from a user's test answers and store it."""
    services = get_services()
    return await _create_habit_series(
        user_id, language, test_data, assistant_context, use_case=services.use_case()
    )


@mcp.tool()
async def list_habit_series(user_id: str) -> dict:
    """List a user's habit series, newest first."""
    services = get_services()
    return await _list_habit_series(user_id, repository=services.artifacts)


@mcp.tool()
async def get_habit_series(user_id: str, series_id: str) -> dict:
    """Retrieve one habit series with its actions."""
    services = get_services()
    return await _get_habit_series(user_id, series_id, repository=services.artifacts)


logger.info("MCP server initialized with 3 tools")
