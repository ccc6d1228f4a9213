# arvi_habits/tools/__init__.py
"""
Tool implementations shared by the MCP server and the CLI.

Each function takes its collaborators explicitly and raises ToolError
with a "<kind>: <message>" text on failure.
"""

from .create_series import create_habit_series, to_tool_error
from .get_series import get_habit_series
from .list_series import list_habit_series

__all__ = [
    "create_habit_series",
    "get_habit_series",
    "list_habit_series",
    "to_tool_error",
]
