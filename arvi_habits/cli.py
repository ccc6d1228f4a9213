# arvi_habits/cli.py
"""
CLI interface for arvi-habits.

Thin presentation layer over the api/ and tools/ service layer.
All commands delegate to the same functions that MCP wraps.
"""

import asyncio
import json

import typer

from arvi_habits.errors import HabitPipelineError

app = typer.Typer(
    name="arvi-habits",
    help="Generate habit series from test answers with a three-pass AI pipeline.",
    no_args_is_help=True,
)

_DIFFICULTY_STYLES = {
    "easy": "green",
    "moderate": "yellow",
    "challenging": "red",
}

_PASS_LABELS = {
    "habit_series_creative": "Creative pass",
    "habit_series_structure": "Structure pass",
    "json_conversion": "JSON normalization",
}


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


def _fail(message: str) -> None:
    """Print an error in red to stderr and exit 1."""
    from rich.console import Console
    from rich.markup import escape

    Console(stderr=True).print(f"[red]{escape(message)}[/red]", highlight=False)
    raise typer.Exit(1)


async def _open_services():
    """Load config and open the SQLite-backed services."""
    from arvi_habits.config.loader import load_config
    from arvi_habits.services import open_services

    return await open_services(load_config())


def _parse_answers(answers: list[str]) -> dict[str, str]:
    """Parse repeated "key=value" options, preserving order."""
    parsed: dict[str, str] = {}
    for answer in answers:
        key, sep, value = answer.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{answer}'", param_hint="--answer")
        parsed[key.strip()] = value.strip()
    return parsed


def _render_series(artifact: dict) -> None:
    """Print a series dict (camelCase keys) as a rich panel and table."""
    from rich.console import Console, Group
    from rich.panel import Panel
    from rich.table import Table
    from rich.text import Text

    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("#", width=3, justify="right")
    table.add_column("Action", style="bold")
    table.add_column("Description")
    table.add_column("Difficulty", width=12)

    for index, action in enumerate(artifact["actions"], start=1):
        style = _DIFFICULTY_STYLES.get(action["difficulty"], "white")
        table.add_row(
            str(index),
            action["name"],
            action["description"],
            Text(action["difficulty"], style=style),
        )

    meta = Text(
        f"id: {artifact['id']}  rank: {artifact['rank']}  score: {artifact['totalScore']}",
        style="dim",
    )
    Console().print(
        Panel(
            Group(Text(artifact["description"]), Text(""), table, meta),
            title=Text(f" {artifact['title']} ", style="bold"),
            border_style="bright_black",
        )
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show JSON logs on stderr"),
):
    """Generate habit series from test answers with a three-pass AI pipeline."""
    from arvi_habits.logging_config import configure_logging

    configure_logging("DEBUG" if verbose else "WARNING")


@app.command()
def generate(
    user: str = typer.Option(..., "--user", "-u", help="User ID that owns the series"),
    language: str = typer.Option("en", "--language", "-l", help="Output language (en or es)"),
    answer: list[str] = typer.Option(
        ..., "--answer", "-a", help="Test answer as key=value (repeatable)"
    ),
    context: str | None = typer.Option(None, "--context", "-c", help="Background context"),
    as_json: bool = typer.Option(False, "--json", help="Print the series as JSON"),
):
    """Generate and store a new habit series."""
    from rich.console import Console

    from arvi_habits.api import handle_create_request
    from arvi_habits.validation.sanitize import sanitize_identifier

    payload = {"language": language, "testData": _parse_answers(answer)}
    if context:
        payload["assistantContext"] = context

    console = Console(stderr=True)

    async def _generate():
        user_id = sanitize_identifier(user, "user ID")
        services = await _open_services()
        with console.status("[dim]Starting...[/dim]", spinner="dots") as status:

            def on_event(event: str, data: dict) -> None:
                if event == "pass_started":
                    label = _PASS_LABELS.get(data["pass_id"], data["pass_id"])
                    status.update(f"[dim]{label} ({data['model_id']})...[/dim]")
                elif event == "pass_completed":
                    label = _PASS_LABELS.get(data["pass_id"], data["pass_id"])
                    console.print(
                        f"[green]✓[/green] {label}  "
                        f"[dim]tokens: {data['tokens_used']}  energy: {data['resource_cost']}[/dim]"
                    )

            use_case = services.use_case(event_callback=on_event)
            return await handle_create_request(user_id, payload, use_case)

    try:
        result = _run(_generate())
    except HabitPipelineError as e:
        _fail(f"{e.kind}: {e}")
    except KeyboardInterrupt:
        typer.echo("\nCancelled.", err=True)
        raise typer.Exit(130)

    if as_json:
        typer.echo(json.dumps(result["artifact"], indent=2, ensure_ascii=False))
    else:
        _render_series(result["artifact"])


@app.command("list")
def list_series(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
):
    """List a user's habit series."""
    from fastmcp.exceptions import ToolError
    from rich.console import Console
    from rich.table import Table

    from arvi_habits.tools.list_series import list_habit_series

    async def _list():
        services = await _open_services()
        return await list_habit_series(user, repository=services.artifacts)

    try:
        result = _run(_list())
    except HabitPipelineError as e:
        _fail(f"{e.kind}: {e}")
    except ToolError as e:
        _fail(str(e))

    if not result["series"]:
        typer.echo("No series found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("SERIES ID")
    table.add_column("RANK")
    table.add_column("ACTIONS", justify="right")
    table.add_column("CREATED")
    table.add_column("TITLE")
    for summary in result["series"]:
        table.add_row(
            summary["id"],
            summary["rank"],
            str(summary["actions"]),
            summary["createdAt"][:19].replace("T", " "),
            summary["title"],
        )
    Console().print(table)


@app.command()
def show(
    series_id: str = typer.Argument(..., help="Series ID to show"),
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
    as_json: bool = typer.Option(False, "--json", help="Print the series as JSON"),
):
    """Show one habit series."""
    from fastmcp.exceptions import ToolError

    from arvi_habits.tools.get_series import get_habit_series

    async def _show():
        services = await _open_services()
        return await get_habit_series(user, series_id, repository=services.artifacts)

    try:
        artifact = _run(_show())
    except HabitPipelineError as e:
        _fail(f"{e.kind}: {e}")
    except ToolError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(artifact, indent=2, ensure_ascii=False))
    else:
        _render_series(artifact)


@app.command()
def route(model_id: str = typer.Argument(..., help="Model identifier, e.g. gpt-4o-mini")):
    """Show which provider family a model ID routes to."""
    from arvi_habits.providers.router import family_for

    try:
        family = family_for(model_id)
    except HabitPipelineError as e:
        _fail(f"{e.kind}: {e}")

    typer.echo(f"{model_id} -> {family}")


@app.command()
def config():
    """Show the config file path and current settings (API keys masked)."""
    import yaml

    from arvi_habits.config.loader import get_config_path, load_config, resolve_db_path

    try:
        current = load_config()
    except HabitPipelineError as e:
        _fail(f"{e.kind}: {e}")

    data = current.model_dump(mode="json")
    for provider in data["providers"].values():
        if provider.get("api_key"):
            provider["api_key"] = provider["api_key"][:4] + "..."

    typer.echo(f"Config:   {get_config_path()}")
    typer.echo(f"Database: {resolve_db_path(current)}")
    typer.echo("")
    typer.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip())


@app.command()
def serve():
    """Start the MCP server over stdio."""
    from arvi_habits.__main__ import main as server_main

    asyncio.run(server_main())


if __name__ == "__main__":
    app()
