"""agentcore CLI implementation.

Runs single agent sessions and autonomous loops from the command line.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from agentcore.agent.loop import AgentLoop
from agentcore.autonomous.loop import AutonomousLoop
from agentcore.config import CLIOverrides, ConfigLoader, FileConfig
from agentcore.exceptions import AgentCoreError
from agentcore.models.config import AutonomousConfig
from agentcore.models.conversation import AutonomousLoopResult, Message, ToolCall
from agentcore.providers.factory import ProviderRegistry, create_provider
from agentcore.tools.base import ToolDefinition
from agentcore.tools.mcp import connect_mcp_tools
from agentcore.tools.router import ToolRouter

app = typer.Typer(
    name="agentcore",
    help="Autonomous agent loop driving a model through tool calls.",
    no_args_is_help=True,
)

console = Console()

_history_adapter = TypeAdapter(list[Message])

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to agentcore.yaml configuration file."),
]
ProviderOption = Annotated[
    str | None,
    typer.Option("--provider", "-p", help="LLM provider (e.g., 'ollama', 'openai')."),
]
ModelOption = Annotated[str | None, typer.Option("--model", "-m", help="Model name.")]
BaseUrlOption = Annotated[
    str | None, typer.Option("--base-url", "-u", help="Base URL for LLM API.")
]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Enable debug logging.")
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=verbose)],
        force=True,
    )


def _load_file_config(config_file: Path | None) -> FileConfig | None:
    try:
        return ConfigLoader.load_config(config_file)
    except AgentCoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def _load_history(path: Path) -> list[Message]:
    """Read prior turns from a JSON list of {role, content} objects."""
    try:
        return _history_adapter.validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        msg = f"Invalid history file {path}: {e}"
        raise typer.BadParameter(msg) from e


@asynccontextmanager
async def _open_router(file_config: FileConfig | None) -> AsyncIterator[ToolRouter]:
    """Router over the configured MCP server's tools, connected for the block."""
    if file_config is None or file_config.mcp_server is None:
        yield ToolRouter()
        return
    async with connect_mcp_tools(file_config.mcp_server) as mcp_tools:
        yield ToolRouter(mcp_tools)


def _print_tool_calls(tool_calls: list[ToolCall]) -> None:
    if not tool_calls:
        return
    table = Table(title="Tool Calls")
    table.add_column("#", justify="right")
    table.add_column("Tool", style="cyan")
    table.add_column("Arguments")
    for index, call in enumerate(tool_calls, start=1):
        table.add_row(str(index), call.name, json.dumps(call.arguments, default=str))
    console.print(table)


@app.command()
def run(  # noqa: PLR0913 - Typer requires CLI args as function parameters
    message: Annotated[str, typer.Argument(help="Request for the agent.")],
    history: Annotated[
        Path | None,
        typer.Option(
            "--history",
            help="JSON file with prior turns ([{\"role\": ..., \"content\": ...}]).",
            exists=True,
        ),
    ] = None,
    max_iterations: Annotated[
        int | None,
        typer.Option("--max-iterations", "-n", min=1, help="Round budget for the session."),
    ] = None,
    config_file: ConfigOption = None,
    provider: ProviderOption = None,
    model: ModelOption = None,
    base_url: BaseUrlOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Run one agent session for MESSAGE.

    Examples:
        agentcore run "create hello.txt containing hi" -m llama3.2

        agentcore run "now delete it" --history turns.json --config agentcore.yaml
    """
    overrides = CLIOverrides(provider=provider, model=model, base_url=base_url)
    file_config = _load_file_config(config_file)
    previous = _load_history(history) if history else None
    _configure_logging(verbose)

    try:
        asyncio.run(_run_session(overrides, file_config, message, previous, max_iterations))
    except AgentCoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


async def _run_session(
    overrides: CLIOverrides,
    file_config: FileConfig | None,
    message: str,
    previous: list[Message] | None,
    max_iterations: int | None,
) -> None:
    llm_config = ConfigLoader.resolve_llm_config(file_config, overrides)
    agent_config = ConfigLoader.resolve_agent_config(
        file_config, cli_max_iterations=max_iterations
    )

    async with _open_router(file_config) as router:
        console.print(
            f"[blue]Provider: {llm_config.provider}, Model: {llm_config.model}[/blue]"
        )
        console.print(f"[blue]Tools: {len(router)}[/blue]\n")

        agent = AgentLoop(create_provider(llm_config), router, agent_config)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Running agent...", total=None)
            result = await agent.run(message, previous)

    console.print(Panel(result.final_message, title="Final Message"))
    _print_tool_calls(result.tool_calls)
    console.print(f"\n[bold]Rounds: {result.iterations}[/bold]")


@app.command()
def auto(  # noqa: PLR0913 - Typer requires CLI args as function parameters
    goal: Annotated[str, typer.Argument(help="Goal to pursue across cycles.")],
    dev_server: Annotated[
        str | None,
        typer.Option("--dev-server", help="Command starting a dev server for the session."),
    ] = None,
    cwd: Annotated[
        str | None, typer.Option("--cwd", help="Working directory for the dev server.")
    ] = None,
    test_url: Annotated[
        str | None, typer.Option("--test-url", help="URL checked in the browser.")
    ] = None,
    success_criteria: Annotated[
        str | None,
        typer.Option("--success-criteria", help="Condition the running app must meet."),
    ] = None,
    max_cycles: Annotated[
        int | None, typer.Option("--max-cycles", min=1, help="Cycle budget.")
    ] = None,
    config_file: ConfigOption = None,
    provider: ProviderOption = None,
    model: ModelOption = None,
    base_url: BaseUrlOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Pursue GOAL with the autonomous loop.

    Exits with code 1 when the goal is not reached within the cycle budget.
    """
    overrides = CLIOverrides(provider=provider, model=model, base_url=base_url)
    file_config = _load_file_config(config_file)
    _configure_logging(verbose)

    try:
        autonomous_config = ConfigLoader.resolve_autonomous_config(
            file_config,
            dev_server_command=dev_server,
            dev_server_cwd=cwd,
            test_url=test_url,
            success_criteria=success_criteria,
            max_iterations=max_cycles,
        )
        result = asyncio.run(_run_autonomous(overrides, file_config, goal, autonomous_config))
    except AgentCoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    status = "[green]SUCCESS[/green]" if result.success else "[red]INCOMPLETE[/red]"
    console.print(f"\nResult: {status} after {result.iterations} cycle(s)")
    console.print(Panel(result.final_message, title="Final Message"))
    _print_tool_calls(result.tool_calls)

    if not result.success:
        raise typer.Exit(code=1)


async def _run_autonomous(
    overrides: CLIOverrides,
    file_config: FileConfig | None,
    goal: str,
    autonomous_config: AutonomousConfig,
) -> AutonomousLoopResult:
    llm_config = ConfigLoader.resolve_llm_config(file_config, overrides)
    agent_config = ConfigLoader.resolve_agent_config(file_config)
    async with _open_router(file_config) as router:
        loop = AutonomousLoop(
            create_provider(llm_config), router, autonomous_config, agent_config
        )
        console.print(Panel(f"[bold]Goal[/bold]\n{goal}"))
        return await loop.run(goal)


async def _list_tools(file_config: FileConfig) -> list[ToolDefinition]:
    async with _open_router(file_config) as router:
        return router.list()


@app.command()
def tools(config_file: ConfigOption = None) -> None:
    """List the tools offered by the configured MCP server."""
    file_config = _load_file_config(config_file)
    if file_config is None or file_config.mcp_server is None:
        console.print("[yellow]No mcp_server configured.[/yellow]")
        return

    try:
        available = asyncio.run(_list_tools(file_config))
    except AgentCoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title="Available Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Description")
    table.add_column("Required")
    for tool in available:
        table.add_row(tool.name, tool.description, ", ".join(tool.schema.required))
    console.print(table)


@app.command()
def providers() -> None:
    """List available LLM providers."""
    table = Table(title="Available Providers")
    table.add_column("Provider", style="cyan")

    for provider_name in ProviderRegistry.list_providers():
        table.add_row(provider_name)

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
