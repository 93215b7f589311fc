"""
stories CLI - Agent command.

Manage agent providers: list built-in and custom providers with their
availability, add or remove custom providers, and switch the default.
"""

import typer
from rich.console import Console

from stories.cli.context import load_settings, open_registry
from stories.cli.errors import (
    ExitCode,
    print_agent_not_installed_error,
    print_error,
    print_unknown_agent_error,
)
from stories.core.agents import (
    BuiltInProviderError,
    ProviderDescriptor,
    command_available,
    probe_available,
)
from stories.core.config import set_agent_provider

console = Console()
app = typer.Typer(
    name="agent",
    help="Manage AI agent providers (list/add/remove/switch)",
    no_args_is_help=False,
)


@app.callback(invoke_without_command=True)
def agent(ctx: typer.Context) -> None:
    """
    Manage AI agent providers.

    Without a subcommand, lists all providers.
    """
    if ctx.invoked_subcommand is None:
        list_agents(ctx)


@app.command("list")
def list_agents(ctx: typer.Context) -> None:
    """
    List all agent providers and whether their CLI is installed.

    Examples:
        stories agent list
    """
    config = load_settings(ctx)
    registry = open_registry(config)

    console.print("\n[bold blue]🤖 Available AI Agents:[/bold blue]\n")

    agents = registry.list_all()
    if not agents:
        console.print("[yellow]No agents configured.[/yellow]")
        return

    for entry in agents:
        status = "[green]✅[/green]" if command_available(entry.descriptor) else "[red]❌[/red]"
        kind = "[cyan](custom)[/cyan]" if entry.is_custom else "[dim](built-in)[/dim]"
        current = " [magenta]← current[/magenta]" if entry.name == config.agent.provider else ""
        console.print(f"{status} [bold]{entry.name}[/bold] {kind}{current}")
        console.print(f"   Command: {entry.descriptor.command}", markup=False)
        console.print(f"   Description: {entry.descriptor.label}", markup=False)
        console.print()


@app.command("add")
def add_agent(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Agent name"),
    command: str = typer.Argument(..., help="Command to run the agent"),
    args: str = typer.Option(
        "{prompt}",
        "--args",
        help="Command arguments template (use {prompt} placeholder)",
    ),
) -> None:
    """
    Add or replace a custom agent provider.

    The command is not checked here; availability is probed when listing
    or switching.

    Examples:
        stories agent add mychat mychat
        stories agent add local ollama --args "run mistral {prompt}"
    """
    config = load_settings(ctx)
    registry = open_registry(config)

    registry.register(ProviderDescriptor.custom(name, command, args_template=args))

    console.print(f"[green]✅ Added custom agent: {name}[/green]")
    console.print(f"   Command: {command}", style="dim", markup=False)
    console.print(f"   Args template: {args}", style="dim", markup=False)


@app.command("remove")
def remove_agent(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Agent name"),
) -> None:
    """
    Remove a custom agent provider. Built-in providers cannot be removed.
    """
    config = load_settings(ctx)
    registry = open_registry(config)

    try:
        removed = registry.unregister(name)
    except BuiltInProviderError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR) from None

    if removed:
        console.print(f"[green]✅ Removed agent: {name}[/green]")
    else:
        console.print(f"[yellow]⚠️  Agent not found: {name}[/yellow]")


@app.command("switch")
def switch_agent(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Agent name"),
) -> None:
    """
    Make an installed agent the default provider.

    The choice is saved to the project's stories.config.json.
    """
    config = load_settings(ctx)
    registry = open_registry(config)

    provider = registry.lookup(name)
    if provider is None:
        print_unknown_agent_error(name, list(dict.fromkeys(registry.names())))
        raise typer.Exit(ExitCode.USER_ERROR)

    if not probe_available(registry, name):
        print_agent_not_installed_error(name, provider.command)
        raise typer.Exit(ExitCode.USER_ERROR)

    set_agent_provider(name)
    console.print(f"[green]✅ Switched to agent: {name}[/green]")
