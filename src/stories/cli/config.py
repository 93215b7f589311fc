"""
stories CLI - Config command.

Show the merged configuration, report which agent CLIs are installed and
set the default agent provider.
"""

from typing import Optional

import typer
from rich.console import Console

from stories.cli.context import load_settings, open_registry
from stories.cli.errors import (
    ExitCode,
    print_agent_not_installed_error,
    print_unknown_agent_error,
)
from stories.core.agents import detect_available, probe_available
from stories.core.config import (
    get_project_config_path,
    get_user_config_path,
    set_agent_provider,
)

console = Console()
app = typer.Typer(
    name="config",
    help="Configure stories settings",
    no_args_is_help=False,
)

INSTALL_HINTS = [
    "brew install aichat           # Universal AI CLI",
    "npm install -g @anthropic-ai/claude-code",
    "curl -fsSL https://ollama.ai/install.sh | sh",
]


@app.callback(invoke_without_command=True)
def show(ctx: typer.Context) -> None:
    """
    Show the current configuration.

    Values are merged from defaults, ~/.config/stories/config.json,
    ./stories.config.json and STORIES_* environment variables.
    """
    if ctx.invoked_subcommand is not None:
        return

    config = load_settings(ctx)

    console.print("\n[bold blue]📋 Current Configuration:[/bold blue]\n")
    console.print("[cyan]Agent:[/cyan]")
    console.print(f"  Provider: {config.agent.provider}")
    console.print(f"  Model: {config.agent.model or 'default'}")
    console.print(f"  Temperature: {config.agent.temperature}")

    console.print("\n[cyan]Execution:[/cyan]")
    console.print(f"  Auto-confirm: {config.execution.auto_confirm}")
    console.print(f"  Pause between steps: {config.execution.pause_between_steps}ms")
    console.print(f"  Log level: {config.execution.log_level}")

    console.print("\n[cyan]Database:[/cyan]")
    console.print(f"  Path: {config.database.path}")

    console.print(f"\n[dim]User config: {get_user_config_path()}[/dim]")
    console.print(f"[dim]Project config: {get_project_config_path()}[/dim]")


@app.command("agents")
def agents(ctx: typer.Context) -> None:
    """
    Report which agent CLIs are installed.
    """
    config = load_settings(ctx)
    registry = open_registry(config)

    console.print("\n[bold blue]🤖 Agent Configuration[/bold blue]\n")

    available = detect_available(registry)
    providers = {entry.name: entry.descriptor for entry in registry.list_all()}

    console.print("[green]Available AI CLIs:[/green]")
    for name in available:
        console.print(f"[green]  ✅ {name} ({providers[name].command})[/green]")

    console.print("\n[yellow]Not installed:[/yellow]")
    for name, provider in providers.items():
        if name not in available:
            console.print(f"[dim]  ❌ {name} ({provider.command})[/dim]")

    if not available:
        console.print("\n[red]❌ No AI CLIs found! Install one of:[/red]")
        for hint in INSTALL_HINTS:
            console.print(f"  {hint}", style="dim", markup=False)
    else:
        console.print(
            f"\n[blue]💡 To set default agent: stories config set-agent {available[0]}[/blue]"
        )


@app.command("set-agent")
def set_agent(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Provider name"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model to record"),
) -> None:
    """
    Set the default agent provider.

    The provider must be known and its CLI installed.

    Examples:
        stories config set-agent claude
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

    set_agent_provider(name, model=model)
    console.print(f"[green]✅ Agent provider set to: {name}[/green]")
