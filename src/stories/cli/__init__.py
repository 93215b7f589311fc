"""
stories CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from stories import __version__
from stories.cli import agent, config, init_cmd, prompts, story, ui

# Help panel names for command grouping
PANEL_RUN = "Run Stories"
PANEL_SETUP = "Set Up"

BANNER = r"""[magenta]
  ███████╗████████╗ ██████╗ ██████╗ ██╗███████╗███████╗
  ██╔════╝╚══██╔══╝██╔═══██╗██╔══██╗██║██╔════╝██╔════╝
  ███████╗   ██║   ██║   ██║██████╔╝██║█████╗  ███████╗
  ╚════██║   ██║   ██║   ██║██╔══██╗██║██╔══╝  ╚════██║
  ███████║   ██║   ╚██████╔╝██║  ██║██║███████╗███████║
  ╚══════╝   ╚═╝    ╚═════╝ ╚═╝  ╚═╝╚═╝╚══════╝╚══════╝[/magenta]

[cyan]  Structured AI agent workflows[/cyan]

[yellow]  📚 Top Level Commands:[/yellow]
[green]    list         [/green][dim]List all available stories[/dim]
[green]    run <id>     [/green][dim]Execute a complete story[/dim]
[green]    activity <id>[/green][dim]Run a single activity[/dim]
[green]    ui           [/green][dim]Launch web UI for visual management[/dim]
[green]    config       [/green][dim]Configure agent settings[/dim]
[green]    agent        [/green][dim]Manage AI agents (list/add/remove/switch)[/dim]
[green]    init         [/green][dim]Create example stories[/dim]

[yellow]  🚀 Quick Start:[/yellow]
[dim]    stories init               # Setup examples
    stories agent list         # List available AIs
    stories run website-builder[/dim]
"""

# Create the main Typer app
app = typer.Typer(
    name="stories",
    help="Structured AI agent workflow framework",
    no_args_is_help=False,
    invoke_without_command=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    stories - run Story -> Activity -> Step workflows through AI agent CLIs.

    Quick Start:
        1. stories init                 # Create example stories
        2. stories agent list           # See which agents are installed
        3. stories run website-builder  # Run a story
    """
    ctx.obj = {"debug": debug}

    if ctx.invoked_subcommand is None:
        console.print(BANNER)


# =============================================================================
# Run Stories
# =============================================================================

app.command(name="list", rich_help_panel=PANEL_RUN)(story.list_stories)
app.command(name="ls", hidden=True)(story.list_stories)
app.command(name="run", rich_help_panel=PANEL_RUN)(story.run)
app.command(name="continue", rich_help_panel=PANEL_RUN)(story.continue_story)
app.command(name="activity", rich_help_panel=PANEL_RUN)(story.activity)
app.command(name="ui", rich_help_panel=PANEL_RUN)(ui.ui)


# =============================================================================
# Set Up
# =============================================================================

app.command(name="init", rich_help_panel=PANEL_SETUP)(init_cmd.init)
app.command(name="test", rich_help_panel=PANEL_SETUP)(init_cmd.test)
app.add_typer(agent.app, name="agent", rich_help_panel=PANEL_SETUP)
app.add_typer(config.app, name="config", rich_help_panel=PANEL_SETUP)
app.command(name="prompts", rich_help_panel=PANEL_SETUP)(prompts.prompts)


@app.command(rich_help_panel=PANEL_SETUP)
def version() -> None:
    """Show stories version and exit."""
    console.print(f"stories version {__version__}")
    raise typer.Exit(0)


__all__ = ["app"]
