"""
stories CLI - Story commands.

List stories and run stories or single activities through the configured
agent.
"""

from collections.abc import Callable

import typer
from rich.console import Console

from stories.cli.context import load_settings, open_database, open_registry
from stories.cli.errors import ExitCode, print_error
from stories.core.exceptions import ActivityNotFoundError, NotFoundError
from stories.core.runner import StoryRunner

console = Console()


def list_stories(ctx: typer.Context) -> None:
    """
    List all available stories.

    Examples:
        stories list
        stories ls
    """
    config = load_settings(ctx)
    with open_database(config) as db:
        stories = db.get_stories()

    if not stories:
        console.print("[yellow]No stories found. Create some stories first![/yellow]")
        console.print("[dim]Run 'stories init' to add the examples.[/dim]")
        return

    console.print("\n[bold blue]📚 Available Stories:[/bold blue]\n")
    for index, story in enumerate(stories, start=1):
        console.print(f"[green]{index}. {story.title}[/green]")
        console.print(f"[dim]   ID: {story.id}[/dim]")
        console.print(f"[dim]   {story.description}[/dim]\n")


def _execute(
    ctx: typer.Context,
    action: Callable[[StoryRunner], object],
    start_message: str,
    done_message: str,
) -> None:
    config = load_settings(ctx)
    db = open_database(config)
    runner = StoryRunner(db, config, open_registry(config), console=console)

    try:
        console.print(f"\n[blue]{start_message}[/blue]\n")
        action(runner)
        console.print(f"\n[green]✅ {done_message}[/green]")
    except NotFoundError as e:
        solution = "stories list" if not isinstance(e, ActivityNotFoundError) else None
        print_error(str(e), solution=solution)
        raise typer.Exit(ExitCode.GENERAL_ERROR) from None
    except KeyboardInterrupt:
        console.print("\n[yellow]🛑 Shutting down...[/yellow]")
        raise typer.Exit(ExitCode.SIGINT) from None
    finally:
        runner.close()
        db.close()


def run(
    ctx: typer.Context,
    story_id: str = typer.Argument(..., help="Story ID to run"),
) -> None:
    """
    Run a story by ID.

    Every activity runs in title order, every step in order.

    Examples:
        stories run website-builder
    """
    _execute(
        ctx,
        lambda runner: runner.run_story(story_id),
        f"🚀 Starting story: {story_id}",
        "Story completed successfully!",
    )


def continue_story(
    ctx: typer.Context,
    story_id: str = typer.Argument(..., help="Story ID to continue"),
) -> None:
    """
    Continue a paused story.

    Progress is not tracked per step, so the story runs again from its
    first step over the state accumulated so far.
    """
    _execute(
        ctx,
        lambda runner: runner.continue_story(story_id),
        f"🔄 Continuing story: {story_id}",
        "Story continued successfully!",
    )


def activity(
    ctx: typer.Context,
    activity_id: str = typer.Argument(..., help="Activity ID to run"),
) -> None:
    """
    Run a single activity by ID.

    Examples:
        stories activity scaffold-frontend
    """
    _execute(
        ctx,
        lambda runner: runner.run_activity(activity_id),
        f"⚡ Running activity: {activity_id}",
        "Activity completed successfully!",
    )
