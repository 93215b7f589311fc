"""
stories CLI - Seed commands.

``init`` adds the example stories, ``test`` adds the agent smoke tests.
"""

import typer
from rich.console import Console

from stories.cli.context import load_settings, open_database
from stories.core.seed import (
    create_example_stories,
    create_quick_test,
    create_simple_test_story,
)

console = Console()


def _report(created: list[str], expected: list[str]) -> None:
    for story_id in expected:
        if story_id in created:
            console.print(f"[green]  ✓ {story_id}[/green]")
        else:
            console.print(f"[dim]  • {story_id} already exists, skipped[/dim]")


def init(ctx: typer.Context) -> None:
    """
    Initialize with example stories.

    Safe to re-run: stories that already exist are left untouched.
    """
    config = load_settings(ctx)
    console.print("\n[blue]🏗️  Initializing with example stories...[/blue]\n")

    with open_database(config) as db:
        created = create_example_stories(db)
        created += create_simple_test_story(db)

    _report(created, ["website-builder", "code-audit", "hello-claude"])
    console.print("\n[green]✅ Example stories created! Run 'stories list' to see them.[/green]")


def test(ctx: typer.Context) -> None:
    """
    Add simple test stories for checking agent integration.
    """
    config = load_settings(ctx)
    console.print("\n[blue]🧪 Adding test stories...[/blue]\n")

    with open_database(config) as db:
        created = create_simple_test_story(db)
        created += create_quick_test(db)

    _report(created, ["hello-claude", "quick-test"])
    console.print("\n[green]✅ Test stories added![/green]")
    console.print("[cyan]   stories run hello-claude  # Full test[/cyan]")
    console.print("[cyan]   stories run quick-test    # Super quick test[/cyan]")
