"""
stories CLI - Prompt library listing.
"""

import typer
from rich.console import Console
from rich.table import Table

from stories.core.prompts import list_prompts

console = Console()


def prompts(
    names_only: bool = typer.Option(False, "--names", help="Only print template names"),
) -> None:
    """
    List the built-in prompt templates activities can refer to.
    """
    entries = list_prompts()

    if names_only:
        for name, _ in entries:
            console.print(name, markup=False, highlight=False)
        return

    table = Table(title="Prompt Library", border_style="cyan")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Base Prompt", style="white")
    for name, base_prompt in entries:
        table.add_row(name, base_prompt)
    console.print(table)
