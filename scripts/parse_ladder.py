#!/usr/bin/env python3
"""
Ladder Definition CLI

Parses ladder definition markdown and reports on assessments against it.

Commands:
    parse      - Parse a ladder file and print its category tree
    levels     - Print the level legend of a markdown file
    completion - Show which categories a selections file completes

Examples:\n

    parse_ladder.py parse data/ladders/engineering.md                 # Tree view

    parse_ladder.py parse data/ladders/engineering.md --json          # JSON output

    parse_ladder.py levels data/ladders/levels.md                     # Level legend

    parse_ladder.py completion data/ladders/engineering.md ui.json    # Completion
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from leveler.contexts.assessment import AssessmentUIData, completion_progress, evaluate_completion
from leveler.contexts.definition import LadderDefinition, parse_level_names
from leveler.contexts.definition.logger import setup_definition_logger
from leveler.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Parse ladder definitions and check assessment completion",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_ladder(ladder_file: Path, log: bool) -> LadderDefinition:
    if log:
        setup_definition_logger(LOGS_PATH / f"parse_{now()}", source=str(ladder_file))
    try:
        return LadderDefinition.from_file(ladder_file)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("parse")
def parse_command(
    ladder_file: Annotated[Path, typer.Argument(help="Ladder definition markdown file")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the parsed tree as JSON"),
    ] = False,
    show_descriptions: Annotated[
        bool,
        typer.Option("--descriptions", "-d", help="Include level descriptions in the tree view"),
    ] = False,
    log: Annotated[
        bool,
        typer.Option("--log", help="Write a session log under LOGS_PATH"),
    ] = False,
):
    """
    Parse a ladder definition file.

    Examples:\n

        $ parse_ladder.py parse engineering.md

        $ parse_ladder.py parse engineering.md --json > engineering.json
    """
    ladder = _load_ladder(ladder_file, log)

    if as_json:
        typer.echo(json.dumps(ladder.to_dict(), indent=2))
        raise typer.Exit(code=0)

    if not ladder.categories:
        typer.secho("No categories found", fg=typer.colors.YELLOW, bold=True)
        raise typer.Exit(code=1)

    for category in ladder.categories:
        typer.secho(f"\n{category.title}", fg=typer.colors.BLUE, bold=True)
        for core_area in category.core_areas:
            typer.echo(f"  {core_area.name}")
            for entry in core_area.levels:
                typer.echo(f"    {entry.level}. {entry.content}")
                if show_descriptions and entry.description:
                    for line in entry.description.splitlines():
                        typer.echo(f"       {line}")
    typer.echo("")


@app.command("levels")
def levels_command(
    markdown_file: Annotated[Path, typer.Argument(help="Markdown file with a numbered level list")],
):
    """Print the level legend (number and name) found in a markdown file."""
    if not markdown_file.exists():
        typer.secho(f"Error: File not found: {markdown_file}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    levels = parse_level_names(markdown_file.read_text(encoding="utf-8"))
    if not levels:
        typer.secho("No levels found", fg=typer.colors.YELLOW, bold=True)
        raise typer.Exit(code=1)

    for number in sorted(levels):
        typer.echo(f"{number}. {levels[number]}")


@app.command("completion")
def completion_command(
    ladder_file: Annotated[Path, typer.Argument(help="Ladder definition markdown file")],
    ui_file: Annotated[
        Path,
        typer.Argument(help='JSON file with {"selections": ..., "feedback": ...}'),
    ],
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only report on this category"),
    ] = None,
):
    """
    Show which categories are fully answered by a selections file.

    Exits with code 0 only when every reported category is complete.
    """
    ladder = _load_ladder(ladder_file, log=False)

    try:
        ui_data = AssessmentUIData.from_dict(json.loads(ui_file.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValueError, AttributeError) as e:
        typer.secho(f"Error: Could not read {ui_file}: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    completed = evaluate_completion(ladder.categories, ui_data.selections)

    all_complete = True
    for index, entry in enumerate(ladder.categories):
        if category and entry.title != category:
            continue
        if index in completed:
            typer.secho(f"✓ {entry.title}", fg=typer.colors.GREEN)
        else:
            all_complete = False
            typer.secho(f"✗ {entry.title}", fg=typer.colors.RED)

    answered, total = completion_progress(ladder.categories, ui_data.selections)
    typer.echo(f"\n{answered}/{total} competencies answered")

    raise typer.Exit(code=0 if all_complete else 1)


if __name__ == "__main__":
    app()
