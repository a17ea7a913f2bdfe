#!/usr/bin/env python3
"""
Assessment Report CLI

Builds and parses report identifiers, converts assessment state between UI and
API formats, and pushes a saved assessment to the report API.

Commands:
    report-id - Build a report identifier
    parse-id  - Split a report identifier into its parts
    encode    - Convert UI JSON (selections + feedback) to API responses JSON
    decode    - Convert API responses JSON back to UI JSON
    save      - Save UI JSON to a report through the report API
    fetch     - Fetch a report and print it as UI JSON
    submit    - Mark a report as submitted
    export    - Summarize UI JSON against a ladder as an assessment export
    import    - Read an assessment export back into UI JSON

Examples:\n

    manage_report.py report-id ada@example.com 2025-H2 self

    manage_report.py parse-id "ada@example.com|2025-H2|manager"

    manage_report.py encode ui.json > responses.json

    manage_report.py save "ada@example.com|2025-H2|self" ui.json --base-url http://localhost:3000

    manage_report.py export engineering.md ui.json --name Ada --current-level 3
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from leveler.contexts.assessment import (
    AssessmentStateStore,
    AssessmentType,
    AssessmentUIData,
    Failed,
    InvalidReportIdFormat,
    SaveOrchestrator,
    api_to_ui_format,
    build_assessment_export,
    create_report_id,
    load_assessment_export,
    parse_report_id,
    ui_to_api_format,
)
from leveler.contexts.assessment.assessment_data_structure import (
    responses_from_payload,
    responses_to_payload,
)
from leveler.contexts.assessment.exceptions import InvalidAssessmentExportError
from leveler.contexts.assessment.logger import setup_assessment_logger
from leveler.contexts.definition import LadderDefinition
from leveler.contexts.transport import ApiError, ReportClient, report_saver
from leveler.utils.local_storage import LocalStorage
from leveler.utils.settings import load_settings
from leveler.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Report identifiers, response format conversion and report saving",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _read_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.secho(f"Error: Could not read {path}: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("report-id")
def report_id_command(
    user_id: Annotated[str, typer.Argument(help="Email of the person assessed")],
    assessment_id: Annotated[str, typer.Argument(help="Assessment (season) identifier")],
    assessment_type: Annotated[
        AssessmentType, typer.Argument(help="Who writes the assessment")
    ] = AssessmentType.SELF,
):
    """Build a report identifier: <userId>|<assessmentId>|<type>."""
    for value in (user_id, assessment_id):
        if not value or "|" in value:
            typer.secho(
                f"Error: {value!r} must be non-empty and must not contain '|'\n",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)

    typer.echo(create_report_id(user_id, assessment_id, assessment_type))


@app.command("parse-id")
def parse_id_command(
    report_id: Annotated[str, typer.Argument(help="Report identifier")],
):
    """Split a report identifier into user, assessment and type."""
    try:
        identity = parse_report_id(report_id)
    except InvalidReportIdFormat as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"User:       {identity.user_id}")
    typer.echo(f"Assessment: {identity.assessment_id}")
    typer.echo(f"Type:       {identity.assessment_type.value}")


@app.command("encode")
def encode_command(
    ui_file: Annotated[Path, typer.Argument(help='JSON file with {"selections", "feedback"}')],
):
    """Convert UI format to flat API responses."""
    ui_data = AssessmentUIData.from_dict(_read_json(ui_file))
    responses = ui_to_api_format(ui_data.selections, ui_data.feedback)
    typer.echo(json.dumps(responses_to_payload(responses), indent=2))


@app.command("decode")
def decode_command(
    responses_file: Annotated[Path, typer.Argument(help="JSON file with flat API responses")],
):
    """Convert flat API responses back to UI format."""
    try:
        responses = responses_from_payload(_read_json(responses_file))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        typer.secho(f"Error: Malformed responses: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(api_to_ui_format(responses).to_dict(), indent=2))


def _require_report_id(report_id: str) -> None:
    try:
        parse_report_id(report_id)
    except InvalidReportIdFormat as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _auth_headers(token: Optional[str]) -> Optional[dict]:
    return {"Authorization": f"Bearer {token}"} if token else None


BaseUrlOption = Annotated[
    Optional[str],
    typer.Option("--base-url", help="Report API root (defaults to LEVELER_API_URL)"),
]
TokenOption = Annotated[
    Optional[str],
    typer.Option("--token", envvar="LEVELER_API_TOKEN", help="Bearer token"),
]


@app.command("save")
def save_command(
    report_id: Annotated[str, typer.Argument(help="Report identifier")],
    ui_file: Annotated[Path, typer.Argument(help='JSON file with {"selections", "feedback"}')],
    base_url: BaseUrlOption = None,
    token: TokenOption = None,
):
    """
    Save an assessment to the report API.

    Transient failures are retried with exponential backoff before giving up.
    """
    _require_report_id(report_id)

    ui_data = AssessmentUIData.from_dict(_read_json(ui_file))
    store = AssessmentStateStore(selections=ui_data.selections, feedback=ui_data.feedback)
    log_file = setup_assessment_logger(LOGS_PATH / f"save_{now()}", report_id=report_id)

    async def run():
        async with ReportClient(base_url=base_url, headers=_auth_headers(token)) as client:
            orchestrator = SaveOrchestrator(store, report_saver(client, report_id))
            return await orchestrator.save_now(trigger="manual")

    state = asyncio.run(run())

    if isinstance(state, Failed):
        typer.secho(f"✗ Save failed: {state.error}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Log: {log_file}")
        raise typer.Exit(code=1)

    typer.secho("✓ Saved", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Log: {log_file}")


@app.command("fetch")
def fetch_command(
    report_id: Annotated[str, typer.Argument(help="Report identifier")],
    draft: Annotated[
        bool,
        typer.Option("--draft", help="Also store the report as the local draft"),
    ] = False,
    base_url: BaseUrlOption = None,
    token: TokenOption = None,
):
    """Fetch a report and print its responses as UI JSON."""
    _require_report_id(report_id)

    async def run():
        async with ReportClient(base_url=base_url, headers=_auth_headers(token)) as client:
            return await client.fetch_report(report_id)

    try:
        report = asyncio.run(run())
    except ApiError as e:
        typer.secho(e.describe(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if report is None:
        typer.secho(f"Report not found: {report_id}", fg=typer.colors.YELLOW, bold=True)
        raise typer.Exit(code=1)

    store = AssessmentStateStore()
    store.load_responses(responses_from_payload(report.get("responses") or {}))

    if draft:
        storage_path = Path(load_settings().storage.path)
        store.save_local(LocalStorage(storage_path))
        typer.secho(f"Draft stored in {storage_path}", fg=typer.colors.GREEN, err=True)

    typer.echo(json.dumps(store.snapshot().to_dict(), indent=2))


@app.command("submit")
def submit_command(
    report_id: Annotated[str, typer.Argument(help="Report identifier")],
    base_url: BaseUrlOption = None,
    token: TokenOption = None,
):
    """Mark a report as submitted."""
    _require_report_id(report_id)

    async def run():
        async with ReportClient(base_url=base_url, headers=_auth_headers(token)) as client:
            return await client.submit_report(report_id)

    try:
        asyncio.run(run())
    except ApiError as e:
        typer.secho(e.describe(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ Submitted {report_id}", fg=typer.colors.GREEN, bold=True)


@app.command("export")
def export_command(
    ladder_file: Annotated[Path, typer.Argument(help="Ladder definition markdown file")],
    ui_file: Annotated[Path, typer.Argument(help='JSON file with {"selections", "feedback"}')],
    name: Annotated[str, typer.Option("--name", "-n", help="Person assessed")],
    current_level: Annotated[
        int, typer.Option("--current-level", "-l", help="Their current level", min=1)
    ] = 1,
    way_forward: Annotated[
        str, typer.Option("--way-forward", "-w", help="Closing narrative")
    ] = "",
):
    """Summarize an assessment against a ladder (median level per category, notes)."""
    try:
        ladder = LadderDefinition.from_file(ladder_file)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    ui_data = AssessmentUIData.from_dict(_read_json(ui_file))
    export = build_assessment_export(
        team_member_name=name,
        current_level=current_level,
        categories=ladder.categories,
        selections=ui_data.selections,
        feedback=ui_data.feedback,
        way_forward=way_forward,
    )
    typer.echo(json.dumps(export, indent=2))


@app.command("import")
def import_command(
    export_file: Annotated[Path, typer.Argument(help="Assessment export JSON file")],
):
    """Read an assessment export back into UI JSON (with assessee and current level)."""
    try:
        name, current_level, way_forward, ui_data = load_assessment_export(
            _read_json(export_file)
        )
    except InvalidAssessmentExportError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output = {"assessee": name, "currentLevel": current_level, "wayForward": way_forward}
    output.update(ui_data.to_dict())
    typer.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    app()
