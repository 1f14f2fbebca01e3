from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple

import click
import httpx

from sheetbox import constants
from sheetbox.cli.formatters import cell_text, table
from sheetbox.services.machine_service import MachineService, MachineSnapshotError
from sheetbox.utils.logging import setup_logging

API_BASE = f"http://{constants.SERVER_HOST}:{constants.SERVER_PORT}"


def _request(method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
    url = f"{API_BASE}{path}"
    with httpx.Client(timeout=60) as client:
        response = client.request(method, url, json=payload)
    if response.status_code >= 400:
        raise click.ClickException(f"API error {response.status_code}: {response.text}")
    if response.content:
        return response.json()
    return None


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _reference_payload(sheet: str, function: str, args: Tuple[str, ...], **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"sheet": sheet, "function": function.upper(), "args": list(args)}
    payload.update(extra)
    return payload


@click.group(help="sheetbox command-line interface.")
def cli() -> None:
    """Root command for sheetbox."""
    setup_logging()


@cli.command()
@click.option("--table/--json", "as_table", default=False, show_default=True, help="Render sheets as a table.")
def machine(as_table: bool) -> None:
    """Show the loaded machine: locale, outbox size and sheets."""
    result = _request("GET", "/machine")
    if as_table:
        rows = [
            [sheet["name"], str(sheet["inbox_size"]), sheet.get("current_message_id") or "-"]
            for sheet in result["sheets"]
        ]
        click.echo(f"locale: {result['locale']}  outbox: {result['outbox_size']}")
        click.echo(table(["SHEET", "INBOX", "CURRENT"], rows, max_widths={2: 40}))
        return
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.argument("sheet")
@click.option("--metadata/--no-metadata", default=False, show_default=True, help="Merge message metadata.")
def inbox(sheet: str, metadata: bool) -> None:
    """List inbox payloads of a sheet."""
    suffix = "?include_metadata=true" if metadata else ""
    result = _request("GET", f"/sheets/{sheet}/inbox{suffix}")
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.option("--metadata/--no-metadata", default=False, show_default=True, help="Merge message metadata.")
def outbox(metadata: bool) -> None:
    """List outbox payloads."""
    suffix = "?include_metadata=true" if metadata else ""
    result = _request("GET", f"/outbox{suffix}")
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.argument("sheet")
@click.argument("function")
@click.argument("args", nargs=-1)
@click.option(
    "--require-data/--allow-missing",
    default=True,
    show_default=True,
    help="Report #NO_MSG_DATA when the reference yields no value.",
)
def resolve(sheet: str, function: str, args: Tuple[str, ...], require_data: bool) -> None:
    """Resolve a box reference such as INBOXDATA SHEET MSG_ID KEY on behalf of SHEET."""
    payload = _reference_payload(sheet, function, args, require_message_data=require_data)
    result = _request("POST", "/resolve", payload)
    if result.get("error"):
        click.echo(result["error"])
        return
    value = result["value"]
    if isinstance(value, (dict, list)):
        click.echo(json.dumps(value, indent=2))
    else:
        click.echo(cell_text(value))


@cli.command()
@click.argument("sheet")
@click.argument("function")
@click.argument("args", nargs=-1)
def read(sheet: str, function: str, args: Tuple[str, ...]) -> None:
    """Read a labelled value, reporting whether the message was processed."""
    result = _request("POST", "/read", _reference_payload(sheet, function, args))
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.argument("value")
def compose(value: str) -> None:
    """Build a message from a box path like [Sheet1][msg-1] or a JSON/literal value."""
    result = _request("POST", "/messages", {"value": _parse_value(value)})
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.argument("machine_file", type=click.Path(dir_okay=False))
def check(machine_file: str) -> None:
    """Validate a machine file locally without the API."""
    try:
        service = MachineService.from_file(machine_file)
    except MachineSnapshotError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(service.summary().model_dump(), indent=2))


if __name__ == "__main__":
    cli()
