"""Main CLI entry point for the roster manager.

Acts as the presentation layer: it reads user input, calls the store and the
importer, and renders their results.
"""

from pathlib import Path
import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from roster_manager import __version__
from roster_manager.config import get_settings
from roster_manager.engine.validation_engine import ValidationEngine, ValidationResult
from roster_manager.exceptions import RosterError
from roster_manager.importer.csv_importer import (
    CSVImporter,
    FORMAT_HELP,
    ImportFailure,
    ImportSuccess,
    export_csv,
)
from roster_manager.importer.session import ImportSession
from roster_manager.profiles.base import ProfileDraft, ROLE_NAMES
from roster_manager.profiles.ids import IdSequence
from roster_manager.store.storage import YamlRosterFile
from roster_manager.store.store import ProfileStore

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="roster")
@click.option("--roster", "-r", "roster_path", type=click.Path(dir_okay=False), help="Roster YAML file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, roster_path: str | None, verbose: bool) -> None:
    """Roster Manager - Keep track of who can take which role at an event.

    Profiles are stored in a YAML file and can be imported in bulk from CSV.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["roster_path"] = roster_path or settings.roster_path


def _open_store(ctx: click.Context) -> ProfileStore:
    return ProfileStore.open(YamlRosterFile(ctx.obj["roster_path"]))


def _fail(ctx: click.Context, error: RosterError) -> None:
    console.print(f"[red]Error: {error.message}[/red]")
    if ctx.obj.get("verbose", False):
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


@cli.command("list")
@click.option("--role", type=click.Choice(ROLE_NAMES), help="Only show profiles with this role")
@click.pass_context
def list_profiles(ctx: click.Context, role: str | None) -> None:
    """List the profiles on the roster."""
    try:
        store = _open_store(ctx)
    except RosterError as e:
        _fail(ctx, e)

    profiles = [p for p in store if role is None or p.has_role(role)]

    if not profiles:
        console.print("[yellow]No profiles found[/yellow]")
        return

    table = Table(title="Profiles")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Age", justify="right")
    table.add_column("Roles", style="green")

    for profile in profiles:
        table.add_row(
            str(profile.id),
            profile.name,
            str(profile.age),
            ", ".join(profile.role_names()),
        )

    console.print(table)


@cli.command()
@click.option("--name", "-n", default="", help="Full name")
@click.option("--age", "-a", default="", help="Age in years")
@click.option("--role", "roles", multiple=True, help=f"Role ({', '.join(ROLE_NAMES)}), repeatable")
@click.pass_context
def add(ctx: click.Context, name: str, age: str, roles: tuple[str, ...]) -> None:
    """Add a profile by hand."""
    draft = ProfileDraft(name=name, age=age, roles=list(roles))
    if not _check_draft(draft):
        return

    try:
        store = _open_store(ctx)
        before = len(store)
        store.add(draft)
    except RosterError as e:
        _fail(ctx, e)

    if len(store) > before:
        added = store.profiles[-1]
        console.print(f"[green]Added {added.name} (id {added.id})[/green]")


@cli.command()
@click.argument("profile_id", type=int)
@click.option("--name", "-n", help="New name")
@click.option("--age", "-a", help="New age")
@click.option("--role", "roles", multiple=True, help="New roles, repeatable (replaces all roles)")
@click.pass_context
def edit(
    ctx: click.Context,
    profile_id: int,
    name: str | None,
    age: str | None,
    roles: tuple[str, ...],
) -> None:
    """Edit a profile. Options left out keep their current value.

    PROFILE_ID is the id shown by `roster list`.
    """
    try:
        store = _open_store(ctx)
    except RosterError as e:
        _fail(ctx, e)

    current = store.get(profile_id)
    if current is None:
        console.print(f"[yellow]No profile with id {profile_id}[/yellow]")
        return

    draft = ProfileDraft(
        name=name if name is not None else current.name,
        age=age if age is not None else current.age,
        roles=list(roles) if roles else current.role_names(),
    )
    if not _check_draft(draft):
        return

    try:
        store.update(profile_id, draft)
    except RosterError as e:
        _fail(ctx, e)

    console.print(f"[green]Updated profile {profile_id}[/green]")


@cli.command()
@click.argument("profile_id", type=int)
@click.pass_context
def remove(ctx: click.Context, profile_id: int) -> None:
    """Remove a profile.

    PROFILE_ID is the id shown by `roster list`. Unknown ids are ignored.
    """
    try:
        store = _open_store(ctx)
        removed = store.get(profile_id)
        store.remove(profile_id)
    except RosterError as e:
        _fail(ctx, e)

    if removed is None:
        console.print(f"[yellow]No profile with id {profile_id}[/yellow]")
    else:
        console.print(f"[green]Removed {removed.name}[/green]")


@cli.command("import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_csv(ctx: click.Context, csv_path: str) -> None:
    """Import profiles from a CSV file.

    CSV_PATH must follow the format shown by `roster format`. A single
    invalid line rejects the whole file.
    """
    try:
        store = _open_store(ctx)
        session = ImportSession(store)
        result = asyncio.run(session.import_file(csv_path))
    except RosterError as e:
        _fail(ctx, e)

    if isinstance(result, ImportSuccess):
        console.print(Panel.fit(
            f"[green]Imported {len(result)} profiles[/green]\n\n"
            f"[cyan]Source:[/cyan] {csv_path}\n"
            f"[cyan]Roster:[/cyan] {ctx.obj['roster_path']} ({len(store)} profiles)",
            title="Import Complete",
        ))
        return

    _print_import_failure(result, verbose=ctx.obj.get("verbose", False))
    sys.exit(1)


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (stdout if not specified)")
@click.pass_context
def export(ctx: click.Context, output: str | None) -> None:
    """Export the roster in the CSV import format."""
    try:
        store = _open_store(ctx)
    except RosterError as e:
        _fail(ctx, e)

    try:
        content = export_csv(store)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if output:
        Path(output).write_text(content, encoding="utf-8")
        console.print(f"[green]Wrote {len(store)} profiles to {output}[/green]")
    else:
        click.echo(content, nl=False)


@cli.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(ctx: click.Context, csv_path: str) -> None:
    """Validate a CSV file without importing it."""
    content = Path(csv_path).read_text(encoding="utf-8-sig", errors="replace")
    result = CSVImporter(ids=IdSequence(start=1)).parse(content)

    if isinstance(result, ImportSuccess):
        console.print(f"\n{csv_path}: [green]VALID[/green] ({len(result)} profiles)")
        return

    console.print(f"\n{csv_path}: [red]INVALID[/red] ({result.kind.value})")
    _print_validation_result(result.validation)
    sys.exit(1)


@cli.command("format")
def show_format() -> None:
    """Show the expected CSV format."""
    console.print(Panel(FORMAT_HELP, title="Formato CSV"))


def _check_draft(draft: ProfileDraft) -> bool:
    """Report why a draft would be rejected by the store."""
    result = ValidationEngine().validate_draft(draft)
    if not result.valid:
        console.print("[yellow]Profile not saved:[/yellow]")
        _print_validation_result(result)
    return result.valid


def _print_import_failure(failure: ImportFailure, verbose: bool) -> None:
    location = f" (line {failure.line})" if failure.line else ""
    console.print(f"[red]Import rejected{location}: {failure.reason}[/red]\n")
    console.print(Panel(failure.guidance, title="Formato CSV", border_style="red"))
    if verbose:
        _print_validation_result(failure.validation)


def _print_validation_result(result: ValidationResult) -> None:
    """Print validation issues."""
    for issue in result.issues:
        color = {
            "error": "red",
            "warning": "yellow",
        }.get(issue.severity.value, "white")

        console.print(f"  [{color}]{issue.severity.value.upper()}[/{color}]: {issue.message}")
        if issue.path:
            console.print(f"    Path: {issue.path}")
        if issue.context.get("allowed"):
            console.print(f"    Allowed: {', '.join(issue.context['allowed'])}")


if __name__ == "__main__":
    cli()
