"""CLI entry point for InterviewPrep."""

import json
import logging
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from interviewprep.checklist.models import ChecklistItem, JobContext
from interviewprep.checklist.session import ChecklistSession, compute_progress
from interviewprep.config import (
    CONTENT_KEY_PREFIX,
    CULTURE_OPTIONS,
    SENIORITY_LEVELS,
    ProfileConfig,
    create_profile as create_profile_config,
    list_profiles as list_profiles_config,
    load_profile,
    set_default_profile,
)
from interviewprep.storage.database import Database
from interviewprep.storage.export import export_checklist
from interviewprep.storage.store import SQLiteStore

console = Console(force_terminal=True)


def _get_profile_config(ctx) -> ProfileConfig:
    """Get the profile config from context."""
    return ctx.obj["profile_config"]


@click.group()
@click.option(
    "--profile", "-P",
    default=None,
    help="Profile slug (default: from profiles.json)",
)
@click.option(
    "--db",
    default=None,
    help="Database path (overrides profile config)",
    type=click.Path(),
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, profile, db, verbose):
    """InterviewPrep - Interview preparation checklists for your job search."""
    ctx.ensure_object(dict)

    try:
        profile_config = load_profile(profile)
    except ValueError as e:
        raise click.ClickException(str(e))
    ctx.obj["profile_config"] = profile_config

    if db:
        ctx.obj["db_path"] = Path(db)
    else:
        ctx.obj["db_path"] = profile_config.db_path

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


# ---------------------------------------------------------------------------
# Profile Management Commands
# ---------------------------------------------------------------------------


@cli.group(name="profile")
def profile_group():
    """Manage profiles."""
    pass


@profile_group.command(name="create")
@click.argument("slug")
@click.option("--name", required=True, help="Profile display name")
def profile_create(slug, name):
    """Create a new profile."""
    try:
        config = create_profile_config(slug, name)
        console.print(f"[green]Created profile:[/green] {slug}")
        console.print(f"  Name: {config.name}")
        console.print(f"  DB: {config.db_path}")
        console.print(f"  Exports: {config.exports_dir}")
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")


@profile_group.command(name="list")
def profile_list():
    """List all registered profiles."""
    profiles = list_profiles_config()
    if not profiles:
        console.print("[yellow]No profiles registered.[/yellow]")
        return

    table = Table(title="Registered Profiles")
    table.add_column("Slug", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Data directory")
    table.add_column("Default", justify="center")

    for p in profiles:
        table.add_row(
            p["slug"],
            p["name"],
            p["data_dir"],
            "[green]✓[/green]" if p["is_default"] else "",
        )
    console.print(table)


@profile_group.command(name="info")
@click.argument("slug")
def profile_info(slug):
    """Show details for a profile."""
    try:
        config = load_profile(slug)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    console.print(f"[bold]{config.name}[/bold] ({config.slug})")
    console.print(f"  DB: {config.db_path}")
    console.print(f"  Exports: {config.exports_dir}")

    if config.db_path.exists():
        with Database(config.db_path) as db:
            saved = SQLiteStore(db).keys(CONTENT_KEY_PREFIX)
        console.print(f"\n  Saved checklists: {len(saved)}")
    else:
        console.print("\n  [dim]No database yet (generate a checklist to start).[/dim]")


@profile_group.command(name="set-default")
@click.argument("slug")
def profile_set_default(slug):
    """Set the default profile."""
    try:
        set_default_profile(slug)
        console.print(f"[green]Default profile set to:[/green] {slug}")
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")


# ---------------------------------------------------------------------------
# Checklist Commands
# ---------------------------------------------------------------------------


def identity_options(f):
    """Options that identify a checklist: a job, or a role and company."""
    options = [
        click.option("--job-id", default=None, help="Stable job identifier"),
        click.option("--title", default=None, help="Job title (when preparing for a saved job)"),
        click.option("--description", default=None, help="Job description text"),
        click.option(
            "--description-file",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Read the job description from a file",
        ),
        click.option("--location", default=None, help="Job location (display only)"),
        click.option("--role", default="", help="Role, e.g. 'Software Engineer'"),
        click.option("--company", default="", help="Company name"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _job_from_options(job_id, title, description, description_file, location, company) -> JobContext | None:
    if description_file:
        description = Path(description_file).read_text()
    if not any([job_id, title, description, location]):
        return None
    return JobContext(
        id=job_id,
        title=title,
        company=company or None,
        description=description,
        location=location,
    )


@contextmanager
def _open_session(ctx, job_id, title, description, description_file, location, role, company):
    """Open the profile database and yield a session for the given identity."""
    job = _job_from_options(job_id, title, description, description_file, location, company)
    with Database(ctx.obj["db_path"]) as db:
        yield ChecklistSession(SQLiteStore(db), job=job, role=role, company=company)


def _print_checklist(session: ChecklistSession):
    view = session.view()

    job = view["job"]
    if job:
        console.print(f"[bold]{job.get('title') or ''}[/bold] [dim]{job.get('company') or ''}[/dim]")
        if job.get("location"):
            console.print(f"📍 {job['location']}")

    if not view["has_items"]:
        console.print(f"[yellow]{view['empty_message']}[/yellow]")
        return

    for group in view["groups"]:
        table = Table(title=group["title"], title_justify="left", show_header=True)
        table.add_column("", justify="center", width=3)
        table.add_column("ID", style="cyan")
        table.add_column("Task", style="bold")
        table.add_column("Detail", style="dim")
        for item in group["items"]:
            table.add_row(
                "[green]✓[/green]" if item["completed"] else "·",
                item["id"],
                item["title"],
                item["detail"],
            )
        console.print(table)

    console.print(f"\nProgress: [bold]{view['progress']}%[/bold]")


@cli.group(name="checklist")
def checklist_group():
    """Interview preparation checklists: generate, track, and export."""
    pass


@checklist_group.command(name="generate")
@identity_options
@click.option("--seniority", type=click.Choice(SENIORITY_LEVELS), default=None, help="Seniority level")
@click.option("--culture", type=click.Choice(CULTURE_OPTIONS), default=None, help="Company culture")
@click.pass_context
def checklist_generate(ctx, seniority, culture, **identity):
    """Generate (or regenerate) a checklist.

    Regenerating replaces the saved checklist and resets every completed task.
    """
    with _open_session(ctx, **identity) as session:
        session.load_settings()
        if seniority is not None:
            session.set_seniority(seniority)
        if culture is not None:
            session.set_culture(culture)

        session.generate()
        console.print(
            f"[green]Generated[/green] [bold]{len(session.items)}[/bold] tasks "
            f"for [cyan]{session.identity_key}[/cyan]"
        )
        _print_checklist(session)


@checklist_group.command(name="show")
@identity_options
@click.pass_context
def checklist_show(ctx, **identity):
    """Show a saved checklist (auto-generates once for a job without one)."""
    with _open_session(ctx, **identity) as session:
        session.load()
        _print_checklist(session)


@checklist_group.command(name="toggle")
@identity_options
@click.argument("item_ids", nargs=-1, required=True)
@click.pass_context
def checklist_toggle(ctx, item_ids, **identity):
    """Mark tasks done (or undone) by ID."""
    with _open_session(ctx, **identity) as session:
        session.load()
        for item_id in item_ids:
            if session.toggle_item(item_id):
                state = next(i.completed for i in session.items if i.id == item_id)
                label = "[green]done[/green]" if state else "[yellow]not done[/yellow]"
                console.print(f"  {item_id}: {label}")
            else:
                console.print(f"  [yellow]Warning:[/yellow] No task with ID {item_id!r}")
        console.print(f"Progress: [bold]{session.progress()}%[/bold]")


@checklist_group.command(name="clear")
@identity_options
@click.pass_context
def checklist_clear(ctx, **identity):
    """Delete a saved checklist and its settings."""
    with _open_session(ctx, **identity) as session:
        session.clear()
        console.print(f"[green]Cleared[/green] checklist for [cyan]{session.identity_key}[/cyan]")


@checklist_group.command(name="settings")
@identity_options
@click.option("--seniority", type=click.Choice(SENIORITY_LEVELS), default=None, help="Seniority level")
@click.option("--culture", type=click.Choice(CULTURE_OPTIONS), default=None, help="Company culture")
@click.pass_context
def checklist_settings(ctx, seniority, culture, **identity):
    """Show or change saved seniority and culture."""
    with _open_session(ctx, **identity) as session:
        session.load_settings()
        if seniority is not None:
            session.set_seniority(seniority)
        if culture is not None:
            session.set_culture(culture)
        console.print(f"Seniority: {session.seniority or '[dim]not set[/dim]'}")
        console.print(f"Culture: {session.culture or '[dim]not set[/dim]'}")


@checklist_group.command(name="progress")
@identity_options
@click.pass_context
def checklist_progress(ctx, **identity):
    """Show completion progress."""
    with _open_session(ctx, **identity) as session:
        session.load()
        done = sum(1 for i in session.items if i.completed)
        console.print(
            f"Progress: [bold]{session.progress()}%[/bold] "
            f"({done}/{len(session.items)} tasks)"
        )


@checklist_group.command(name="export")
@identity_options
@click.option("--format", "fmt", type=click.Choice(["md", "json"]), default="md", help="Output format")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output directory")
@click.pass_context
def checklist_export(ctx, fmt, output, **identity):
    """Export a checklist as Markdown or JSON."""
    profile_config = _get_profile_config(ctx)
    output_dir = Path(output) if output else profile_config.exports_dir

    with _open_session(ctx, **identity) as session:
        session.load()
        path = export_checklist(session, output_dir, fmt)
        console.print(f"[green]Exported[/green] to {path}")


@checklist_group.command(name="list")
@click.pass_context
def checklist_list(ctx):
    """List saved checklists."""
    db_path = ctx.obj["db_path"]
    if not db_path.exists():
        console.print("[yellow]No database found.[/yellow] Generate a checklist first.")
        return

    with Database(db_path) as db:
        store = SQLiteStore(db)
        keys = store.keys(CONTENT_KEY_PREFIX)
        if not keys:
            console.print("[yellow]No saved checklists.[/yellow]")
            return

        table = Table(title="Saved Checklists")
        table.add_column("Identity", style="cyan")
        table.add_column("Tasks", justify="right")
        table.add_column("Progress", justify="right")

        for key in keys:
            try:
                items = [ChecklistItem.from_dict(d) for d in json.loads(store.get(key) or "[]")]
            except (json.JSONDecodeError, KeyError, TypeError):
                table.add_row(key[len(CONTENT_KEY_PREFIX):], "[red]unreadable[/red]", "")
                continue
            table.add_row(key[len(CONTENT_KEY_PREFIX):], str(len(items)), f"{compute_progress(items)}%")

        console.print(table)
