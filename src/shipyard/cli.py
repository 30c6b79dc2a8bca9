"""CLI entry point for Shipyard.

Commands mirror the ticket lifecycle: sync the local queue, poll for ready
work, create tickets, start and finish them, and inspect details.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click

from shipyard.config import ConfigError, ShipyardConfig, load_config
from shipyard.engine import EngineError, ShipyardEngine
from shipyard.fetcher import FetcherError
from shipyard.git_manager import BranchError, GitManager, branch_name_for
from shipyard.logging import setup_logging
from shipyard.notion import NotionError
from shipyard.state_store import StateStoreError, SyncState
from shipyard.tickets import Ticket, TicketArea, TicketPriority, TicketStatus, short_id
from shipyard.work_queue import QueueItem

R = TypeVar("R")

TICKET_TYPES = ("Bug", "Task", "Story", "Epic")

# Display order of status groups in `shipyard sync`
STATUS_DISPLAY_ORDER = (
    TicketStatus.IN_PROGRESS,
    TicketStatus.IN_REVIEW,
    TicketStatus.REVIEW_AI_FIX,
    TicketStatus.OPEN,
    TicketStatus.ON_HOLD,
    TicketStatus.BLOCKED_BY_HUMAN,
)


def _run(config: ShipyardConfig, action: Callable[[ShipyardEngine], Awaitable[R]]) -> R:
    """Run an async engine action, exiting with status 1 on known failures."""

    async def runner() -> R:
        engine = ShipyardEngine.from_config(config)
        try:
            return await action(engine)
        finally:
            await engine.close()

    try:
        return asyncio.run(runner())
    except ConfigError as e:
        click.echo(f"x Configuration error: {e}", err=True)
    except (EngineError, FetcherError, NotionError, StateStoreError) as e:
        click.echo(f"x {e}", err=True)
    sys.exit(1)


def _ids(ids: list[str]) -> str:
    return ", ".join(short_id(i) for i in ids)


def format_queue_item(item: QueueItem) -> str:
    """One display line for a queue item."""
    priority = item.priority or TicketPriority.P4
    area = f" [{item.area}]" if item.area else ""
    branch = f" -> {item.branch}" if item.branch else ""
    blocked = f" (blocked by {_ids(item.blocked_by)})" if item.blocked_by else ""
    blocking = f" (blocks {_ids(item.blocks)})" if item.blocks else ""
    return f"{priority} {short_id(item.ticket_id)}  {item.title}{area}{branch}{blocked}{blocking}"


def echo_state(state: SyncState) -> None:
    """Print the queue grouped by status."""
    if not state.queue:
        click.echo("  Queue is empty - no active tickets for this app.")
        return

    click.echo(f"  {len(state.queue)} active ticket(s):\n")
    for status in STATUS_DISPLAY_ORDER:
        items = [item for item in state.queue if item.status == status]
        if not items:
            continue
        click.echo(f"  > {status} ({len(items)})")
        for item in items:
            click.echo(f"    {format_queue_item(item)}")
        click.echo()

    click.echo(f"  Last synced: {state.last_synced}")


@click.group()
@click.version_option(package_name="shipyard-sync")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to shipyard.yaml (defaults to environment variables)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Shipyard - sync the local work queue with the Shipyard tickets database."""
    setup_logging(level="DEBUG" if verbose else None, console=verbose)
    try:
        config = load_config(config_path) if config_path else ShipyardConfig.from_env()
    except ConfigError as e:
        click.echo(f"x Configuration error: {e}", err=True)
        sys.exit(1)
    ctx.obj = config


@main.command()
@click.pass_obj
def sync(config: ShipyardConfig) -> None:
    """Sync state from Shipyard and display the queue."""
    click.echo("~ Syncing Shipyard state...\n")
    state = _run(config, lambda engine: engine.sync())
    echo_state(state)


@main.command()
@click.pass_obj
def poll(config: ShipyardConfig) -> None:
    """List Open tickets ready to start."""
    click.echo("~ Polling for Open tickets...\n")
    tickets = _run(config, lambda engine: engine.list_ready())

    if not tickets:
        click.echo("  No tickets ready for dev.")
        return

    click.echo(f"  {len(tickets)} ticket(s) ready:\n")
    for ticket in tickets:
        area = f" [{ticket.area}]" if ticket.area else ""
        due = f" (due {ticket.due})" if ticket.due else ""
        ticket_type = f" {ticket.type}" if ticket.type else ""
        click.echo(f"  {short_id(ticket.id)}{ticket_type}  {ticket.title}{area}{due}")
        if ticket.summary:
            click.echo(f"         {ticket.summary}")
        click.echo(f"         ID: {ticket.id}")
        click.echo()


@main.command()
@click.argument("title")
@click.option(
    "--area",
    type=click.Choice([a.value for a in TicketArea]),
    required=True,
    help="Ticket area",
)
@click.option("--body", default=None, help="Ticket description")
@click.option(
    "--priority",
    type=click.Choice([p.value for p in TicketPriority]),
    default=TicketPriority.P0.value,
    show_default=True,
)
@click.option("--assignee", default=None, help="Team member name")
@click.option(
    "--type",
    "ticket_type",
    type=click.Choice(TICKET_TYPES),
    default="Story",
    show_default=True,
)
@click.option("--application", default=None, help="Application (defaults to TARGET_APP)")
@click.pass_obj
def create(
    config: ShipyardConfig,
    title: str,
    area: str,
    body: str | None,
    priority: str,
    assignee: str | None,
    ticket_type: str,
    application: str | None,
) -> None:
    """Create a new ticket."""
    assignee_label = f" -> {assignee}" if assignee else ""
    click.echo(f'> Creating ticket: "{title}" [{area}] {priority} {ticket_type}{assignee_label}')

    async def action(engine: ShipyardEngine) -> Ticket:
        ticket = await engine.create_ticket(
            title,
            TicketArea(area),
            body=body,
            priority=TicketPriority(priority),
            assignee=assignee,
            ticket_type=ticket_type,
            application=application,
        )
        await engine.sync()
        return ticket

    ticket = _run(config, action)
    click.echo(f"+ Created: {short_id(ticket.id)}")
    click.echo(f"  ID: {ticket.id}")
    click.echo(f"  Status: {ticket.status}")


@main.command()
@click.argument("ticket_id")
@click.option(
    "--repo-path",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Local clone to create the branch in",
)
@click.pass_obj
def start(config: ShipyardConfig, ticket_id: str, repo_path: Path) -> None:
    """Mark a ticket In Progress and create its feature branch."""
    click.echo(f"> Starting ticket {short_id(ticket_id)}...")
    branch = branch_name_for(ticket_id)
    git = GitManager(repo_path)

    async def action(engine: ShipyardEngine) -> None:
        await engine.set_status(ticket_id, TicketStatus.IN_PROGRESS)
        click.echo("  + Status -> In Progress")

        try:
            created = git.checkout_branch(branch)
        except BranchError as e:
            click.echo(f"  ! {e}", err=True)
        else:
            verb = "Branch created" if created else "Switched to existing branch"
            click.echo(f"  + {verb}: {branch}")

        await engine.set_branch(ticket_id, branch)
        click.echo("  + Branch synced to Shipyard")
        await engine.sync()

    _run(config, action)
    click.echo(f"\n+ Ticket started. You're on branch: {branch}")


@main.command()
@click.argument("ticket_id")
@click.pass_obj
def done(config: ShipyardConfig, ticket_id: str) -> None:
    """Mark a ticket Done and re-sync."""
    click.echo(f"> Completing ticket {short_id(ticket_id)}...")

    async def action(engine: ShipyardEngine) -> SyncState:
        await engine.set_status(ticket_id, TicketStatus.DONE)
        click.echo("  + Status -> Done")
        return await engine.sync()

    state = _run(config, action)
    click.echo(f"\n+ Ticket done. {len(state.queue)} ticket(s) remaining.")


@main.command("status")
@click.argument("ticket_id")
@click.argument("new_status", type=click.Choice([s.value for s in TicketStatus]))
@click.pass_obj
def set_status(config: ShipyardConfig, ticket_id: str, new_status: str) -> None:
    """Set a ticket's status and re-sync."""

    async def action(engine: ShipyardEngine) -> SyncState:
        await engine.set_status(ticket_id, TicketStatus(new_status))
        return await engine.sync()

    _run(config, action)
    click.echo(f"+ {short_id(ticket_id)} -> {new_status}")


@main.command()
@click.argument("ticket_id")
@click.pass_obj
def get(config: ShipyardConfig, ticket_id: str) -> None:
    """Show full ticket details."""
    click.echo(f"> Fetching ticket {short_id(ticket_id)}...\n")
    details = _run(config, lambda engine: engine.fetch_details(ticket_id))
    ticket = details.ticket

    click.echo(f"Title: {ticket.title}")
    click.echo(f"Status: {ticket.status}")
    for label, value in (
        ("Area", ticket.area),
        ("Type", ticket.type),
        ("Priority", ticket.priority),
        ("Spec URL", ticket.spec_url),
        ("Due", ticket.due),
        ("Branch", ticket.branch),
        ("Commit", ticket.commit),
        ("Feature", ticket.feature),
        ("Resolved", ticket.resolved_at),
    ):
        if value:
            click.echo(f"{label}: {value}")
    if ticket.blocked_by:
        click.echo(f"Blocked by: {_ids(ticket.blocked_by)}")
    if ticket.blocks:
        click.echo(f"Blocks: {_ids(ticket.blocks)}")

    click.echo(f"\nDescription:\n{details.description or '(no description)'}")
    click.echo(f"\nCreated: {ticket.created_at}")
    click.echo(f"Updated: {ticket.updated_at}")


@main.command()
@click.argument("ticket_id")
@click.option("--branch", default=None)
@click.option("--commit", default=None)
@click.option("--feature", default=None)
@click.pass_obj
def annotate(
    config: ShipyardConfig,
    ticket_id: str,
    branch: str | None,
    commit: str | None,
    feature: str | None,
) -> None:
    """Set branch, commit or feature annotations on a ticket and re-sync."""
    if branch is None and commit is None and feature is None:
        raise click.UsageError("Give at least one of --branch, --commit, --feature")

    async def action(engine: ShipyardEngine) -> None:
        if branch is not None:
            await engine.set_branch(ticket_id, branch)
            click.echo(f"  + Branch -> {branch}")
        if commit is not None:
            await engine.set_commit(ticket_id, commit)
            click.echo(f"  + Commit -> {commit}")
        if feature is not None:
            await engine.set_feature(ticket_id, feature)
            click.echo(f"  + Feature -> {feature}")
        await engine.sync()

    _run(config, action)


@main.command()
@click.argument("ticket_id")
@click.option("--blocked-by", multiple=True, help="Ticket this one depends on (repeatable)")
@click.option("--blocks", multiple=True, help="Ticket depending on this one (repeatable)")
@click.option("--clear-blocked-by", is_flag=True, help="Remove all dependencies")
@click.option("--clear-blocks", is_flag=True, help="Remove all dependents")
@click.pass_obj
def depend(
    config: ShipyardConfig,
    ticket_id: str,
    blocked_by: tuple[str, ...],
    blocks: tuple[str, ...],
    clear_blocked_by: bool,
    clear_blocks: bool,
) -> None:
    """Replace a ticket's dependency relations and re-sync."""
    new_blocked_by = [] if clear_blocked_by else (list(blocked_by) or None)
    new_blocks = [] if clear_blocks else (list(blocks) or None)
    if new_blocked_by is None and new_blocks is None:
        raise click.UsageError("Nothing to update")

    async def action(engine: ShipyardEngine) -> None:
        await engine.set_dependencies(ticket_id, blocked_by=new_blocked_by, blocks=new_blocks)
        await engine.sync()

    _run(config, action)
    click.echo(f"+ Dependencies updated for {short_id(ticket_id)}")


@main.command()
@click.argument("ticket_id")
@click.argument("name")
@click.pass_obj
def assign(config: ShipyardConfig, ticket_id: str, name: str) -> None:
    """Assign a ticket to a team member by name and re-sync."""

    async def action(engine: ShipyardEngine) -> None:
        await engine.set_assignee(ticket_id, name)
        await engine.sync()

    _run(config, action)
    click.echo(f"+ {short_id(ticket_id)} assigned to {name}")


@main.command()
@click.argument("ticket_id")
@click.pass_obj
def archive(config: ShipyardConfig, ticket_id: str) -> None:
    """Archive a ticket and re-sync."""

    async def action(engine: ShipyardEngine) -> None:
        await engine.archive(ticket_id)
        await engine.sync()

    _run(config, action)
    click.echo(f"+ Archived {short_id(ticket_id)}")


@main.command()
@click.pass_obj
def selftest(config: ShipyardConfig) -> None:
    """Check configuration, read access and write access."""
    click.echo("Shipyard - Self-test\n")
    click.echo(f"+ Database ID: {config.database_id or '(missing)'}")
    if config.target_app:
        click.echo(f"+ Target application: {config.target_app}")
    else:
        click.echo("! TARGET_APP is not set - tickets will not be filtered by application")
    if config.acting_identity_id:
        click.echo(f"+ Acting identity: {config.acting_identity_id}")
    else:
        click.echo("! NOTION_AI_SQUAD_USER_ID is not set - no assignee filtering")
    click.echo(f"+ Team users configured: {len(config.team_users)}")

    click.echo("\n> Querying tickets data source...")
    report = _run(config, lambda engine: engine.self_test())
    click.echo(f"+ Tickets data source: {report.data_source_id}")
    click.echo(f"+ Found {report.page_count} page(s)")

    if report.sample is not None:
        click.echo(f'\n  Sample ticket: "{report.sample.title}"')
        click.echo(f"  Status: {report.sample.status}")
        click.echo(f"  Area: {report.sample.area or '(none)'}")
        click.echo(f"  Application: {report.sample.application or '(none)'}")

    click.echo("\n  Tickets by application:")
    for app, count in report.tickets_by_application.items():
        marker = " <-- TARGET" if app == config.target_app else ""
        click.echo(f"    {app}: {count}{marker}")

    if not report.write_ok:
        click.echo(f"\nx Write FAILED: {report.write_error}", err=True)
        sys.exit(1)
    click.echo("\n+ Write OK (probe created and archived)")
    click.echo("+ Self-test passed")


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.pass_obj
def serve(config: ShipyardConfig, host: str, port: int) -> None:
    """Run the REST API."""
    import uvicorn  # noqa: PLC0415

    from shipyard.api import create_app  # noqa: PLC0415

    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":
    main()
