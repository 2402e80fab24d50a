"""Trades CRM CLI - run the API and manage the database."""

import asyncio
import uuid

import typer
from rich.console import Console
from rich.table import Table

from .config import settings
from .database import create_store
from .security.sessions import SessionUser

app = typer.Typer(
    name="tradecrm",
    help="Trades dispatch CRM - lead capture, assignment and payments",
    no_args_is_help=True,
)
console = Console()

# Reports run as a synthetic admin; nothing is written under this identity.
CLI_ADMIN = SessionUser(id=uuid.UUID(int=0), email="cli@localhost", role="admin")


def _alembic_config():
    from alembic.config import Config

    return Config(str(settings.base_dir / "alembic.ini"))


@app.command()
def serve(
    port: int = typer.Option(8020, "--port", "-p", help="Port to run on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Launch the CRM API."""
    import uvicorn

    console.print(f"[bold cyan]Starting Trades CRM at http://{host}:{port}[/bold cyan]")
    uvicorn.run("tradecrm.app:create_app", factory=True, host=host, port=port, reload=reload)


@app.command()
def migrate(revision: str = typer.Argument("head", help="Target revision")):
    """Apply Alembic migrations to the configured database."""
    from alembic import command

    command.upgrade(_alembic_config(), revision)
    console.print(f"[green]Database upgraded to {revision}[/green]")


@app.command("create-admin")
def create_admin(
    email: str = typer.Option(settings.auth_bootstrap_email, "--email", help="Admin email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    name: str = typer.Option(settings.auth_bootstrap_name, "--name", help="Display name"),
):
    """Create an admin account if the email is not taken yet."""
    from .services import auth_svc

    async def _create() -> bool:
        store = create_store(settings)
        try:
            async with store.session_factory() as db:
                return await auth_svc.bootstrap_admin(db, email, password, name)
        finally:
            await store.dispose()

    if asyncio.run(_create()):
        console.print(f"[green]Admin {email} created[/green]")
    else:
        console.print(f"[yellow]{email} already exists, nothing changed[/yellow]")


@app.command()
def trades():
    """List trade accounts."""
    from .services import trade_svc

    async def _list():
        store = create_store(settings)
        try:
            async with store.session_factory() as db:
                return await trade_svc.list_trades(db, CLI_ADMIN)
        finally:
            await store.dispose()

    rows = asyncio.run(_list())
    if not rows:
        console.print("[dim]No trades yet.[/dim]")
        return

    table = Table(title=f"Trades ({len(rows)})")
    table.add_column("Name", style="cyan")
    table.add_column("Trade")
    table.add_column("Location")
    table.add_column("Email", style="dim")
    table.add_column("Availability")
    for trade in rows:
        table.add_row(
            trade.name, trade.trade_type, trade.location or "-", trade.email, trade.availability
        )
    console.print(table)


@app.command()
def dashboard(month: str = typer.Option(None, "--month", "-m", help="YYYY-MM")):
    """Print dashboard statistics."""
    from .errors import ValidationError
    from .services import report_svc

    async def _stats():
        store = create_store(settings)
        try:
            async with store.session_factory() as db:
                return await report_svc.dashboard(db, CLI_ADMIN, month)
        finally:
            await store.dispose()

    try:
        stats = asyncio.run(_stats())
    except ValidationError as exc:
        console.print(f"[red]{exc.reason}[/red]")
        raise typer.Exit(1)

    revenue = stats["revenue"]
    console.print(f"[bold]Leads:[/bold] {stats['totalLeads']}")
    console.print(f"[bold]Conversion:[/bold] {stats['conversionRate']}%")
    console.print(
        f"[bold]Revenue:[/bold] {revenue['total']:.2f} from {revenue['count']} payments "
        f"({revenue['perLead']:.2f} per lead)"
    )

    table = Table(title="Leads by status")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")
    for row in stats["leadsByStatus"]:
        table.add_row(row["status"], str(row["count"]))
    console.print(table)


if __name__ == "__main__":
    app()
