"""
Command line entry point for the flight bidding system.
"""

import typer
from rich.console import Console
from rich.table import Table
from rich import box

from flightbids.database.config import DatabaseConfig
from flightbids.database.models import Flight, User
from flightbids.exceptions import BidError
from flightbids.services.bid_manager import BidManager
from flightbids.utils.config import configure_logging, get_config

app = typer.Typer(help="Flight bid management")
console = Console()


def _database() -> DatabaseConfig:
    config = get_config()
    configure_logging(config)
    return DatabaseConfig(database_url=config.database_url, echo=config.debug)


def _load(session, model, record_id: int, label: str):
    record = session.get(model, record_id)
    if record is None:
        console.print(f"[red]{label} {record_id} not found[/red]")
        raise typer.Exit(code=1)
    return record


@app.command("init-db")
def init_db():
    """Create the database tables."""
    db = _database()
    db.create_tables()
    console.print(f"[green]✓[/green] Tables created ({db.db_type})")
    db.close()


@app.command("bids")
def list_bids(user_id: int = typer.Argument(..., help="User ID")):
    """List a user's bids."""
    db = _database()
    try:
        with db.get_session_context() as session:
            user = _load(session, User, user_id, "User")
            bids = BidManager(session, get_config().bids).find_bids_for_user(user)

            table = Table(title=f"Bids for {user.ident}", box=box.ROUNDED)
            table.add_column("Bid", justify="right")
            table.add_column("Flight", style="cyan")
            table.add_column("Route")
            table.add_column("Subfleets")
            table.add_column("Placed", style="dim")
            for bid in bids:
                flight = bid.flight
                table.add_row(
                    str(bid.id),
                    flight.ident,
                    f"{flight.dpt_airport_id} → {flight.arr_airport_id}",
                    ", ".join(sf.type for sf in flight.subfleets) or "-",
                    bid.created_at.strftime("%Y-%m-%d %H:%M"),
                )
            console.print(table)
    finally:
        db.close()


@app.command("bid")
def add_bid(
    user_id: int = typer.Argument(..., help="User ID"),
    flight_id: int = typer.Argument(..., help="Flight ID"),
):
    """Place a bid on a flight."""
    db = _database()
    try:
        with db.get_session_context() as session:
            user = _load(session, User, user_id, "User")
            flight = _load(session, Flight, flight_id, "Flight")
            bid = BidManager(session, get_config().bids).add_bid(flight, user)
            console.print(f"[green]✓[/green] Bid {bid.id}: {user.ident} on {flight.ident}")
    except BidError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=1)
    finally:
        db.close()


@app.command("unbid")
def remove_bid(
    user_id: int = typer.Argument(..., help="User ID"),
    flight_id: int = typer.Argument(..., help="Flight ID"),
):
    """Remove a user's bid on a flight."""
    db = _database()
    try:
        with db.get_session_context() as session:
            user = _load(session, User, user_id, "User")
            flight = _load(session, Flight, flight_id, "Flight")
            BidManager(session, get_config().bids).remove_bid(flight, user)
            console.print(f"[green]✓[/green] Bid removed: {user.ident} on {flight.ident}")
    finally:
        db.close()


def main():
    app()


if __name__ == "__main__":
    main()
