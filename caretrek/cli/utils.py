"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.table import Table

from caretrek.core.exceptions import CareTrekError
from caretrek.core.services import DbSessionService, PersonManagementService
from caretrek.entities.person import Person

console = Console()


@contextmanager
def person_service() -> Iterator[PersonManagementService]:
    """Yield a service bound to a committed-on-exit session.

    Domain errors are printed and turned into exit code 1.
    """
    db = DbSessionService()
    try:
        with db.session_scope() as session:
            yield PersonManagementService(session)
    except (CareTrekError, ValueError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from None
    finally:
        db.dispose()


def persons_table(persons: list[Person], title: str | None = None) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Roles", style="blue")
    table.add_column("Senior code", style="yellow")
    table.add_column("Active", style="yellow")

    for person in persons:
        table.add_row(
            person.id,
            person.full_name,
            person.email,
            ", ".join(sorted(role.value for role in person.roles)),
            person.senior_code or "",
            "✅" if person.active else "❌",
        )
    return table
