"""Person management CLI commands."""

import typer
from rich.panel import Panel

from caretrek.entities.person import parse_relationship, parse_role

from .utils import console, person_service, persons_table

persons_app = typer.Typer(help="👥 Person management commands")


def _roles(values: list[str]) -> list:
    try:
        return [parse_role(value) for value in values]
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None


@persons_app.command("add")
def add_person(
    email: str = typer.Argument(..., help="Email address for the new person"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
    first_name: str = typer.Option(..., "--first-name", help="First name"),
    last_name: str = typer.Option(..., "--last-name", help="Last name"),
    role: list[str] = typer.Option(
        [], "--role", "-r", help="Role to grant: senior, family or admin (repeatable)"
    ),
    phone_number: str | None = typer.Option(None, "--phone", help="Phone number"),
    emergency_contact: str | None = typer.Option(None, "--emergency-contact"),
    medical_conditions: str | None = typer.Option(None, "--medical-conditions"),
    medications: str | None = typer.Option(None, "--medications"),
) -> None:
    """
    ➕ Register a new person.

    Seniors get a senior code that family members use to link to them.
    """
    roles = _roles(role)
    with person_service() as service:
        person = service.register(
            email,
            password,
            first_name,
            last_name,
            roles=roles,
            phone_number=phone_number,
            emergency_contact=emergency_contact,
            medical_conditions=medical_conditions,
            medications=medications,
        )

    console.print(f"[green]✅ Registered {person.full_name} ({person.id})[/green]")
    if person.senior_code:
        console.print(f"[yellow]Senior code: {person.senior_code}[/yellow]")


@persons_app.command("list")
def list_persons(
    role: str | None = typer.Option(None, "--role", "-r", help="Only persons with this role"),
) -> None:
    """📋 List persons."""
    selected = _roles([role])[0] if role else None
    with person_service() as service:
        if selected is None:
            persons = service.repository.list_all()
        else:
            persons = service.repository.list_by_role(selected)

    if not persons:
        console.print("[yellow]No persons found[/yellow]")
        return
    console.print(persons_table(persons))
    console.print(f"\n[dim]Showing {len(persons)} persons[/dim]")


@persons_app.command("grant")
def grant_role(
    person_id: str = typer.Argument(..., help="Person ID"),
    role: str = typer.Argument(..., help="Role: senior, family or admin"),
) -> None:
    """🎫 Grant a role to a person."""
    selected = _roles([role])[0]
    with person_service() as service:
        person = service.grant_role(person_id, selected)
    console.print(f"[green]✅ {person.full_name} now holds {selected.value}[/green]")
    if person.senior_code:
        console.print(f"[yellow]Senior code: {person.senior_code}[/yellow]")


@persons_app.command("link")
def link_senior(
    family_member_id: str = typer.Argument(..., help="Family member's person ID"),
    senior_code: str = typer.Argument(..., help="Code shared by the senior"),
    relationship: str | None = typer.Option(
        None,
        "--relationship",
        help="child, spouse, sibling, caregiver or other",
    ),
) -> None:
    """🔗 Link a family member to a senior by senior code."""
    try:
        label = parse_relationship(relationship) if relationship else None
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    with person_service() as service:
        senior = service.link_by_code(family_member_id, senior_code, label)
    console.print(f"[green]✅ Linked to {senior.full_name} ({senior.id})[/green]")


@persons_app.command("unlink")
def unlink_senior(
    family_member_id: str = typer.Argument(..., help="Family member's person ID"),
    senior_id: str = typer.Argument(..., help="Senior's person ID"),
) -> None:
    """✂️ Remove a link between a family member and a senior."""
    with person_service() as service:
        removed = service.unlink(family_member_id, senior_id)
    if removed:
        console.print("[green]✅ Link removed[/green]")
    else:
        console.print("[yellow]No such link[/yellow]")


@persons_app.command("seniors")
def show_linked_seniors(
    family_member_id: str = typer.Argument(..., help="Family member's person ID"),
) -> None:
    """👵 Show the seniors a family member follows."""
    with person_service() as service:
        seniors = service.linked_seniors(family_member_id)
    console.print(persons_table(seniors, title="Linked seniors"))


@persons_app.command("family")
def show_family_members(
    senior_id: str = typer.Argument(..., help="Senior's person ID"),
) -> None:
    """👪 Show the family members following a senior."""
    with person_service() as service:
        members = service.family_members(senior_id)
    console.print(
        Panel.fit(f"[bold cyan]{len(members)} family member(s)[/bold cyan]", border_style="cyan")
    )
    if members:
        console.print(persons_table(members))
