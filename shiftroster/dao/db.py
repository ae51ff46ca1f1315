"""Repository wiring, seeding and CLI commands for the web application."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from flask import Flask, current_app
from flask.cli import with_appcontext

from ..adapters import config_loader
from ..adapters.repository import RosterRepository
from ..domain.models import SYSTEM_ACTOR
from ..errors import DomainError, StorageError
from ..services import auth_service, validation
from ..services.scheduler import ScheduleGenerator, SchedulingRules

logger = logging.getLogger(__name__)

EXTENSION_KEY = "shiftroster.repository"


def get_repository() -> RosterRepository:
    """Return the repository bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]


def get_rules() -> SchedulingRules:
    return SchedulingRules.from_config(current_app.config)


def get_generator() -> ScheduleGenerator:
    return ScheduleGenerator(get_repository(), get_rules())


def init_app(app: Flask) -> None:
    """Attach the repository and CLI commands to the app."""
    app.extensions[EXTENSION_KEY] = RosterRepository(app.config["DATABASE"])
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_command)
    app.cli.add_command(generate_command)


def ensure_schema(app: Flask) -> None:
    """Ensure the database schema and seed data are present."""
    initialize_database(app, drop_existing=False)


def initialize_database(app: Flask, *, drop_existing: bool) -> int:
    repository: RosterRepository = app.extensions[EXTENSION_KEY]
    repository.initialize_schema(drop_existing=drop_existing)
    return seed_database(repository, app.config.get("SEED_PATH"))


def seed_database(repository: RosterRepository, seed_path: str | Path | None) -> int:
    """Load the seed roster when no employee exists yet; returns employees created."""
    if not seed_path or repository.count_employees():
        return 0
    data = config_loader.load_config(seed_path)

    created = {}
    for entry in data.get("employees", []):
        employee = repository.create_employee(
            emp_no=str(entry["emp_no"]),
            name=entry["name"],
            section=entry["section"],
            weekly_off=entry["weekly_off"],
            password_hash=auth_service.hash_password(str(entry["password"])),
            is_admin=bool(entry.get("is_admin", False)),
            email=entry.get("email"),
            phone=entry.get("phone"),
        )
        created[employee.emp_no] = employee

    for entry in data.get("assignments", []):
        employee = created.get(str(entry["emp_no"]))
        if employee is None:
            logger.warning(f"Seed assignment skipped, unknown employee number {entry['emp_no']!r}")
            continue
        repository.upsert_assignment(
            employee.id,
            validation.parse_date(str(entry["date"])),
            validation.parse_shift(entry["shift"]),
        )

    logger.info(f"Seeded {len(created)} employees from {seed_path}")
    return len(created)


@click.command("init-db")
@click.option("--force", is_flag=True, help="Recreate the database from scratch.")
@with_appcontext
def init_db_command(force: bool) -> None:
    """Initialize the database using the bundled migrations and seeds."""
    app = current_app._get_current_object()  # type: ignore[attr-defined]
    created = initialize_database(app, drop_existing=force)
    versions = ", ".join(get_repository().applied_migrations())
    click.echo(f"Database initialized at schema {versions} ({created} employees seeded).")


@click.command("seed")
@click.option("--path", "seed_path", type=click.Path(exists=True, dir_okay=False), help="Roster YAML/JSON file.")
@with_appcontext
def seed_command(seed_path: str | None) -> None:
    """Load a roster into an empty database."""
    created = seed_database(get_repository(), seed_path or current_app.config.get("SEED_PATH"))
    click.echo(f"Seeded {created} employees.")


@click.command("generate")
@click.argument("year")
@click.argument("month")
@with_appcontext
def generate_command(year: str, month: str) -> None:
    """Regenerate the schedule for YEAR MONTH."""
    try:
        stats = get_generator().generate(SYSTEM_ACTOR, year, month)
    except (DomainError, StorageError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(
        f"Generated {stats.count} assignments for {stats.employees} employees "
        f"over {stats.days} days ({len(stats.overrides)} overrides, {len(stats.shortfalls)} shortfalls)."
    )
    for shortfall in stats.shortfalls:
        click.echo(f"  short on {shortfall.date.isoformat()}: {shortfall.active}/{shortfall.required}")
