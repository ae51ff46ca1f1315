from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from shiftroster import create_app
from shiftroster.adapters.repository import RosterRepository

# Weekly offs of the reference roster: two Sunday-off employees, one per other day.
SCENARIO_OFFS = ("SUN", "SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")


@pytest.fixture()
def repository(tmp_path: Path) -> RosterRepository:
    repo = RosterRepository(tmp_path / "roster.sqlite")
    repo.initialize_schema()
    return repo


@pytest.fixture()
def make_employee(repository):
    counter = itertools.count(1)

    def factory(weekly_off="SUN", *, section="DISPATCH", is_admin=False, emp_no=None):
        number = emp_no or f"E{next(counter):03d}"
        return repository.create_employee(
            emp_no=number,
            name=f"Employee {number}",
            section=section,
            weekly_off=weekly_off,
            password_hash="not-a-real-hash",
            is_admin=is_admin,
        )

    return factory


@pytest.fixture()
def scenario_roster(make_employee):
    """Admin (id 1) plus eight rotating employees (ids 2-9)."""
    admin = make_employee("SUN", section="MANAGEMENT", is_admin=True, emp_no="admin")
    staff = [make_employee(off) for off in SCENARIO_OFFS]
    return admin, staff


@pytest.fixture()
def app(tmp_path: Path):
    return create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "DATABASE": str(tmp_path / "test.sqlite"),
        "AUTO_INIT_DB": True,
        "LOG_LEVEL": "WARNING",
    })


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client
