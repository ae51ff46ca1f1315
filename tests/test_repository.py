from __future__ import annotations

import threading
from datetime import date

import pytest

from shiftroster.errors import StorageError, ValidationError
from shiftroster.rules.balancer import OverrideOperation


def test_upsert_overwrites_single_row(repository, make_employee):
    employee = make_employee("MON")
    first = repository.upsert_assignment(employee.id, date(2026, 2, 3), "A")
    second = repository.upsert_assignment(employee.id, date(2026, 2, 3), "L")

    rows = repository.list_assignments(2026, 2)
    assert len(rows) == 1
    assert rows[0].shift == "L"
    assert second.id == first.id
    assert second.shift == "L"


def test_list_assignments_filters_by_month_prefix(repository, make_employee):
    employee = make_employee("MON")
    for day in (date(2026, 1, 31), date(2026, 10, 1), date(2026, 1, 5)):
        repository.upsert_assignment(employee.id, day, "B")

    january = repository.list_assignments(2026, 1)
    assert [row.date for row in january] == [date(2026, 1, 5), date(2026, 1, 31)]
    assert len(repository.list_assignments()) == 3
    assert repository.list_assignments(2026, 2) == []


def test_clear_assignments_only_touches_the_month(repository, make_employee):
    employee = make_employee("MON")
    repository.upsert_assignment(employee.id, date(2026, 2, 1), "A")
    repository.upsert_assignment(employee.id, date(2026, 2, 2), "L")
    repository.upsert_assignment(employee.id, date(2026, 3, 1), "C")

    assert repository.clear_assignments(2026, 2) == 2
    assert [row.date for row in repository.list_assignments()] == [date(2026, 3, 1)]


def test_employee_lookups(repository, make_employee):
    employee = make_employee("WED", emp_no="EMP 01")
    assert repository.get_employee_by_number("EMP 01") == employee
    assert repository.get_employee(employee.id) == employee
    assert repository.get_employee(999) is None
    assert repository.get_employee_by_number("missing") is None
    assert repository.list_employees() == [employee]


def test_create_employee_rejects_duplicates_and_bad_weekdays(repository, make_employee):
    make_employee("MON", emp_no="2000987")
    with pytest.raises(ValidationError) as excinfo:
        make_employee("TUE", emp_no="2000987")
    assert excinfo.value.field == "emp_no"

    with pytest.raises(ValidationError) as excinfo:
        make_employee("Sunday")
    assert excinfo.value.field == "weekly_off"
    assert repository.count_employees() == 1


def test_upsert_for_unknown_employee_is_a_storage_error(repository):
    with pytest.raises(StorageError):
        repository.upsert_assignment(42, date(2026, 2, 1), "A")


def test_concurrent_upserts_leave_one_row(repository, make_employee):
    employee = make_employee("MON")
    day = date(2026, 2, 10)
    shifts = ["A", "B", "C", "L"] * 3
    errors = []

    def worker(shift):
        try:
            repository.upsert_assignment(employee.id, day, shift)
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(shift,)) for shift in shifts]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    rows = repository.list_assignments(2026, 2)
    assert len(rows) == 1
    assert rows[0].shift in {"A", "B", "C", "L"}


def test_upsert_waits_for_month_lock(repository, make_employee):
    employee = make_employee("MON")
    writer = threading.Thread(
        target=repository.upsert_assignment, args=(employee.id, date(2026, 2, 10), "L")
    )
    with repository.month_lock(2026, 2):
        writer.start()
        writer.join(timeout=0.2)
        assert writer.is_alive()
        assert repository.list_assignments(2026, 2) == []
    writer.join(timeout=5)
    assert not writer.is_alive()
    assert [row.shift for row in repository.list_assignments(2026, 2)] == ["L"]


def test_other_months_are_not_blocked(repository, make_employee):
    employee = make_employee("MON")
    writer = threading.Thread(
        target=repository.upsert_assignment, args=(employee.id, date(2026, 3, 10), "L")
    )
    with repository.month_lock(2026, 2):
        writer.start()
        writer.join(timeout=5)
        assert not writer.is_alive()


def test_replace_overrides(repository, make_employee):
    employee = make_employee("SUN")
    repository.replace_overrides(2026, 2, [OverrideOperation(employee.id, date(2026, 2, 1), "A", active_before=6)])
    repository.replace_overrides(2026, 2, [OverrideOperation(employee.id, date(2026, 2, 8), "B", active_before=6)])

    overrides = repository.list_overrides(2026, 2)
    assert [(item["date"], item["shift"], item["reason"]) for item in overrides] == [
        ("2026-02-08", "B", "manpower_floor")
    ]


def test_schema_scripts_run_once(repository, make_employee):
    make_employee("MON")
    repository.initialize_schema()

    assert repository.applied_migrations() == ["0001_init"]
    assert repository.count_employees() == 1
