from datetime import date

from shiftroster.domain.schedule import Schedule
from shiftroster.rules.balancer import enforce_manpower_floor

DAY1 = date(2026, 2, 1)
DAY2 = date(2026, 2, 2)


def _schedule(cells):
    schedule = Schedule()
    for employee_id, day, code in cells:
        schedule.set_code(employee_id, day, code)
    return schedule


def test_overrides_fill_the_thinnest_shift_first():
    schedule = _schedule(
        [(1, DAY1, "A"), (2, DAY1, "A"), (3, DAY1, "B"), (4, DAY1, "C")]
        + [(emp, DAY1, "OFF") for emp in (5, 6, 7)]
    )
    result = enforce_manpower_floor(schedule, [1, 2, 3, 4, 5, 6, 7], minimum=6)

    assert [(op.employee_id, op.shift) for op in result.operations] == [(5, "B"), (6, "C")]
    assert result.operations[0].active_before == 4
    assert result.shortfalls == []
    assert schedule.get_code(7, DAY1) == "OFF"
    assert schedule.active_count(DAY1) == 6


def test_leave_and_general_staff_are_never_overridden():
    schedule = _schedule([(1, DAY1, "A"), (2, DAY1, "L"), (3, DAY1, "G"), (4, DAY1, "OFF")])
    result = enforce_manpower_floor(schedule, [1, 2, 3], minimum=3)

    assert result.operations == []
    assert schedule.get_code(4, DAY1) == "OFF"
    assert [(item.date, item.active, item.required) for item in result.shortfalls] == [(DAY1, 1, 3)]


def test_overrides_rotate_between_candidates():
    schedule = _schedule(
        [(3, day, "A") for day in (DAY1, DAY2)]
        + [(emp, day, "OFF") for emp in (1, 2) for day in (DAY1, DAY2)]
    )
    result = enforce_manpower_floor(schedule, [1, 2, 3], minimum=2)

    assert [(op.employee_id, op.date) for op in result.operations] == [(1, DAY1), (2, DAY2)]


def test_override_prefers_shift_worked_least_recently():
    schedule = _schedule([(1, DAY1, "A"), (1, DAY2, "OFF")])
    result = enforce_manpower_floor(schedule, [1], minimum=1)

    assert [(op.employee_id, op.date, op.shift) for op in result.operations] == [(1, DAY2, "B")]


def test_days_already_at_floor_are_untouched():
    schedule = _schedule([(1, DAY1, "A"), (2, DAY1, "OFF")])
    result = enforce_manpower_floor(schedule, [1, 2], minimum=1)

    assert result.operations == [] and result.shortfalls == []
    assert schedule.get_code(2, DAY1) == "OFF"
