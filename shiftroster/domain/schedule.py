"""Month schedule aggregate used across rules and services."""
from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from typing import Collection, Dict, Iterable, Iterator, List, MutableMapping, Optional

from .models import Assignment
from . import shift_codes


class Schedule(MutableMapping[date, List[Assignment]]):
    """A thin mapping-like wrapper over assignments grouped by day.

    Each day holds at most one assignment per employee; assigning again for
    the same employee replaces the previous record.
    """

    def __init__(
        self,
        assignments: Iterable[Assignment] | None = None,
        *,
        days: Iterable[date] | None = None,
    ) -> None:
        self._data: Dict[date, List[Assignment]] = defaultdict(list)
        for day in days or ():
            self._data[day] = []
        if assignments:
            for a in assignments:
                self.assign(a)

    # -- MutableMapping protocol -------------------------------------------------
    def __getitem__(self, key: date) -> List[Assignment]:
        return self._data.setdefault(key, [])

    def __setitem__(self, key: date, value: List[Assignment]) -> None:
        self._data[key] = value

    def __delitem__(self, key: date) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._data.keys()))

    def __len__(self) -> int:
        return len(self._data)

    # -- Core helpers -------------------------------------------------------------
    def assign(self, assignment: Assignment) -> None:
        rows = self._data.setdefault(assignment.date, [])
        for idx, row in enumerate(rows):
            if row.employee_id == assignment.employee_id:
                rows[idx] = assignment
                break
        else:
            rows.append(assignment)

    def set_code(self, employee_id: int, day: date, code: str) -> None:
        self.assign(Assignment(employee_id=employee_id, date=day, shift=code))

    def get_assignment(self, employee_id: int, day: date) -> Optional[Assignment]:
        for record in self._data.get(day, ()):  # pragma: no branch - tiny collections
            if record.employee_id == employee_id:
                return record
        return None

    def get_code(self, employee_id: int, day: date) -> Optional[str]:
        record = self.get_assignment(employee_id, day)
        return record.shift if record else None

    def codes_on(self, day: date) -> Counter:
        return Counter(record.shift for record in self._data.get(day, ()))

    def active_count(self, day: date) -> int:
        return sum(1 for record in self._data.get(day, ()) if shift_codes.is_active_code(record.shift))

    def employees_with(self, day: date, code: str) -> List[int]:
        return [record.employee_id for record in self._data.get(day, ()) if record.shift == code]

    def last_date_with(self, employee_id: int, codes: Collection[str], *, before: date) -> Optional[date]:
        """Most recent day strictly before *before* on which the employee held one of *codes*."""
        for day in sorted((d for d in self._data if d < before), reverse=True):
            if self.get_code(employee_id, day) in codes:
                return day
        return None

    def counts_by_employee(self) -> Dict[int, Counter]:
        totals: Dict[int, Counter] = defaultdict(Counter)
        for rows in self._data.values():
            for assignment in rows:
                totals[assignment.employee_id][assignment.shift] += 1
        return dict(totals)

    def iter_assignments(self) -> Iterator[Assignment]:
        """Yield every assignment ordered by date, then employee id."""
        for day in self:
            yield from sorted(self._data[day], key=lambda a: a.employee_id)
