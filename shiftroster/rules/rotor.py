"""Rotation utilities for the recurring shift handover pattern."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Iterable, Iterator, Sequence, Tuple

from ..domain import shift_codes
from ..domain.shift_codes import ACTIVE_CODES, LEAVE_CODE, OFF_CODE

DEFAULT_PATTERN: Tuple[str, ...] = ("A", "OFF", "C", "OFF", "B")


def working_cycle(pattern: Sequence[str]) -> Tuple[str, ...]:
    """Strip rest markers from *pattern*, leaving the order of working shifts.

    ``A OFF C OFF B`` becomes ``(A, C, B)``: an employee keeps one shift
    between weekly offs and moves to the next one after each rest day.
    """

    unknown = [code for code in pattern if code not in ACTIVE_CODES and code != OFF_CODE]
    if unknown:
        raise ValueError(f"rotation pattern contains unsupported codes: {unknown}")
    cycle = tuple(code for code in pattern if code != OFF_CODE)
    if not cycle:
        raise ValueError("rotation pattern needs at least one working shift")
    return cycle


def start_position(cycle: Sequence[str], index: int) -> int:
    """Stagger fresh cursors across the roster, filling A, then B, then C."""
    starts = [cycle.index(code) for code in ACTIVE_CODES if code in cycle]
    return starts[index % len(starts)]


@dataclass
class RotationCursor:
    cycle: Tuple[str, ...]
    position: int = 0
    worked: bool = False
    pending_advance: bool = False

    @property
    def current(self) -> str:
        return self.cycle[self.position]

    def rest(self) -> str:
        # A rest day before any work does not consume the starting shift.
        if self.worked:
            self.pending_advance = True
        return OFF_CODE

    def work(self) -> str:
        if self.pending_advance:
            self.position = (self.position + 1) % len(self.cycle)
            self.pending_advance = False
        self.worked = True
        return self.current


def seed_cursor(cycle: Tuple[str, ...], history: Iterable[str], *, fallback_position: int = 0) -> RotationCursor:
    """Build a cursor that continues from *history* (codes in date order).

    The last working shift fixes the position; a rest day after it means the
    next working day moves on. Leave and general days carry no rotation state.
    """

    cursor = RotationCursor(cycle=cycle, position=fallback_position)
    for code in history:
        if code in cycle:
            cursor.position = cycle.index(code)
            cursor.worked = True
            cursor.pending_advance = False
        elif code == OFF_CODE:
            cursor.rest()
    return cursor


def sequence_for_month(
    days: Iterable[date],
    weekly_off: str,
    cursor: RotationCursor,
    *,
    leave_days: AbstractSet[date] = frozenset(),
) -> Iterator[tuple[date, str]]:
    for day in days:
        if day in leave_days:
            yield day, LEAVE_CODE
        elif shift_codes.weekday_code(day) == weekly_off:
            yield day, cursor.rest()
        else:
            yield day, cursor.work()
