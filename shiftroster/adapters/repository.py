"""SQLite repository for the roster and its shift assignments."""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from ..domain import shift_codes
from ..domain.models import Assignment, Employee
from ..errors import StorageError, ValidationError
from ..rules.balancer import OverrideOperation

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
SCHEMA_SCRIPTS = ("0001_init.sql",)

_EMPLOYEE_COLUMNS = "id, emp_no, name, section, weekly_off, is_admin, password_hash, email, phone"
_ASSIGNMENT_COLUMNS = "id, employee_id, date, shift"


def _employee_from_row(row: sqlite3.Row) -> Employee:
    return Employee(
        id=int(row["id"]),
        emp_no=row["emp_no"],
        name=row["name"],
        section=row["section"],
        weekly_off=row["weekly_off"],
        is_admin=bool(row["is_admin"]),
        password_hash=row["password_hash"],
        email=row["email"],
        phone=row["phone"],
    )


def _has_version(conn: sqlite3.Connection, version: str) -> bool:
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_migrations'"
    )
    if cursor.fetchone() is None:
        return False
    version_cursor = conn.execute("SELECT 1 FROM schema_migrations WHERE version = ?", (version,))
    return version_cursor.fetchone() is not None


def _assignment_from_row(row: sqlite3.Row) -> Assignment:
    return Assignment(
        id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        date=date.fromisoformat(row["date"]),
        shift=row["shift"],
    )


class RosterRepository:
    """Roster and assignment store.

    Every write to a month goes through that month's re-entrant lock, so a
    regeneration holding the lock cannot interleave with a single-day update.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._locks: Dict[Tuple[int, int], threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # -- connections ----------------------------------------------------------------
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, timeout=30)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            logger.error(f"Cannot open roster database {self.path}: {exc}")
            raise StorageError(str(exc)) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error(f"Roster database error: {exc}")
            raise StorageError(str(exc)) from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize_schema(self, *, drop_existing: bool = False) -> None:
        if drop_existing and self.path.exists():
            self.path.unlink()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._session() as conn:
            for name in SCHEMA_SCRIPTS:
                version = Path(name).stem
                if _has_version(conn, version):
                    continue
                conn.executescript((MIGRATIONS_DIR / name).read_text(encoding="utf-8"))
                logger.info(f"Applied migration {version}")

    def applied_migrations(self) -> List[str]:
        with self._session() as conn:
            rows = conn.execute("SELECT version FROM schema_migrations ORDER BY version").fetchall()
        return [row["version"] for row in rows]

    # -- locking --------------------------------------------------------------------
    def _lock_for(self, year: int, month: int) -> threading.RLock:
        with self._locks_guard:
            return self._locks.setdefault((year, month), threading.RLock())

    @contextmanager
    def month_lock(self, year: int, month: int) -> Iterator[None]:
        with self._lock_for(year, month):
            yield

    # -- employees ------------------------------------------------------------------
    def list_employees(self) -> List[Employee]:
        with self._session() as conn:
            rows = conn.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees ORDER BY id").fetchall()
        return [_employee_from_row(row) for row in rows]

    def count_employees(self) -> int:
        with self._session() as conn:
            row = conn.execute("SELECT COUNT(1) FROM employees").fetchone()
        return int(row[0])

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE id = ?", (employee_id,)
            ).fetchone()
        return _employee_from_row(row) if row else None

    def get_employee_by_number(self, emp_no: str) -> Optional[Employee]:
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE emp_no = ?", (emp_no,)
            ).fetchone()
        return _employee_from_row(row) if row else None

    def create_employee(
        self,
        *,
        emp_no: str,
        name: str,
        section: str,
        weekly_off: str,
        password_hash: str,
        is_admin: bool = False,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        if not emp_no or not str(emp_no).strip():
            raise ValidationError("Employee number is required", field="emp_no")
        if weekly_off not in shift_codes.WEEKDAY_CODES:
            raise ValidationError(f"Unknown weekly off day: {weekly_off}", field="weekly_off")
        with self._session() as conn:
            try:
                cursor = conn.execute(
                    "INSERT INTO employees(emp_no, name, section, weekly_off, password_hash, email, phone, is_admin) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (emp_no, name, section, weekly_off, password_hash, email, phone, 1 if is_admin else 0),
                )
            except sqlite3.IntegrityError as exc:
                raise ValidationError(f"Employee number {emp_no} already exists", field="emp_no") from exc
            row = conn.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
        return _employee_from_row(row)

    # -- assignments ----------------------------------------------------------------
    def list_assignments(self, year: Optional[int] = None, month: Optional[int] = None) -> List[Assignment]:
        sql = f"SELECT {_ASSIGNMENT_COLUMNS} FROM assignments"
        params: Tuple[Any, ...] = ()
        if year is not None and month is not None:
            sql += " WHERE date LIKE ?"
            params = (shift_codes.month_prefix(year, month) + "-%",)
        sql += " ORDER BY date, employee_id"
        with self._session() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_assignment_from_row(row) for row in rows]

    def upsert_assignment(self, employee_id: int, day: date, shift: str) -> Assignment:
        """Insert or overwrite the single row for ``(employee_id, day)``."""
        with self.month_lock(day.year, day.month), self._session() as conn:
            conn.execute(
                "INSERT INTO assignments(employee_id, date, shift) VALUES (?, ?, ?) "
                "ON CONFLICT(employee_id, date) DO UPDATE SET shift = excluded.shift",
                (employee_id, day.isoformat(), shift),
            )
            row = conn.execute(
                f"SELECT {_ASSIGNMENT_COLUMNS} FROM assignments WHERE employee_id = ? AND date = ?",
                (employee_id, day.isoformat()),
            ).fetchone()
        return _assignment_from_row(row)

    def clear_assignments(self, year: int, month: int) -> int:
        with self.month_lock(year, month), self._session() as conn:
            cursor = conn.execute(
                "DELETE FROM assignments WHERE date LIKE ?",
                (shift_codes.month_prefix(year, month) + "-%",),
            )
        return cursor.rowcount

    # -- override audit -------------------------------------------------------------
    def replace_overrides(self, year: int, month: int, operations: Iterable[OverrideOperation]) -> None:
        prefix = shift_codes.month_prefix(year, month) + "-%"
        payload = [
            (op.employee_id, op.date.isoformat(), op.shift, op.reason)
            for op in operations
        ]
        with self.month_lock(year, month), self._session() as conn:
            conn.execute("DELETE FROM schedule_overrides WHERE date LIKE ?", (prefix,))
            if payload:
                conn.executemany(
                    "INSERT INTO schedule_overrides(employee_id, date, shift, reason) VALUES (?, ?, ?, ?)",
                    payload,
                )

    def list_overrides(self, year: int, month: int) -> List[Dict[str, Any]]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT employee_id, date, shift, reason, created_at FROM schedule_overrides "
                "WHERE date LIKE ? ORDER BY date, employee_id",
                (shift_codes.month_prefix(year, month) + "-%",),
            ).fetchall()
        return [
            {
                "employee_id": int(row["employee_id"]),
                "date": row["date"],
                "shift": row["shift"],
                "reason": row["reason"],
                "created_at": row["created_at"],
            }
            for row in rows
        ]
