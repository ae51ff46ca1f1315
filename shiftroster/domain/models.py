"""Domain dataclasses for roster scheduling."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Employee:
    id: int
    emp_no: str
    name: str
    section: str
    weekly_off: str
    is_admin: bool = False
    password_hash: str = field(default="", repr=False)
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialise for clients; the credential is never included."""
        return {
            "id": self.id,
            "emp_no": self.emp_no,
            "name": self.name,
            "section": self.section,
            "weekly_off": self.weekly_off,
            "is_admin": self.is_admin,
            "email": self.email,
            "phone": self.phone,
        }


@dataclass(frozen=True)
class Assignment:
    employee_id: int
    date: date
    shift: str
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "shift": self.shift,
        }


@dataclass(frozen=True)
class Actor:
    """Capability of the caller, passed explicitly into services."""

    employee_id: int
    is_admin: bool = False

    @classmethod
    def for_employee(cls, employee: Employee) -> "Actor":
        return cls(employee_id=employee.id, is_admin=employee.is_admin)


# Used by CLI commands that run outside of any login session.
SYSTEM_ACTOR = Actor(employee_id=0, is_admin=True)
