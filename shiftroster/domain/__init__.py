"""Domain objects for the shift roster."""

from .models import SYSTEM_ACTOR, Actor, Assignment, Employee
from .schedule import Schedule

__all__ = ["Actor", "Assignment", "Employee", "Schedule", "SYSTEM_ACTOR"]
