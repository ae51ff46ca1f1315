"""Shift roster: rotating monthly shift schedules with leave tracking."""

from .app import create_app

__all__ = ["create_app"]
