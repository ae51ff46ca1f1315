"""Database wiring for the web application."""
