"""Application services built on the roster repository."""
