"""Scheduling rules: rotation and manpower balancing."""
