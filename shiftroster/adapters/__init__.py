"""Storage, configuration and report adapters."""
