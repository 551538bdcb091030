"""Process-level services (logging setup)."""
