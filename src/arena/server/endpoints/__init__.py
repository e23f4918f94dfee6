"""REST endpoint modules for the arena API."""
