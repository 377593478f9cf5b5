"""Bundled JSON-schema contracts for machine-readable output."""
