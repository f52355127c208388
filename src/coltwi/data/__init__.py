"""Data access layer for static game definitions."""
