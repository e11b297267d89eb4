"""Shared enums and API data transfer objects."""
