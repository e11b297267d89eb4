"""Logging and WireGuard CLI helpers."""
