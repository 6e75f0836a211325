"""Heartbeat built-in extension."""
