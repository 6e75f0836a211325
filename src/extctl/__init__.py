"""extctl — extension discovery and lifecycle orchestration."""

__version__ = "0.1.0"
