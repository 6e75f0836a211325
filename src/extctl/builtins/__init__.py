"""Built-in extensions shipped with extctl.

This directory is the default built-in root (index 0). Each extension
lives in its own subdirectory, in a module named after its class.
"""

from pathlib import Path

BUILTIN_PATH = Path(__file__).resolve().parent
