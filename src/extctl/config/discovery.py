"""Locate ``extctl.toml``.

Lookup order: explicit ``--config`` path, the ``EXTCTL_CONFIG`` env var,
then a walk up from the working directory (the way git finds ``.git/``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "extctl.toml"
CONFIG_ENV_VAR = "EXTCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``extctl.toml`` at or above *start* (default: cwd).

    A set ``EXTCTL_CONFIG`` wins over the walk; if it names no file, no
    config is used at all.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        if path.is_file():
            return path
        logger.warning("%s points at %s, which is not a file; using defaults", CONFIG_ENV_VAR, path)
        return None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            logger.debug("Using config %s", candidate)
            return candidate
    return None


def resolve_config(explicit: str | os.PathLike[str] | None, start: Path | None = None) -> Path | None:
    """Resolve the config file for a CLI run.

    Raises:
        click.ClickException: *explicit* was given but is not a file.
    """
    if explicit is None or str(explicit) == "":
        return find_config(start)
    path = Path(explicit)
    if not path.is_file():
        raise click.ClickException(f"Config file not found: {path}")
    return path
