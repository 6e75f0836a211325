"""Shared pytest fixtures and test helpers for extctl tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def builtin_root(tmp_path: Path) -> Path:
    """Empty directory standing in for the built-in root (index 0)."""
    root = tmp_path / "builtin"
    root.mkdir()
    return root


@pytest.fixture
def extension_root(tmp_path: Path) -> Path:
    """Empty directory registered as a non-builtin extension root."""
    root = tmp_path / "extensions"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings discovery away from any extctl.toml outside the test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EXTCTL_CONFIG", raising=False)


def write_source(root: Path, subdir: str, name: str, body: str = "") -> Path:
    """Create ``<root>/<subdir>/<name>.py`` and return the subdirectory."""
    directory = root / subdir
    directory.mkdir(parents=True, exist_ok=True)
    (directory / f"{name}.py").write_text(body, encoding="utf-8")
    return directory


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ext = logging.getLogger("extctl")
    ext_level = ext.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    ext.setLevel(ext_level)
