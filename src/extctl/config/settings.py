"""ExtSettings: CLI flags, env vars and ``extctl.toml`` merged into one object.

Priority, highest first:
  1. Init kwargs (CLI flags passed by Click)
  2. Env vars, ``EXTCTL_`` prefix and ``__`` for nested fields
     (``EXTCTL_EXTENSIONS__AUTOLOAD=false``)
  3. The TOML file
  4. Defaults on the section models

Relative paths in ``[extensions]`` are anchored to the TOML file's
directory, so a checked-in config works from any working directory.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from extctl.config.discovery import resolve_config
from extctl.config.models import ExtensionsConfig

# TOML file chosen by from_cli(), read by settings_customise_sources().
_toml_path: ContextVar[Path | None] = ContextVar("extctl_toml_path", default=None)

_PATH_KEYS = ("builtin_path",)
_PATH_LIST_KEYS = ("paths",)


def _anchor(base: Path, value: Any) -> Any:
    if not isinstance(value, str) or not value:
        return value
    path = Path(value).expanduser()
    return str(path if path.is_absolute() else base / path)


def _anchor_section(section: dict[str, Any], base: Path) -> None:
    for key in _PATH_KEYS:
        if key in section:
            section[key] = _anchor(base, section[key])
    for key in _PATH_LIST_KEYS:
        if isinstance(section.get(key), list):
            section[key] = [_anchor(base, item) for item in section[key]]


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one ``extctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = self._read(toml_path) if toml_path else {}

    @staticmethod
    def _read(toml_path: Path) -> dict[str, Any]:
        try:
            with toml_path.open("rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        section = data.get("extensions")
        if isinstance(section, dict):
            _anchor_section(section, toml_path.parent)
        return data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class ExtSettings(BaseSettings):
    """Settings for one extctl run.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        json_output: Print results as JSON.
        verbose: Verbose output and DEBUG logging.
        log_json: JSON log lines on stderr.
        extensions: The ``[extensions]`` section.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "EXTCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False
    extensions: ExtensionsConfig = Field(default_factory=ExtensionsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _toml_path.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> ExtSettings:
        """Build settings for a CLI invocation.

        Uses *config_path* when given, otherwise discovers ``extctl.toml``
        from *start*. *cli_flags* override everything else.

        Raises:
            click.ClickException: *config_path* is missing or the TOML is invalid.
        """
        toml_path = resolve_config(config_path, start)
        token = _toml_path.set(toml_path)
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _toml_path.reset(token)
