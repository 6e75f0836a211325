"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, extctl.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from extctl.extensions.origin import OriginPolicy


class ExtensionsConfig(BaseModel):
    """[extensions] section."""

    model_config = {"frozen": True}

    paths: list[Path] = Field(default_factory=list)
    builtin_path: Path | None = None
    builtin_namespace: str = "extctl"
    builtin_package: str | None = "extctl.builtins"
    source_suffix: str = ".py"
    entry_point_group: str | None = "extctl.extensions"
    origin_policy: OriginPolicy = OriginPolicy.FIRST
    autoload: bool = True

    @field_validator("source_suffix")
    @classmethod
    def _suffix_has_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            msg = f"source_suffix must look like '.py', got {value!r}"
            raise ValueError(msg)
        return value
