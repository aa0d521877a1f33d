"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``REMEMBERME_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``rememberme.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rememberme.config.discovery import find_config
from rememberme.config.models import (
    ContactsConfig,
    DedupeConfig,
    HealthConfig,
    LayoutSectionConfig,
    RingsConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``rememberme.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class RememberSettings(BaseSettings):
    """Settings for one CLI invocation, frozen after construction.

    Attributes:
        root: Directory relative paths resolve against (parent of
            ``rememberme.toml``, or CWD if no config was found).
        config_path: The config file in effect, if any.
        contacts_override: ``--contacts`` flag; wins over ``[contacts] path``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "REMEMBERME_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    contacts_override: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    contacts: ContactsConfig = Field(default_factory=ContactsConfig)
    health: HealthConfig = Field(default_factory=HealthConfig)
    rings: RingsConfig = Field(default_factory=RingsConfig)
    layout: LayoutSectionConfig = Field(default_factory=LayoutSectionConfig)
    dedupe: DedupeConfig = Field(default_factory=DedupeConfig)

    @property
    def contacts_path(self) -> Path:
        """Snapshot location, resolved against :attr:`root`."""
        path = self.contacts_override or self.contacts.path
        return path if path.is_absolute() else self.root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        contacts: str | None = None,
        **cli_flags: Any,
    ) -> RememberSettings:
        """Construct settings from a CLI invocation.

        Discovers ``rememberme.toml`` via walk-up (or explicit
        *config_path*) and resolves *root* from the config file's directory.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        if contacts:
            cli_flags["contacts_override"] = Path(contacts)

        _tls.toml_path = toml_path
        try:
            return cls(root=resolved_root, config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            source = toml_path or "environment"
            msg = f"Invalid configuration in {source}: {_describe(exc)}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_path = None


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "settings"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
