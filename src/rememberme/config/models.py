"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here (and in the domain threshold
models), ``rememberme.toml`` only contains overrides. A fresh setup needs
no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from rememberme.domain.duplicates import DuplicateRules
from rememberme.domain.health import HealthThresholds, RingThresholds
from rememberme.domain.layout import LayoutConfig


class ContactsConfig(BaseModel):
    """[contacts] section."""

    model_config = {"frozen": True}

    path: Path = Path("contacts.json")


class HealthConfig(HealthThresholds):
    """[health] section."""


class RingsConfig(RingThresholds):
    """[rings] section."""


class LayoutSectionConfig(LayoutConfig):
    """[layout] section."""


class DedupeConfig(DuplicateRules):
    """[dedupe] section."""
