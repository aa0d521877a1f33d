"""Tests for RememberSettings — CLI flags, env vars and TOML in one object."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from rememberme.config.settings import RememberSettings


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = RememberSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.health.dying_max_days == 90
        assert settings.rings.high_max_days == 14
        assert settings.layout.canvas_radius == 400.0
        assert settings.dedupe.name_threshold == 0.85
        assert settings.contacts_path == tmp_path / "contacts.json"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = RememberSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = RememberSettings.from_cli(root=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestTomlSource:
    def test_sparse_override(self, tmp_path: Path) -> None:
        (tmp_path / "rememberme.toml").write_text("[health]\ndying_max_days = 45\n")
        settings = RememberSettings.from_cli(root=tmp_path)
        assert settings.health.dying_max_days == 45
        assert settings.health.warning_max_days == 21

    def test_nested_layout_band(self, tmp_path: Path) -> None:
        (tmp_path / "rememberme.toml").write_text(
            "[layout]\ncanvas_radius = 250.0\n[layout.low]\ninner = 0.40\nouter = 0.50\n"
        )
        settings = RememberSettings.from_cli(root=tmp_path)
        assert settings.layout.canvas_radius == 250.0
        assert settings.layout.low.outer == 0.50
        assert settings.layout.high.inner == 0.07

    def test_root_follows_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "rememberme.toml").write_text('[contacts]\npath = "data/export.csv"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = RememberSettings.from_cli()
        assert settings.root == tmp_path.resolve()
        assert settings.contacts_path == tmp_path.resolve() / "data" / "export.csv"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "garden.toml"
        custom.parent.mkdir()
        custom.write_text("[dedupe]\nname_threshold = 0.9\n")
        settings = RememberSettings.from_cli(config_path=str(custom), root=tmp_path)
        assert settings.dedupe.name_threshold == 0.9
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "rememberme.toml").write_text("[health\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            RememberSettings.from_cli(root=tmp_path)

    @pytest.mark.parametrize(
        ("toml", "field"),
        [
            ("[health]\nwarning_max_days = 200\n", "health"),
            ("[health]\nhealthy_max_days = 30\nwarning_max_days = 21\n", "health"),
            ("[layout]\nradius_jitter = 0.9\n", "layout.radius_jitter"),
        ],
    )
    def test_invalid_values_rejected(self, tmp_path: Path, toml: str, field: str) -> None:
        path = tmp_path / "rememberme.toml"
        path.write_text(toml)
        with pytest.raises(click.ClickException) as exc_info:
            RememberSettings.from_cli(root=tmp_path)
        message = exc_info.value.message
        assert message.startswith("Invalid configuration in")
        assert path.name in message
        assert field in message


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "rememberme.toml").write_text("[health]\ndying_max_days = 60\n")
        monkeypatch.setenv("REMEMBERME_HEALTH__DYING_MAX_DAYS", "45")
        settings = RememberSettings.from_cli(root=tmp_path)
        assert settings.health.dying_max_days == 45

    def test_cli_contacts_beats_toml(self, tmp_path: Path) -> None:
        (tmp_path / "rememberme.toml").write_text('[contacts]\npath = "from-toml.json"\n')
        settings = RememberSettings.from_cli(root=tmp_path, contacts="cli.csv")
        assert settings.contacts_path == tmp_path / "cli.csv"

    def test_absolute_contacts_path(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "contacts.json"
        settings = RememberSettings.from_cli(root=tmp_path / "root", contacts=str(target))
        assert settings.contacts_path == target
