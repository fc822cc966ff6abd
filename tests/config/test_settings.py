"""Tests for BoardctlSettings: unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from boardctl.config.settings import BoardctlSettings


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = BoardctlSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.async_events is False
        assert settings.store.path == "boardctl.json"
        assert settings.store.lock_timeout == 10.0
        assert settings.store.recover_corrupt is False
        assert settings.validation.card_content_min == 3
        assert settings.plugins.cache is True
        assert settings.store_path == tmp_path / "boardctl.json"
        assert settings.local_plugin_dir is None

    def test_frozen(self, tmp_path: Path) -> None:
        settings = BoardctlSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_sparse_override(self, tmp_path: Path) -> None:
        (tmp_path / "boardctl.toml").write_text(
            '[store]\npath = "data/boards.json"\nrecover_corrupt = true\n'
            '[plugins]\nlocal_dir = "plugins"\n'
        )
        settings = BoardctlSettings.from_cli(root=tmp_path)
        assert settings.store.recover_corrupt is True
        assert settings.store.indent == 2
        assert settings.store_path == tmp_path / "data" / "boards.json"
        assert settings.local_plugin_dir == tmp_path / "plugins"

    def test_root_from_config_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "boardctl.toml").write_text("")
        subdir = tmp_path / "sub" / "deep"
        subdir.mkdir(parents=True)
        monkeypatch.chdir(subdir)
        settings = BoardctlSettings.from_cli()
        assert settings.root == tmp_path.resolve()
        assert settings.store_path == tmp_path.resolve() / "boardctl.json"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[validation]\nboard_title_min = 5\n")
        settings = BoardctlSettings.from_cli(config_path=str(custom), root=tmp_path)
        assert settings.validation.board_title_min == 5
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "boardctl.toml").write_text("[store\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            BoardctlSettings.from_cli(root=tmp_path)


class TestPriority:
    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = BoardctlSettings.from_cli(root=tmp_path, json_output=True, quiet=True, async_events=True)
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.async_events is True

    def test_store_override_wins(self, tmp_path: Path) -> None:
        (tmp_path / "boardctl.toml").write_text('[store]\npath = "from-toml.json"\n')
        override = tmp_path / "cli.json"
        settings = BoardctlSettings.from_cli(root=tmp_path, store_override=override)
        assert settings.store_path == override

    def test_env_over_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "boardctl.toml").write_text("[store]\nlock_timeout = 3.0\n")
        monkeypatch.setenv("BOARDCTL_STORE__LOCK_TIMEOUT", "1.5")
        settings = BoardctlSettings.from_cli(root=tmp_path)
        assert settings.store.lock_timeout == 1.5

    def test_env_flag(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOARDCTL_QUIET", "true")
        assert BoardctlSettings.from_cli(root=tmp_path).quiet is True
