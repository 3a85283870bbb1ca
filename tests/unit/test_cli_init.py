"""Unit tests for codecritic.cli.init_cmd."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from codecritic.cli.config import DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE
from codecritic.cli.errors import CLIError
from codecritic.cli.init_cmd import _write_default_config, run_init


# ---------------------------------------------------------------------------
# _write_default_config tests
# ---------------------------------------------------------------------------


class TestWriteDefaultConfig:
    def test_creates_file(self, tmp_path: Path) -> None:
        path = _write_default_config(tmp_path)
        assert path == tmp_path / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
        assert path.is_file()

    def test_content_is_valid_toml(self, tmp_path: Path) -> None:
        path = _write_default_config(tmp_path)
        data = tomllib.loads(path.read_text())
        assert "general" in data

    def test_existing_file_not_overwritten(self, tmp_path: Path) -> None:
        config_dir = tmp_path / DEFAULT_CONFIG_DIR
        config_dir.mkdir()
        existing = config_dir / DEFAULT_CONFIG_FILE
        existing.write_text("# custom\n")

        with pytest.raises(CLIError, match="already exists"):
            _write_default_config(tmp_path)
        assert existing.read_text() == "# custom\n"


# ---------------------------------------------------------------------------
# run_init tests
# ---------------------------------------------------------------------------


class TestRunInit:
    def test_init_explicit_path(self, tmp_path: Path) -> None:
        path = run_init(tmp_path)
        assert path == (tmp_path / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE).resolve()

    def test_init_default_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = run_init()
        assert path.parent.parent == tmp_path.resolve()

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(CLIError, match="does not exist"):
            run_init(tmp_path / "nope")

    def test_not_a_directory(self, tmp_path: Path) -> None:
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        with pytest.raises(CLIError, match="Not a directory"):
            run_init(file_path)
