"""Tests for EnvReader class."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mto.config.env import EnvReader


class TestEnvReaderGetStr:
    """Tests for EnvReader.get_str method."""

    def test_returns_value_when_set(self) -> None:
        reader = EnvReader(env={"MY_VAR": "hello"})
        assert reader.get_str("MY_VAR") == "hello"

    def test_returns_default_when_not_set(self) -> None:
        reader = EnvReader(env={})
        assert reader.get_str("MY_VAR", "default") == "default"

    def test_returns_empty_string_when_set_to_empty(self) -> None:
        reader = EnvReader(env={"MY_VAR": ""})
        assert reader.get_str("MY_VAR", "default") == ""


class TestEnvReaderGetInt:
    """Tests for EnvReader.get_int method."""

    def test_parses_integer(self) -> None:
        assert EnvReader(env={"MY_VAR": "42"}).get_int("MY_VAR") == 42

    def test_returns_default_when_not_set(self) -> None:
        assert EnvReader(env={}).get_int("MY_VAR", 100) == 100

    def test_invalid_value_logs_and_returns_default(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Should warn and fall back on non-integer values."""
        reader = EnvReader(env={"MY_VAR": "ten"})
        with caplog.at_level(logging.WARNING):
            assert reader.get_int("MY_VAR", 5) == 5
        assert "Invalid integer value for MY_VAR" in caplog.text


class TestEnvReaderGetBool:
    """Tests for EnvReader.get_bool method."""

    @pytest.mark.parametrize("value", ["true", "1", "yes", "on", "TRUE", "Yes"])
    def test_truthy_values(self, value: str) -> None:
        assert EnvReader(env={"MY_VAR": value}).get_bool("MY_VAR") is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "off", ""])
    def test_falsy_values(self, value: str) -> None:
        assert EnvReader(env={"MY_VAR": value}).get_bool("MY_VAR") is False

    def test_returns_default_when_not_set(self) -> None:
        assert EnvReader(env={}).get_bool("MY_VAR") is None


class TestEnvReaderGetPath:
    """Tests for EnvReader.get_path method."""

    def test_existing_path(self, tmp_path: Path) -> None:
        reader = EnvReader(env={"MY_VAR": str(tmp_path)})
        assert reader.get_path("MY_VAR") == tmp_path

    def test_missing_path_returns_default(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        reader = EnvReader(env={"MY_VAR": str(tmp_path / "missing")})
        with caplog.at_level(logging.WARNING):
            assert reader.get_path("MY_VAR") is None
        assert "non-existent path" in caplog.text

    def test_missing_path_allowed(self, tmp_path: Path) -> None:
        target = tmp_path / "new.db"
        reader = EnvReader(env={"MY_VAR": str(target)})
        assert reader.get_path("MY_VAR", must_exist=False) == target

    def test_expands_tilde(self) -> None:
        reader = EnvReader(env={"MY_VAR": "~/media.db"})
        result = reader.get_path("MY_VAR", must_exist=False)
        assert result == Path.home() / "media.db"
