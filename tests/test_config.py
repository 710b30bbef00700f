"""Tests for configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError
from shakegate.config import LockoutConfig, LoginConfig, ShakegateSettings, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("SHAKEGATE_"):
            monkeypatch.delenv(key)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "shakegate.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_policy_defaults(self) -> None:
        settings = ShakegateSettings()
        assert settings.lockout.max_failed_attempts == 3
        assert settings.lockout.lockout_duration_s == 60
        assert settings.verification.time_limit_s == 20
        assert settings.verification.tick_interval_s == 1.0
        assert settings.login.pin == "711520"
        assert settings.account.initial_balance == 1_000_000
        assert settings.db_path == Path("./data") / "shakegate.db"

    def test_lockout_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            LockoutConfig(max_failed_attempts=0)

    @pytest.mark.parametrize("pin", ["", "12a4", "-1234", True])
    def test_pin_must_be_digits(self, pin: object) -> None:
        with pytest.raises(ValidationError, match="login.pin"):
            LoginConfig(pin=pin)  # type: ignore[arg-type]

    def test_unquoted_yaml_pin_accepted(self) -> None:
        assert LoginConfig(pin=711520).pin == "711520"  # type: ignore[arg-type]


class TestLoadConfig:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_nested_section(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "shakegate:\n"
            f"  data_dir: {tmp_path / 'data'}\n"
            "  verification:\n"
            "    time_limit_s: 10\n"
            "  login:\n"
            "    pin: '000123'\n",
        )
        settings = load_config(path)
        assert settings.verification.time_limit_s == 10
        assert settings.login.pin == "000123"
        assert settings.db_path == tmp_path / "data" / "shakegate.db"

    def test_bare_mapping(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "account:\n  initial_balance: 42\n")
        assert load_config(path).account.initial_balance == 42

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_config(_write(tmp_path, "")).lockout.max_failed_attempts == 3

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="top-level mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_invalid_values_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            load_config(_write(tmp_path, "verification:\n  time_limit_s: 0\n"))


class TestEnvOverrides:
    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write(tmp_path, "lockout:\n  max_failed_attempts: 5\n")
        monkeypatch.setenv("SHAKEGATE_LOCKOUT__MAX_FAILED_ATTEMPTS", "2")
        monkeypatch.setenv("SHAKEGATE_LOGGING__JSON_OUTPUT", "true")
        settings = load_config(path)
        assert settings.lockout.max_failed_attempts == 2
        assert settings.logging.json_output is True

    def test_env_pin_keeps_leading_zeros(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SHAKEGATE_LOGIN__PIN", "007007")
        assert load_config(_write(tmp_path, "{}\n")).login.pin == "007007"
