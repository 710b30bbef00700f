from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LockoutConfig(BaseModel):
    max_failed_attempts: int = Field(default=3, ge=1)
    lockout_duration_s: float = Field(default=60.0, gt=0)
    namespace: str = Field(default="shakegate.security", min_length=1)


class VerificationConfig(BaseModel):
    time_limit_s: int = Field(default=20, ge=1)
    tick_interval_s: float = Field(default=1.0, gt=0)
    """Wall duration of one countdown second. Only demos and tests shorten it."""


class LoginConfig(BaseModel):
    pin: str = "711520"

    @field_validator("pin", mode="before")
    @classmethod
    def _digits_only(cls, value: object) -> str:
        # Unquoted YAML PINs arrive as ints.
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str) or not value.isascii() or not value.isdigit():
            raise ValueError("login.pin must be a non-empty string of digits")
        return value


class AccountConfig(BaseModel):
    initial_balance: int = Field(default=1_000_000, ge=0)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class ShakegateSettings(BaseSettings):
    data_dir: Path = Path("./data")
    lockout: LockoutConfig = Field(default_factory=LockoutConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    login: LoginConfig = Field(default_factory=LoginConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="SHAKEGATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @property
    def db_path(self) -> Path:
        return self.data_dir / "shakegate.db"


def _coerce_env_value(value: str) -> object:
    parsed = yaml.safe_load(value)
    return value if parsed is None else parsed


def _set_nested(mapping: dict[str, object], path: list[str], value: object) -> None:
    current = mapping
    for key in path[:-1]:
        existing = current.get(key)
        if not isinstance(existing, dict):
            existing = {}
            current[key] = existing
        current = existing
    current[path[-1]] = value


def _apply_env_overrides(data: dict[str, object]) -> dict[str, object]:
    merged = dict(data)
    prefix = "SHAKEGATE_"
    for key, raw_value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].lower().split("__")
        value: object = raw_value
        # A PIN like "007" must stay a string; YAML would read it as an int.
        if path != ["login", "pin"]:
            value = _coerce_env_value(raw_value)
        _set_nested(merged, path, value)
    return merged


def load_config(path: str | Path = "config/shakegate.yaml") -> ShakegateSettings:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError("config file must contain a top-level mapping")

    raw = loaded.get("shakegate", loaded)
    if not isinstance(raw, dict):
        raise ValueError("shakegate config section must be a mapping")

    merged = _apply_env_overrides(raw)
    return ShakegateSettings.model_validate(merged)


__all__ = [
    "AccountConfig",
    "LockoutConfig",
    "LoggingConfig",
    "LoginConfig",
    "ShakegateSettings",
    "VerificationConfig",
    "load_config",
]
