"""Configuration loading utilities for sentloop."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from sentloop.playback.state import PlaybackSettings

_INT_KEYS = {"api_port", "workers", "repeat_target"}
_FLOAT_KEYS = {"boundary_tolerance_sec", "max_overshoot_sec", "sample_interval_sec"}
_STR_KEYS = {"log_level", "api_host"}


@dataclass(frozen=True)
class AppConfig:
    """Application configuration resolved from profile + environment variables."""

    env: str
    log_level: str
    api_host: str
    api_port: int
    workers: int
    boundary_tolerance_sec: float
    max_overshoot_sec: float
    sample_interval_sec: float
    repeat_target: int

    def playback_settings(self) -> PlaybackSettings:
        """Controller tuning derived from this profile."""
        return PlaybackSettings(
            boundary_tolerance=self.boundary_tolerance_sec,
            max_overshoot=self.max_overshoot_sec,
            default_repeat_target=self.repeat_target,
        )


def load_config(env_name: str | None = None, config_dir: Path | None = None) -> AppConfig:
    """Load configuration from `configs/<env>.toml` and environment overrides."""
    env = env_name or os.getenv("SENTLOOP_ENV", "dev")
    resolved_dir = config_dir or _default_config_dir()
    profile_path = resolved_dir / f"{env}.toml"

    defaults: dict[str, str | int | float] = {
        "log_level": "INFO",
        "api_host": "127.0.0.1",
        "api_port": 8000,
        "workers": 1,
        "boundary_tolerance_sec": 0.1,
        "max_overshoot_sec": 0.5,
        "sample_interval_sec": 0.1,
        "repeat_target": 3,
    }
    defaults.update(_load_profile(profile_path))

    config = AppConfig(
        env=env,
        log_level=os.getenv("SENTLOOP_LOG_LEVEL", str(defaults["log_level"])),
        api_host=os.getenv("SENTLOOP_API_HOST", str(defaults["api_host"])),
        api_port=_parse_int("SENTLOOP_API_PORT", defaults["api_port"]),
        workers=_parse_int("SENTLOOP_WORKERS", defaults["workers"]),
        boundary_tolerance_sec=_parse_float(
            "SENTLOOP_BOUNDARY_TOLERANCE_SEC", defaults["boundary_tolerance_sec"]
        ),
        max_overshoot_sec=_parse_float("SENTLOOP_MAX_OVERSHOOT_SEC", defaults["max_overshoot_sec"]),
        sample_interval_sec=_parse_float(
            "SENTLOOP_SAMPLE_INTERVAL_SEC", defaults["sample_interval_sec"]
        ),
        repeat_target=_parse_int("SENTLOOP_REPEAT_TARGET", defaults["repeat_target"]),
    )
    _validate(config)
    return config


def _default_config_dir() -> Path:
    return Path(__file__).resolve().parents[2] / "configs"


def _load_profile(path: Path) -> dict[str, str | int | float]:
    if not path.exists():
        return {}

    with path.open("rb") as handle:
        payload = tomllib.load(handle)

    resolved: dict[str, str | int | float] = {}
    for key, raw in payload.items():
        if key in _INT_KEYS:
            resolved[key] = _coerce_int(key, raw)
        elif key in _FLOAT_KEYS:
            resolved[key] = _coerce_float(key, raw)
        elif key in _STR_KEYS:
            resolved[key] = _coerce_str(key, raw)
    return resolved


def _validate(config: AppConfig) -> None:
    if config.boundary_tolerance_sec < 0:
        raise ValueError("boundary_tolerance_sec must be >= 0")
    if config.max_overshoot_sec < 0:
        raise ValueError("max_overshoot_sec must be >= 0")
    if config.sample_interval_sec <= 0:
        raise ValueError("sample_interval_sec must be > 0")
    if config.repeat_target < 1:
        raise ValueError("repeat_target must be >= 1")


def _parse_int(name: str, default: str | int | float) -> int:
    raw = os.getenv(name)
    if raw is None:
        return _coerce_int(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _parse_float(name: str, default: str | int | float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return _coerce_float(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _coerce_int(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got type bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    raise ValueError(f"{name} must be an integer, got type {type(value).__name__}")


def _coerce_float(name: str, value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got type bool")
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ValueError(f"{name} must be a number, got {value!r}") from exc
    raise ValueError(f"{name} must be a number, got type {type(value).__name__}")


def _coerce_str(name: str, value: object) -> str:
    if isinstance(value, str):
        return value
    raise ValueError(f"{name} must be a string, got type {type(value).__name__}")
