"""Environment-driven settings for the commentary service."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_TEMPERATURE = 0.7
DEFAULT_OPENAI_MAX_OUTPUT_TOKENS = 240
DEFAULT_OPENAI_TIMEOUT_SEC = 20.0
DEFAULT_COMMENTARY_LANGUAGE = "Japanese"
DEFAULT_SESSION_TTL_SEC = 20 * 60
DEFAULT_SESSION_SWEEP_INTERVAL_SEC = 60
DEFAULT_SESSION_HISTORY_LIMIT = 12
DEFAULT_PROMPT_HISTORY_LIMIT = 6
DEFAULT_MAX_IMAGE_BYTES = 500 * 1024
DEFAULT_VOICEVOX_BASE = "http://127.0.0.1:50021"
DEFAULT_VOICEVOX_TIMEOUT_SEC = 30.0
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AppSettings:
    """Runtime configuration values."""

    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_temperature: float = DEFAULT_OPENAI_TEMPERATURE
    openai_max_output_tokens: int = DEFAULT_OPENAI_MAX_OUTPUT_TOKENS
    openai_timeout_sec: float = DEFAULT_OPENAI_TIMEOUT_SEC
    commentary_language: str = DEFAULT_COMMENTARY_LANGUAGE
    session_ttl_sec: float = DEFAULT_SESSION_TTL_SEC
    session_sweep_interval_sec: float = DEFAULT_SESSION_SWEEP_INTERVAL_SEC
    session_history_limit: int = DEFAULT_SESSION_HISTORY_LIMIT
    prompt_history_limit: int = DEFAULT_PROMPT_HISTORY_LIMIT
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    voicevox_base: str = DEFAULT_VOICEVOX_BASE
    voicevox_timeout_sec: float = DEFAULT_VOICEVOX_TIMEOUT_SEC
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def _read_float(value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        return default


def _read_positive_float(value: str, default: float, name: str) -> float:
    parsed = _read_float(value, default)
    if parsed <= 0:
        raise ValueError(f"{name} must be > 0.")
    return parsed


def _read_positive_int(value: str, default: int, name: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        return default
    if parsed <= 0:
        raise ValueError(f"{name} must be > 0.")
    return parsed


def _env(name: str, default: object) -> str:
    return os.getenv(name, str(default)).strip()


def load_settings() -> AppSettings:
    """Build settings from environment variables, falling back to defaults.

    Unparsable numbers fall back to their default; numbers that parse but are
    out of range raise ValueError so a misconfigured deployment fails at startup.
    """
    return AppSettings(
        openai_model=_env("OPENAI_MODEL", DEFAULT_OPENAI_MODEL) or DEFAULT_OPENAI_MODEL,
        openai_temperature=_read_float(
            _env("OPENAI_TEMPERATURE", DEFAULT_OPENAI_TEMPERATURE), DEFAULT_OPENAI_TEMPERATURE
        ),
        openai_max_output_tokens=_read_positive_int(
            _env("OPENAI_MAX_OUTPUT_TOKENS", DEFAULT_OPENAI_MAX_OUTPUT_TOKENS),
            DEFAULT_OPENAI_MAX_OUTPUT_TOKENS,
            "OPENAI_MAX_OUTPUT_TOKENS",
        ),
        openai_timeout_sec=_read_positive_float(
            _env("OPENAI_TIMEOUT_SEC", DEFAULT_OPENAI_TIMEOUT_SEC),
            DEFAULT_OPENAI_TIMEOUT_SEC,
            "OPENAI_TIMEOUT_SEC",
        ),
        commentary_language=_env("COMMENTARY_LANGUAGE", DEFAULT_COMMENTARY_LANGUAGE) or DEFAULT_COMMENTARY_LANGUAGE,
        session_ttl_sec=_read_positive_float(
            _env("SESSION_TTL_SEC", DEFAULT_SESSION_TTL_SEC), DEFAULT_SESSION_TTL_SEC, "SESSION_TTL_SEC"
        ),
        session_sweep_interval_sec=_read_positive_float(
            _env("SESSION_SWEEP_INTERVAL_SEC", DEFAULT_SESSION_SWEEP_INTERVAL_SEC),
            DEFAULT_SESSION_SWEEP_INTERVAL_SEC,
            "SESSION_SWEEP_INTERVAL_SEC",
        ),
        session_history_limit=_read_positive_int(
            _env("SESSION_HISTORY_LIMIT", DEFAULT_SESSION_HISTORY_LIMIT),
            DEFAULT_SESSION_HISTORY_LIMIT,
            "SESSION_HISTORY_LIMIT",
        ),
        prompt_history_limit=_read_positive_int(
            _env("PROMPT_HISTORY_LIMIT", DEFAULT_PROMPT_HISTORY_LIMIT),
            DEFAULT_PROMPT_HISTORY_LIMIT,
            "PROMPT_HISTORY_LIMIT",
        ),
        max_image_bytes=_read_positive_int(
            _env("MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES), DEFAULT_MAX_IMAGE_BYTES, "MAX_IMAGE_BYTES"
        ),
        voicevox_base=(_env("VOICEVOX_BASE", DEFAULT_VOICEVOX_BASE) or DEFAULT_VOICEVOX_BASE).rstrip("/"),
        voicevox_timeout_sec=_read_positive_float(
            _env("VOICEVOX_TIMEOUT_SEC", DEFAULT_VOICEVOX_TIMEOUT_SEC),
            DEFAULT_VOICEVOX_TIMEOUT_SEC,
            "VOICEVOX_TIMEOUT_SEC",
        ),
        host=_env("HOST", DEFAULT_HOST) or DEFAULT_HOST,
        port=_read_positive_int(_env("PORT", DEFAULT_PORT), DEFAULT_PORT, "PORT"),
        log_level=(_env("LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
    )
