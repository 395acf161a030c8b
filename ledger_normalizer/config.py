"""Run settings resolved from explicit options and environment variables.

Entrypoints load a local ``.env`` (``python-dotenv``) before calling
:func:`load_settings`; this module only reads ``os.environ``.

Environment variables:

- ``LEDGER_OUTPUT_DIR``: directory for exported files (default ``./output``)
- ``LEDGER_AUDIT_DIR``: directory for run reports (default ``./logs``)
- ``LEDGER_SAMPLE_LIMIT``: transform-sample size in the audit report
  (default 0, meaning all pairs)
- ``LEDGER_CURRENCY_SYMBOL``: symbol used for amounts in the report
- ``LEDGER_NORMALIZER_LOG_LEVEL``: package log level, a name such as
  ``DEBUG`` or a number (default ``INFO``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .audit import DEFAULT_CURRENCY_SYMBOL

DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_AUDIT_DIR = "./logs"


class ConfigError(ValueError):
    """Raised for invalid configuration values."""


@dataclass(frozen=True, slots=True)
class Settings:
    output_dir: Path
    audit_dir: Path
    sample_limit: int
    currency_symbol: str
    log_level: int = logging.INFO


def validate_sample_limit(value: Any) -> int:
    """Return a non-negative sample limit; ``None`` means 0 (keep all pairs).

    Accepts ints and numeric strings (as read from the environment).
    """

    if value is None:
        return 0
    if isinstance(value, bool):
        raise ConfigError(f"Invalid sample_limit value: {value!r}")
    try:
        num = value if isinstance(value, int) else int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid sample_limit value: {value!r}") from exc
    if num < 0:
        raise ConfigError(f"Invalid sample_limit value: {value!r}. Must be zero or positive.")
    return num


def parse_log_level(value: Any) -> int:
    """Return a numeric logging level; ``None`` means ``INFO``.

    Accepts ints, numeric strings and standard level names in any case.
    """

    if value is None:
        return logging.INFO
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip().upper()
    if text.isdigit():
        return int(text)
    level = logging.getLevelNamesMapping().get(text)
    if level is None:
        raise ConfigError(f"Invalid log level: {value!r}")
    return level


def _env(name: str) -> str | None:
    val = os.getenv(name)
    return val if val and val.strip() else None


def load_settings(
    *,
    output_dir: str | os.PathLike[str] | None = None,
    audit_dir: str | os.PathLike[str] | None = None,
    sample_limit: int | str | None = None,
    log_level: int | str | None = None,
) -> Settings:
    """Resolve settings: explicit arguments win over environment variables."""

    if output_dir is None:
        output_dir = _env("LEDGER_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR
    if audit_dir is None:
        audit_dir = _env("LEDGER_AUDIT_DIR") or DEFAULT_AUDIT_DIR
    if sample_limit is None:
        sample_limit = _env("LEDGER_SAMPLE_LIMIT")
    if log_level is None:
        log_level = _env("LEDGER_NORMALIZER_LOG_LEVEL")

    return Settings(
        output_dir=Path(output_dir),
        audit_dir=Path(audit_dir),
        sample_limit=validate_sample_limit(sample_limit),
        currency_symbol=os.getenv("LEDGER_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
        log_level=parse_log_level(log_level),
    )


__all__ = [
    "DEFAULT_AUDIT_DIR",
    "DEFAULT_OUTPUT_DIR",
    "ConfigError",
    "Settings",
    "load_settings",
    "parse_log_level",
    "validate_sample_limit",
]
