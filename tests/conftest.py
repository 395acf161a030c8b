"""Pytest configuration for test isolation.

Settings are read from ``LEDGER_*`` environment variables and the CLI loads a
``.env`` from the current working directory. To keep tests hermetic, every
test runs from its own temporary directory with those variables cleared.

Package logging is marked as already configured so the CLI does not attach a
handler bound to a stream that pytest closes between tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ledger_normalizer import logging_setup

_ENV_VARS = (
    "LEDGER_OUTPUT_DIR",
    "LEDGER_AUDIT_DIR",
    "LEDGER_SAMPLE_LIMIT",
    "LEDGER_CURRENCY_SYMBOL",
    "LEDGER_NORMALIZER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", True)
