"""Logging for ledger runs.

Modules log through ``get_logger("ledger_normalizer.<module>")`` and never
attach handlers themselves. A run's entrypoint (the ``ledger-normalize`` CLI)
resolves the level from :class:`~ledger_normalizer.config.Settings` and calls
:func:`configure_logging` once; an application embedding the pipeline may
configure the ``ledger_normalizer`` logger its own way instead. Until either
happens, records are dropped silently.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

PACKAGE_LOGGER = "ledger_normalizer"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED = False


def _package_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_LOGGER)


def configure_logging(
    level: int = logging.INFO,
    *,
    fmt: str = DEFAULT_FORMAT,
    stream: IO[str] = sys.stderr,
) -> bool:
    """Send package records at ``level`` and above to ``stream``.

    Only the first call per process has an effect; it returns ``True``. Later
    calls return ``False`` and leave the existing handler in place, so a run
    never reports the same record twice.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return False

    logger = _package_logger()
    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    _CONFIGURED = True
    return True


def get_logger(name: str) -> logging.Logger:
    """Logger for a package module; silent until :func:`configure_logging` runs."""

    pkg = _package_logger()
    if not _CONFIGURED and not pkg.handlers:
        pkg.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["DEFAULT_FORMAT", "PACKAGE_LOGGER", "configure_logging", "get_logger"]
