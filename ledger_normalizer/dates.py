"""Date parsing, formatting and installment spreading.

Sources report dates as ISO-8601 instants with an offset
(``2024-03-15T00:00:00+02:00``), bare ``YYYY-MM-DD`` strings, or the odd
slash/month-name form. All of them are reduced to a calendar date.

The calendar date is taken in the offset the source wrote, never converted
to the host's timezone: ``2024-03-15T00:00:00+02:00`` is 2024-03-15 on every
machine.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from .logging_setup import get_logger

_logger = get_logger("ledger_normalizer.dates")

# Tried in order after ISO-8601 parsing fails.
_FALLBACK_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


class FormatError(ValueError):
    """Raised when formatting a value that is not a valid date."""


def parse_date(value: str | date | None) -> date | None:
    """Parse ``value`` into a calendar date, or return ``None``.

    Never raises: anything that does not resolve to a real calendar day
    (``"not-a-date"``, ``""``, ``"2024-02-30"``) yields ``None``.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    _logger.debug("unparseable date: %r", value)
    return None


def format_date(value: str | date) -> str:
    """Format ``value`` as zero-padded ``YYYY-MM-DD``.

    Raises :class:`FormatError` when ``value`` cannot be parsed; callers are
    expected to have validated the date already.
    """

    d = parse_date(value)
    if d is None:
        raise FormatError(f"Invalid date: {value!r}")
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def spread_installment_date(iso_date: str, installment_number: int) -> str:
    """Shift an installment charge by ``installment_number - 1`` days.

    Budgeting tools flag rows with the same date and amount as duplicates,
    and every charge of an installment plan has both. Installment 1 keeps the
    original date, installment 2 moves one day later, and so on. The true
    charge date stays in the row's memo.

    Returns ``iso_date`` unchanged when it cannot be parsed or the shifted
    date falls past ``date.max``.
    """

    d = parse_date(iso_date)
    if d is None:
        return iso_date
    if installment_number > 1:
        try:
            d += timedelta(days=installment_number - 1)
        except OverflowError:
            return iso_date
    return format_date(d)


__all__ = ["FormatError", "format_date", "parse_date", "spread_installment_date"]
