"""Installment detection from free-text transaction descriptions.

Card issuers split a purchase into N equal charges and label each one in the
description, e.g. ``"תשלום 2 מ-12"`` (Hebrew), ``"2 מתוך 12"`` (Hebrew,
"2 out of 12") or ``"payment 2 of 12"``. Each phrasing is recognized by its
own :class:`InstallmentMatcher`; the matchers are tried in priority order and
the first one that yields a *valid* plan wins. Recognition and range
validation are kept separate: a matcher that finds ``"15 of 12"`` does not
stop the search, it simply produces nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import InstallmentInfo


@dataclass(frozen=True, slots=True)
class InstallmentMatcher:
    """A single locale-specific phrasing with ``number`` and ``total`` groups."""

    name: str
    pattern: re.Pattern[str]

    def match(self, text: str) -> InstallmentInfo | None:
        m = self.pattern.search(text)
        if m is None:
            return None
        number = int(m.group("number"))
        total = int(m.group("total"))
        if 0 < number <= total:
            return InstallmentInfo(number=number, total=total)
        return None


# Order matters: more specific phrasings come first.
INSTALLMENT_MATCHERS: tuple[InstallmentMatcher, ...] = (
    # "תשלום 2 מ-12", "תשלום - 2 מ - 12", "תשלום 5 מתוך 10"
    InstallmentMatcher(
        "hebrew_payment",
        re.compile(r"תשלום\s*(?:-\s*)?(?P<number>\d+)\s*מ(?:תוך)?\s*-?\s*(?P<total>\d+)"),
    ),
    # "2 מתוך 12"
    InstallmentMatcher(
        "hebrew_out_of",
        re.compile(r"(?P<number>\d+)\s*מתוך\s*(?P<total>\d+)"),
    ),
    # "payment 2 of 12", "Installment 3 of 12"
    InstallmentMatcher(
        "english_of",
        re.compile(r"(?:payment|installment)\s*(?P<number>\d+)\s*of\s*(?P<total>\d+)", re.I),
    ),
    # "installment 3/12", "inst. 3/12"
    InstallmentMatcher(
        "english_slash",
        re.compile(r"\binst(?:allment|\.)?\s*(?P<number>\d+)\s*/\s*(?P<total>\d+)", re.I),
    ),
)


def parse_installments(text: str | None) -> InstallmentInfo | None:
    """Return the installment plan described by ``text``, if any.

    >>> parse_installments("תשלום 2 מ-12")
    InstallmentInfo(number=2, total=12)
    >>> parse_installments("installment 15 of 12") is None
    True
    """

    if not text:
        return None
    for matcher in INSTALLMENT_MATCHERS:
        info = matcher.match(text)
        if info is not None:
            return info
    return None


__all__ = ["INSTALLMENT_MATCHERS", "InstallmentMatcher", "parse_installments"]
