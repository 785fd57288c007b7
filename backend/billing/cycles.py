"""Month arithmetic for the rent ledger.

Both helpers are pure: the login hook, the assignment hook and the daily beat
task all walk months through :func:`iter_billing_months` and resolve due dates
through :func:`resolve_due_date`, so every trigger produces the same rows.
"""
from __future__ import annotations

from calendar import monthrange
from datetime import date as _date
from typing import Iterator, Tuple


def _clamp(year: int, month: int, day: int) -> _date:
    last = monthrange(year, month)[1]
    return _date(year, month, max(1, min(day, last)))


def resolve_due_date(year: int, month: int, payment_day: int) -> _date:
    """Due date for (year, month): payment_day clamped into [1, last day of month]."""
    return _clamp(year, month, int(payment_day))


def _next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def iter_billing_months(move_in: _date, year: int, month: int) -> Iterator[Tuple[int, int]]:
    """Yield (year, month) from move_in's month through (year, month), inclusive.

    Empty when move_in falls after the target month. Each call returns a fresh
    generator.
    """
    current = (move_in.year, move_in.month)
    target = (year, month)
    while current <= target:
        yield current
        current = _next_month(*current)
