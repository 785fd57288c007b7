from datetime import date

import pytest

from billing.cycles import iter_billing_months, resolve_due_date


def test_walk_covers_move_in_through_target_inclusive():
    assert list(iter_billing_months(date(2024, 1, 15), 2024, 4)) == [
        (2024, 1), (2024, 2), (2024, 3), (2024, 4),
    ]


def test_walk_rolls_over_year_boundary():
    assert list(iter_billing_months(date(2023, 11, 30), 2024, 2)) == [
        (2023, 11), (2023, 12), (2024, 1), (2024, 2),
    ]


def test_walk_single_month_when_move_in_is_target_month():
    assert list(iter_billing_months(date(2025, 3, 31), 2025, 3)) == [(2025, 3)]


def test_walk_is_empty_when_move_in_is_after_target():
    assert list(iter_billing_months(date(2025, 3, 10), 2025, 1)) == []


def test_walk_is_restartable():
    first = list(iter_billing_months(date(2024, 1, 1), 2024, 3))
    second = list(iter_billing_months(date(2024, 1, 1), 2024, 3))
    assert first == second


@pytest.mark.parametrize(
    "year, month, day, expected",
    [
        (2024, 1, 31, date(2024, 1, 31)),
        (2024, 2, 31, date(2024, 2, 29)),
        (2023, 2, 30, date(2023, 2, 28)),
        (2024, 2, 30, date(2024, 2, 29)),
        (2023, 2, 1, date(2023, 2, 1)),
        (2024, 4, 31, date(2024, 4, 30)),
        (2024, 6, 0, date(2024, 6, 1)),
        (2024, 6, -3, date(2024, 6, 1)),
        (2024, 12, 15, date(2024, 12, 15)),
    ],
)
def test_due_date_clamps_into_month(year, month, day, expected):
    assert resolve_due_date(year, month, day) == expected
