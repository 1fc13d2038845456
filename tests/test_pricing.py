from datetime import date
from types import SimpleNamespace

import pytest

from app.core.exceptions import InvalidDateRange, ValidationError
from app.domain.pricing import compute_total, months_between, recompute_totals


@pytest.mark.parametrize(
    "start_date,end_date,months",
    [
        (date(2025, 1, 1), date(2025, 1, 2), 1),
        (date(2025, 1, 1), date(2025, 1, 31), 1),  # 30 days
        (date(2025, 1, 1), date(2025, 2, 1), 2),  # 31 days
        (date(2025, 1, 1), date(2025, 3, 1), 2),  # 59 days
        (date(2025, 1, 1), date(2025, 3, 3), 3),  # 61 days
        (date(2024, 1, 1), date(2025, 1, 1), 13),  # 366 days
    ],
)
def test_months_between_charges_every_started_month(start_date, end_date, months):
    assert months_between(start_date, end_date) == months


@pytest.mark.parametrize(
    "start_date,end_date",
    [
        (date(2025, 1, 1), date(2025, 1, 1)),
        (date(2025, 1, 5), date(2025, 1, 4)),
    ],
)
def test_months_between_rejects_empty_or_reversed_range(start_date, end_date):
    with pytest.raises(InvalidDateRange):
        months_between(start_date, end_date)


def test_compute_total_adds_deposit_once():
    assert compute_total(1000, 500, date(2025, 1, 1), date(2025, 3, 1)) == 2500


def test_compute_total_with_no_deposit():
    assert compute_total(1200, 0, date(2025, 1, 1), date(2025, 1, 10)) == 1200


def test_compute_total_rejects_negative_money():
    with pytest.raises(ValidationError):
        compute_total(-1, 0, date(2025, 1, 1), date(2025, 2, 1))
    with pytest.raises(ValidationError):
        compute_total(1000, -5, date(2025, 1, 1), date(2025, 2, 1))


def test_recompute_totals_writes_total_back():
    booking = SimpleNamespace(
        monthly_rent=800,
        security_deposit=200,
        start_date=date(2025, 6, 1),
        end_date=date(2025, 8, 15),  # 75 days -> 3 months
        total_amount=0,
    )

    assert recompute_totals(booking) == 2600
    assert booking.total_amount == 2600
