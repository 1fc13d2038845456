"""Rent pricing.

A billing month is a flat 30 days; any started month is charged in full.
Amounts are integers in the smallest currency unit.
"""

import math
from datetime import date

from app.core.exceptions import InvalidDateRange, ValidationError

DAYS_PER_BILLING_MONTH = 30


def months_between(start: date, end: date) -> int:
    """Number of billing months covered by [start, end)."""
    if start >= end:
        raise InvalidDateRange(f"start_date {start} must be before end_date {end}")
    days = (end - start).days
    return max(1, math.ceil(days / DAYS_PER_BILLING_MONTH))


def compute_total(monthly_rent: int, security_deposit: int, start: date, end: date) -> int:
    """Total payable for a tenancy: rent for every started month plus the deposit."""
    if monthly_rent < 0:
        raise ValidationError(f"Monthly rent cannot be negative, got {monthly_rent}")
    if security_deposit < 0:
        raise ValidationError(f"Security deposit cannot be negative, got {security_deposit}")
    return monthly_rent * months_between(start, end) + security_deposit


def recompute_totals(booking) -> int:
    """Refresh ``booking.total_amount`` from its rent, deposit and dates.

    Must run before every persist of a booking whose pricing inputs may have
    changed.
    """
    booking.total_amount = compute_total(
        booking.monthly_rent,
        booking.security_deposit,
        booking.start_date,
        booking.end_date,
    )
    return booking.total_amount
