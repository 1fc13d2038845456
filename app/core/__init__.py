"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    BookingConflict,
    IllegalTransition,
    InvalidDateRange,
    InvalidPayment,
    LedgerInvariantError,
    MissingCancellationReason,
    NotFoundError,
    PropertyUnavailable,
    ServiceUnavailable,
    Unauthorized,
    ValidationError,
)
from app.core.security import create_access_token, token_subject, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "BookingConflict",
    "IllegalTransition",
    "InvalidDateRange",
    "InvalidPayment",
    "LedgerInvariantError",
    "MissingCancellationReason",
    "NotFoundError",
    "PropertyUnavailable",
    "ServiceUnavailable",
    "Unauthorized",
    "ValidationError",
    "create_access_token",
    "token_subject",
    "verify_token",
]
