"""Custom application exceptions."""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Request is well-formed but breaks a business precondition."""

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Unauthorized(AppException):
    """Actor is not allowed to act on this resource."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidDateRange(AppException):
    """Start date is not strictly before end date."""

    def __init__(self, detail: str = "start_date must be before end_date") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class PropertyUnavailable(AppException):
    """Property is not listed as available."""

    def __init__(self, detail: str = "Property is not available for booking") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class BookingConflict(AppException):
    """Requested dates overlap an approved or active booking."""

    def __init__(self, detail: str = "Property is already booked for the selected dates") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class IllegalTransition(AppException):
    """Booking status change not permitted from the current status."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Invalid booking transition: {current} → {requested}",
        )


class MissingCancellationReason(AppException):
    """Cancellation requested without a reason."""

    def __init__(self, detail: str = "A cancellation reason is required") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidPayment(AppException):
    """Payment entry rejected by the ledger."""

    def __init__(self, detail: str = "Payment amount must be positive") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class LedgerInvariantError(AppException):
    """Stored payment status disagrees with the payment history."""

    def __init__(self, detail: str = "Payment ledger is inconsistent") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class ServiceUnavailable(AppException):
    """Backing store unreachable; safe for the caller to retry."""

    def __init__(self, service: str) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{service.capitalize()} is temporarily unavailable",
            headers={"Retry-After": "5"},
        )
