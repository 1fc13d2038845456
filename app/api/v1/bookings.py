"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import (
    actor_role,
    get_booking_service,
    get_current_renter,
    get_current_user,
)
from app.domain.booking_state import BookingStatus
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import (
    BookingCalculateRequest,
    BookingCalculateResponse,
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from app.schemas.message import (
    MarkReadResponse,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
)
from app.schemas.payment import (
    PaymentCreate,
    PaymentHistoryResponse,
    PaymentResponse,
    PaymentStatusResponse,
)
from app.services.booking_service import BookingService, total_pages

router = APIRouter()

Service = Annotated[BookingService, Depends(get_booking_service)]


@router.post("/calculate", response_model=BookingCalculateResponse)
async def calculate_booking_price(
    request: BookingCalculateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> BookingCalculateResponse:
    """Price a booking without creating it."""
    quote = await service.quote(request.property_id, request.start_date, request.end_date)
    return BookingCalculateResponse.model_validate(quote)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User, Depends(get_current_renter)],
    service: Service,
) -> Booking:
    """Request a booking (renter only)."""
    return await service.create(
        property_id=booking_data.property_id,
        renter_id=current_user.id,
        start=booking_data.start_date,
        end=booking_data.end_date,
        special_requests=booking_data.special_requests,
    )


@router.get("/", response_model=BookingListResponse)
async def get_my_bookings(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
) -> BookingListResponse:
    """Get bookings for the current user (as renter or as owner, by role)."""
    bookings, total = await service.list_for_user(
        current_user.id,
        actor_role(current_user),
        status=status_filter,
        page=page,
        page_size=page_size,
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
    )


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> Booking:
    """Get a booking with its payments and messages."""
    return await service.get_by_id(booking_id, current_user.id)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> Booking:
    """Move a booking through its lifecycle."""
    return await service.set_status(
        booking_id,
        current_user.id,
        actor_role(current_user),
        request.status,
        reason=request.reason,
    )


@router.post(
    "/{booking_id}/payments",
    response_model=PaymentStatusResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_payment(
    booking_id: UUID,
    request: PaymentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> PaymentStatusResponse:
    """Record a payment against a booking."""
    booking = await service.add_payment(booking_id, current_user.id, request)
    return PaymentStatusResponse(
        booking_id=booking.id,
        payment_status=booking.payment_status,
        total_amount=booking.total_amount,
        amount_paid=booking.amount_paid,
        balance_due=booking.balance_due,
        payment=PaymentResponse.model_validate(booking.payments[-1]),
    )


@router.get("/{booking_id}/payments", response_model=PaymentHistoryResponse)
async def get_payment_history(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> PaymentHistoryResponse:
    """Get the payment history of a booking."""
    booking = await service.get_by_id(booking_id, current_user.id)
    return PaymentHistoryResponse(
        booking_id=booking.id,
        payment_status=booking.payment_status,
        total_amount=booking.total_amount,
        amount_paid=booking.amount_paid,
        balance_due=booking.balance_due,
        payments=[PaymentResponse.model_validate(p) for p in booking.payments],
    )


@router.post(
    "/{booking_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    booking_id: UUID,
    request: MessageCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
):
    """Send a message to the other party of a booking."""
    return await service.add_message(booking_id, current_user.id, request.message)


@router.get("/{booking_id}/messages", response_model=MessageListResponse)
async def get_messages(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> MessageListResponse:
    """Get the communication log of a booking."""
    booking = await service.get_by_id(booking_id, current_user.id)
    unread_count = sum(
        1 for m in booking.messages
        if not m.is_read and m.sender_id != current_user.id
    )
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in booking.messages],
        unread_count=unread_count,
    )


@router.post("/{booking_id}/messages/read", response_model=MarkReadResponse)
async def mark_messages_read(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Service,
) -> MarkReadResponse:
    """Mark the other party's messages as read."""
    marked = await service.mark_messages_read(booking_id, current_user.id)
    return MarkReadResponse(marked_read=marked)
