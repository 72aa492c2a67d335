"""Booking API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from lingomatch.core.config import get_settings
from lingomatch.modules.access.service import require_verified_user
from lingomatch.modules.booking.pricing import format_cents
from lingomatch.modules.booking.schemas import BookingBatchRead, BookingCreateRequest, BookingRead
from lingomatch.modules.booking.service import (
    BookingBatch,
    BookingService,
    get_booking_service,
    parse_payment_reference,
)

router = APIRouter(prefix="/booking", tags=["booking"])
settings = get_settings()


def _batch_read(batch: BookingBatch) -> BookingBatchRead:
    return BookingBatchRead(
        bookings=[BookingRead.model_validate(booking) for booking in batch.bookings],
        total_price=batch.total_price,
        total_display=format_cents(batch.total_price),
        currency=settings.currency,
        payment_reference=batch.payment_reference,
    )


@router.post("", response_model=BookingBatchRead, status_code=status.HTTP_201_CREATED)
async def create_bookings(
    payload: BookingCreateRequest,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(require_verified_user),
) -> BookingBatchRead:
    """Reserve selected slots in pending_payment state."""
    batch = await service.create_bookings(payload, current_user)
    return _batch_read(batch)


@router.get("/checkout", response_model=BookingBatchRead)
async def get_checkout(
    ids: str = Query(min_length=1),
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(require_verified_user),
) -> BookingBatchRead:
    """Summary for the payment step. Payment itself is not available yet."""
    batch = await service.get_checkout(parse_payment_reference(ids), current_user)
    return _batch_read(batch)


@router.get("/my", response_model=list[BookingRead])
async def list_my_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(require_verified_user),
) -> list[BookingRead]:
    """List bookings for current user."""
    items = await service.list_bookings(current_user)
    return [BookingRead.model_validate(item) for item in items]
