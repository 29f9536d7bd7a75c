"""API routes for creating, listing and cancelling bookings."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.security import ROLE_OWNER, ROLE_PLAYER, CurrentUser, get_current_user
from app.dependencies import get_db
from app.schemas.booking import BookingCancelResponse, BookingCreate, BookingResponse
from app.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    """Book a field for a time range if the slot is admissible."""

    if current_user.role != ROLE_PLAYER:
        detail = (
            "Owners cannot book fields. Please use the owner dashboard to manage your fields."
            if current_user.role == ROLE_OWNER
            else "Admins cannot book fields."
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

    service = BookingService(db)
    return service.create_booking(payload, user_id=current_user.id_user)


@router.get("/me", response_model=List[BookingResponse])
def list_my_bookings(
    *,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
) -> List[BookingResponse]:
    """Retrieve the caller's bookings, newest first."""

    service = BookingService(db)
    return service.list_user_bookings(current_user.id_user, status_filter=status_filter)


@router.get("/users/{user_id}", response_model=List[BookingResponse])
def list_user_bookings(
    user_id: int,
    *,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
) -> List[BookingResponse]:
    """Retrieve the bookings of a user. Only admins may look at other users."""

    if user_id != current_user.id_user and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own bookings",
        )

    service = BookingService(db)
    return service.list_user_bookings(user_id, status_filter=status_filter)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    service = BookingService(db)
    return service.get_booking_for(booking_id, current_user)


@router.post("/{booking_id}/cancel", response_model=BookingCancelResponse)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingCancelResponse:
    """Cancel a confirmed booking while it is still far enough in the future."""

    service = BookingService(db)
    booking = service.cancel_booking(booking_id, current_user=current_user)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking=BookingResponse.model_validate(booking),
    )
