"""API routes for fields and their availability."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.security import ROLE_ADMIN, ROLE_OWNER, CurrentUser, require_roles
from app.dependencies import get_db
from app.models.field import SportType
from app.schemas.booking import AvailableSlotResponse, BookingResponse
from app.schemas.field import FieldCreate, FieldDeleteResponse, FieldResponse, FieldUpdate
from app.schemas.review import ReviewResponse
from app.services.booking_service import BookingService
from app.services.field_service import FieldService
from app.services.review_service import ReviewService

router = APIRouter(prefix="/fields", tags=["fields"])


@router.get("/", response_model=List[FieldResponse])
def list_fields(
    *,
    db: Session = Depends(get_db),
    city: Optional[str] = Query(None, description="Filter fields by city"),
    sport_type: Optional[SportType] = Query(None, description="Filter fields by sport"),
) -> List[FieldResponse]:
    service = FieldService(db)
    return service.list_fields(
        city=city,
        sport_type=sport_type.value if sport_type is not None else None,
    )


@router.get("/{field_id}", response_model=FieldResponse)
def get_field(field_id: int, db: Session = Depends(get_db)) -> FieldResponse:
    service = FieldService(db)
    return service.get_field(field_id)


@router.post("/", response_model=FieldResponse, status_code=status.HTTP_201_CREATED)
def create_field(
    payload: FieldCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(ROLE_OWNER, ROLE_ADMIN)),
) -> FieldResponse:
    """Register a new field owned by the caller."""

    service = FieldService(db)
    return service.create_field(payload, owner_id=current_user.id_user)


@router.put("/{field_id}", response_model=FieldResponse)
def update_field(
    field_id: int,
    payload: FieldUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(ROLE_OWNER, ROLE_ADMIN)),
) -> FieldResponse:
    service = FieldService(db)
    return service.update_field(field_id, payload, current_user=current_user)


@router.get("/{field_id}/available-slots", response_model=List[AvailableSlotResponse])
def list_available_slots(
    field_id: int,
    *,
    db: Session = Depends(get_db),
    date_value: Optional[date] = Query(
        None,
        alias="date",
        description=(
            "Date in ISO format (YYYY-MM-DD). Defaults to today in Baku time. "
            "Example: /fields/1/available-slots?date=2024-05-15"
        ),
    ),
) -> List[AvailableSlotResponse]:
    """Retrieve the one-hour slots that can still be booked on the selected date."""

    service = BookingService(db)
    return service.list_available_slots(field_id, target_date=date_value)


@router.get("/{field_id}/bookings", response_model=List[BookingResponse])
def list_field_bookings(
    field_id: int,
    *,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(ROLE_OWNER, ROLE_ADMIN)),
    date_value: Optional[date] = Query(None, alias="date", description="Filter by date"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
) -> List[BookingResponse]:
    """Retrieve the bookings of a field for its owner."""

    field_service = FieldService(db)
    field_service.ensure_can_manage(field_service.get_field(field_id), current_user)

    service = BookingService(db)
    return service.list_field_bookings(
        field_id,
        target_date=date_value,
        status_filter=status_filter,
    )


@router.delete("/{field_id}", response_model=FieldDeleteResponse)
def delete_field(
    field_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(ROLE_OWNER, ROLE_ADMIN)),
) -> FieldDeleteResponse:
    """Delete a field with its bookings and reviews."""

    service = FieldService(db)
    service.delete_field(field_id, current_user=current_user)
    return FieldDeleteResponse(message="Field deleted successfully")


@router.get("/{field_id}/reviews", response_model=List[ReviewResponse])
def list_field_reviews(field_id: int, db: Session = Depends(get_db)) -> List[ReviewResponse]:
    service = ReviewService(db)
    return service.list_field_reviews(field_id)
