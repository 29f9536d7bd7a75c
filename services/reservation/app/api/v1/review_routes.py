"""API routes for rating fields."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import ROLE_PLAYER, CurrentUser, get_current_user
from app.dependencies import get_db
from app.schemas.review import ReviewCreate, ReviewResponse
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("/", response_model=ReviewResponse)
def submit_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ReviewResponse:
    """Rate a field the caller has a confirmed booking on."""

    if current_user.role != ROLE_PLAYER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only players can leave reviews",
        )

    service = ReviewService(db)
    return service.submit_review(payload, user_id=current_user.id_user)
