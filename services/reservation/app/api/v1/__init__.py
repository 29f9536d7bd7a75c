from fastapi import APIRouter

from app.api.v1 import booking_routes, field_routes, review_routes

router = APIRouter()
router.include_router(field_routes.router)
router.include_router(booking_routes.router)
router.include_router(review_routes.router)

__all__ = ["router"]
