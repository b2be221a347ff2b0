"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from talentshare.api.routes import auth, users, talents, bookings, notifications, reviews
from talentshare.schemas.common import ErrorResponse

# Documented once for every route; rendered by api/errors.py
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation or business rule failure"},
    401: {"model": ErrorResponse, "description": "Missing or invalid credential"},
    403: {"model": ErrorResponse, "description": "Resource belongs to another user"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
}

api_router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(talents.router)
api_router.include_router(bookings.router)
api_router.include_router(notifications.router)
api_router.include_router(reviews.router)
