from fastapi import APIRouter
from app.api.v1.endpoints import bookings, notifications, posts, services, slots, working_hours

api_router = APIRouter()
api_router.include_router(working_hours.router, prefix="/working-hours", tags=["working-hours"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(slots.router, prefix="/slots", tags=["slots"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
