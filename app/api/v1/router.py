"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import bookings, properties

api_router = APIRouter()

# Properties
api_router.include_router(properties.router, prefix="/properties", tags=["Properties"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
