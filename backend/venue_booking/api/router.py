"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from venue_booking.api.routes import auth, venues, events, venue_requests, tickets

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(venues.router)
api_router.include_router(events.router)
api_router.include_router(venue_requests.router)
api_router.include_router(tickets.router)
