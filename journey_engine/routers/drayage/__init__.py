"""
Drayage API Routers.

Provides endpoints for the load-journey engine:
- Container journeys (progress and next action)
- Street-turn candidate ranking and status checks
- ISO 6346 container number validation
"""

from fastapi import APIRouter

from journey_engine.routers.drayage.container import router as container_router
from journey_engine.routers.drayage.journeys import router as journeys_router
from journey_engine.routers.drayage.street_turns import router as street_turns_router

# Main router that combines all drayage routes
router = APIRouter()

# Include sub-routers
router.include_router(container_router)
router.include_router(journeys_router)
router.include_router(street_turns_router)


__all__ = ["router", "container_router", "journeys_router", "street_turns_router"]
