from fastapi import APIRouter

from journey_engine.routers import drayage, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(drayage.router)
