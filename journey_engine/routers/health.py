from fastapi import APIRouter, Depends

from journey_engine.core.config import Settings, get_settings

router = APIRouter()


@router.get("/healthz", summary="Liveness probe for the journey engine")
async def health_check(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "environment": settings.environment}
