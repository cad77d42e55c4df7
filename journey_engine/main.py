import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from journey_engine.api.router import api_router
from journey_engine.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper(),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.project_name,
    description="Journey progress, street-turn matching and container number validation for drayage dispatch.",
    debug=settings.debug,
)

logger.info(f"CORS origins: {settings.backend_cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
)

app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    return {"status": "ok", "environment": settings.environment}


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """Health check endpoint - the engine is stateless, so it is ready as soon as it is up."""
    return {
        "status": "ok",
        "service": settings.project_name,
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Uvicorn server on http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
