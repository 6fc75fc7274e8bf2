"""
Mindful AI API
==============
FastAPI application entry point. Mount routers here.

Run locally with ``mindful-ai-api`` (installed script), ``python -m app.main``
or ``uvicorn app.main:app --reload`` from ``backend/``.
"""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import insights, mood, recommendations

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="Mindful AI API",
    description="Mood & Wellness Insight Engine — API Backend",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mood.router)
app.include_router(recommendations.router)
app.include_router(insights.router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "mindful-ai-api"}


def serve() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    serve()
