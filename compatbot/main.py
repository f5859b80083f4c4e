"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from compatbot.api import webhooks
from compatbot.config.settings import settings
from compatbot.utils.logging import setup_observability

# Setup logging and observability
setup_observability()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(f"Starting compatbot in {settings.environment} environment")
    if not settings.github_token:
        logger.warning("GH_TOKEN not configured, GitHub requests are unauthenticated")

    yield

    logger.info("Shutting down compatbot")


app = FastAPI(
    title="compatbot",
    description="Comments on pull requests that use CSS features unsupported by target browsers",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire if configured
if settings.logfire_token:
    import logfire

    logfire.instrument_fastapi(app)

app.include_router(webhooks.router)


@app.get("/health")
async def health_check() -> dict[str, str | bool]:
    """Health check endpoint with configuration status."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": "0.1.0",
        "github_token_configured": bool(settings.github_token),
        "webhook_secret_configured": bool(settings.github_webhook_secret),
        "logfire_enabled": bool(settings.logfire_token),
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": "compatbot API",
        "docs": "/docs",
        "health": "/health",
        "webhook": "/webhook/github",
    }


def run() -> None:
    """Serve the app with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
