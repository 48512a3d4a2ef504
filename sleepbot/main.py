"""Application entry point for the sleep survey bot."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

# Setup logging as the absolute first step before any app imports
from sleepbot.logging_config import setup_logging
setup_logging()

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from sleepbot import __version__
from sleepbot.bot import create_bot, dp, on_shutdown, on_startup
from sleepbot.config import settings
from sleepbot.services.session_store import survey_sessions

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager."""
    logger.info("Starting sleep survey bot application")
    bot = create_bot()
    app.state.bot = bot
    await on_startup(bot)

    yield

    logger.info("Shutting down sleep survey bot application")
    await on_shutdown(bot)


app = FastAPI(
    title="Sleep Survey Bot",
    description="Telegram questionnaire that requests sleep quality predictions",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.get("/healthz")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "sleep-survey-bot",
        "active_surveys": len(survey_sessions),
    }


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@app.post(settings.webhook_path)
async def telegram_webhook(request: Request) -> dict:
    """Handle Telegram webhook updates."""
    try:
        secret_header = request.headers.get("X-Telegram-Bot-Api-Secret-Token")
        if secret_header != settings.telegram_webhook_secret:
            logger.warning("Invalid webhook secret")
            return JSONResponse({"status": "error"}, status_code=403)

        update_data = await request.json()

        await dp.feed_webhook_update(request.app.state.bot, update_data)

        return {"status": "ok"}

    except Exception as e:
        logger.error("Webhook processing error", error=str(e), exc_info=True)
        return JSONResponse({"status": "error"}, status_code=500)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sleepbot.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
