"""Run a health check for the sleep survey bot."""

import asyncio
import sys
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from sleepbot.logging_config import setup_logging

setup_logging()

import structlog

logger = structlog.get_logger(__name__)


async def check_config() -> bool:
    """Check configuration."""
    logger.info("⚙️  Checking configuration")
    print("⚙️  Checking configuration...")

    try:
        from sleepbot.config import settings

        required_settings = [
            ("TELEGRAM_BOT_TOKEN", settings.telegram_bot_token),
            ("PREDICTION_API_URL", settings.prediction_api_url),
        ]

        missing_settings: list[str] = []
        for name, value in required_settings:
            if not value or value == f"your_{name.lower()}_here":
                logger.warning("Missing required setting", setting=name)
                missing_settings.append(name)

        if missing_settings:
            print(f"❌ Missing required settings: {', '.join(missing_settings)}")
            logger.error("❌ Missing required settings", missing_settings=missing_settings)
            return False

        print("✅ Configuration is valid")
        logger.info("✅ Configuration is valid")
        return True

    except Exception as exc:
        print(f"❌ Configuration error: {exc}")
        logger.error("❌ Configuration error", error=str(exc), exc_info=True)
        return False


async def check_prediction_service() -> bool:
    """Check that the prediction service answers its health probe."""
    logger.info("🛰️  Checking prediction service")
    print("🛰️  Checking prediction service...")

    from sleepbot.errors import ConnectivityFailure
    from sleepbot.services.prediction_client import HttpPredictionClient

    client = HttpPredictionClient()
    try:
        await client.check_health()
    except ConnectivityFailure as exc:
        print(f"❌ Prediction service unreachable at {client.health_url or client.api_url}: {exc}")
        logger.error("❌ Prediction service unreachable", url=client.health_url, error=str(exc))
        return False

    print(f"✅ Prediction service reachable at {client.health_url}")
    logger.info("✅ Prediction service reachable", url=client.health_url)
    return True


async def check_bot_token() -> bool:
    """Check bot token validity."""
    logger.info("🤖 Checking bot token")
    print("🤖 Checking bot token...")

    try:
        from sleepbot.bot import create_bot

        bot = create_bot()
        try:
            me = await bot.get_me()
        finally:
            await bot.session.close()
        print(f"✅ Bot token valid - @{me.username}")
        logger.info("✅ Bot token valid", username=me.username)
        return True

    except Exception as exc:
        print(f"❌ Bot token invalid: {exc}")
        logger.error("❌ Bot token invalid", error=str(exc), exc_info=True)
        return False


async def main() -> bool:
    """Run all health checks."""
    logger.info("🩺 Starting system health check")
    print("🩺 Running system health check...")
    print("=" * 50)

    checks = [
        check_config,
        check_prediction_service,
        check_bot_token,
    ]

    results: list[bool] = []
    for check in checks:
        logger.info("▶️ Executing health check", check=check.__name__)
        try:
            result = await check()
            logger.info("✅ Health check completed", check=check.__name__, result=result)
            results.append(result)
        except Exception as exc:
            logger.error("❌ Health check failed", check=check.__name__, error=str(exc), exc_info=True)
            results.append(False)
        print()

    print("=" * 50)
    if all(results):
        print("🎉 All checks passed! Bot is ready to start.")
        logger.info("🎉 All health checks passed")
        return True

    print("❌ Some checks failed. Please fix the issues before starting the bot.")
    logger.warning("❌ Some health checks failed", results=results)
    return False


if __name__ == "__main__":
    success = asyncio.run(main())
    logger.info("Health check completed", success=success)
    sys.exit(0 if success else 1)
