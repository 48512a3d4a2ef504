"""Bot initialization and configuration."""

import asyncio

import structlog
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand, BotCommandScopeDefault

from sleepbot.config import settings
from sleepbot.handlers import start, survey
from sleepbot.middlewares import LoggingMiddleware, SurveyContextMiddleware

logger = structlog.get_logger()


def create_bot() -> Bot:
    """Create the bot client from settings."""
    return Bot(
        token=settings.telegram_bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )


def create_dispatcher() -> Dispatcher:
    """Create a dispatcher with middlewares and handlers registered."""
    dp = Dispatcher(storage=MemoryStorage())

    dp.message.middleware(LoggingMiddleware())
    dp.callback_query.middleware(LoggingMiddleware())
    dp.message.middleware(SurveyContextMiddleware())
    dp.callback_query.middleware(SurveyContextMiddleware())

    start.register_handlers(dp)
    survey.register_handlers(dp)
    return dp


dp = create_dispatcher()


async def set_bot_commands(bot: Bot) -> None:
    """Set bot commands for the menu."""
    commands = [
        BotCommand(command="start", description="Start working with the bot"),
        BotCommand(command="survey", description="Continue the sleep questionnaire"),
        BotCommand(command="progress", description="Review my answers"),
        BotCommand(command="submit", description="Get my sleep quality prediction"),
    ]

    await bot.set_my_commands(commands, BotCommandScopeDefault())
    logger.info("Bot commands set successfully")


async def set_webhook(bot: Bot) -> None:
    """Set webhook for the bot."""
    webhook_url = f"{settings.telegram_webhook_url}{settings.webhook_path}"

    await bot.set_webhook(
        url=webhook_url,
        secret_token=settings.telegram_webhook_secret,
        drop_pending_updates=True,
    )

    logger.info("Webhook set successfully", url=webhook_url)


async def remove_webhook(bot: Bot) -> None:
    """Remove webhook and switch to polling mode."""
    await bot.delete_webhook(drop_pending_updates=True)
    logger.info("Webhook removed successfully")


async def on_startup(bot: Bot) -> None:
    """Execute on bot startup."""
    try:
        await set_bot_commands(bot)

        if settings.webhook_enabled:
            await set_webhook(bot)

        logger.info(
            "Bot started successfully",
            mode="webhook" if settings.webhook_enabled else "polling",
            prediction_api=settings.prediction_api_url,
        )

    except Exception as e:
        logger.error("Failed to start bot", error=str(e), exc_info=True)
        raise


async def on_shutdown(bot: Bot) -> None:
    """Execute on bot shutdown."""
    try:
        if not settings.webhook_enabled:
            await remove_webhook(bot)

        await bot.session.close()

        logger.info("Bot shutdown completed")

    except Exception as e:
        logger.error("Error during bot shutdown", error=str(e), exc_info=True)


async def start_polling() -> None:
    """Start bot in polling mode (for development)."""
    logger.info("Starting bot in polling mode")

    bot = create_bot()
    try:
        await on_startup(bot)
        await dp.start_polling(bot)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error("Bot polling error", error=str(e), exc_info=True)
    finally:
        await on_shutdown(bot)


if __name__ == "__main__":
    asyncio.run(start_polling())
