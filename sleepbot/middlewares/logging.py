"""Interaction logging for messages and button presses."""

import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog
from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject


def _chat_id(event: TelegramObject) -> Optional[int]:
    if isinstance(event, Message):
        return event.chat.id
    if isinstance(event, CallbackQuery) and event.message is not None:
        return event.message.chat.id
    return None


class LoggingMiddleware(BaseMiddleware):
    """Writes one line when an update arrives and one when its handler returns."""

    def __init__(self) -> None:
        self.logger = structlog.get_logger("bot.interactions.middleware")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        request_id = uuid.uuid4().hex[:12]
        data["request_id"] = request_id

        user = getattr(event, "from_user", None)
        logger = self.logger.bind(
            request_id=request_id,
            chat_id=_chat_id(event),
            user_id=user.id if user else None,
            handler=getattr(handler, "__qualname__", None),
        )

        if isinstance(event, Message):
            logger.info("Message received", text=(event.text or "")[:200] or None)
        elif isinstance(event, CallbackQuery):
            logger.info("Button pressed", data=event.data)

        started = time.perf_counter()
        try:
            result = await handler(event, data)
        except Exception as exc:
            logger.error("Update failed", error=str(exc), exc_info=True)
            raise

        logger.info("Update handled", duration_ms=round((time.perf_counter() - started) * 1000))
        return result
