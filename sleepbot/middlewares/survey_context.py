"""Survey context middleware attaching the chat's survey session."""

from typing import Any, Awaitable, Callable, Dict, Optional

import structlog
from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from sleepbot.services.session_store import SurveySessionStore, survey_sessions


class SurveyContextMiddleware(BaseMiddleware):
    """Middleware that injects ``survey_session`` into handler data."""

    def __init__(self, store: Optional[SurveySessionStore] = None):
        self.store = store or survey_sessions
        self.logger = structlog.get_logger()

    @staticmethod
    def _chat_id(event: TelegramObject) -> Optional[int]:
        if isinstance(event, Message):
            return event.chat.id
        if isinstance(event, CallbackQuery):
            if event.message is not None:
                return event.message.chat.id
            if event.from_user is not None:
                return event.from_user.id
        return None

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        """Process the event with the chat's survey session."""

        chat_id = self._chat_id(event)
        if chat_id is None:
            return await handler(event, data)

        data["survey_session"] = self.store.get_or_create(chat_id)
        return await handler(event, data)
