"""Render submit outcomes into the Telegram chat."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.utils.markdown import hbold

from sleepbot.errors import IncompleteForm
from sleepbot.services.submission_service import OutcomeKind, SubmissionOutcome
from sleepbot.utils.callbacks import Callbacks

logger = structlog.get_logger()

SEVERITY_ICONS = {
    "success": "✅",
    "warning": "⚠️",
    "danger": "❌",
}


def result_keyboard() -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(InlineKeyboardButton(text="🔄 Restart", callback_data=Callbacks.RESULT_RESTART))
    keyboard.add(InlineKeyboardButton(text="OK", callback_data=Callbacks.RESULT_OK))
    keyboard.adjust(2)
    return keyboard.as_markup()


def incomplete_text(outcome: SubmissionOutcome) -> str:
    text = IncompleteForm.user_message
    if outcome.missing:
        count = len(outcome.missing)
        text += f" ({count} answer{'s' if count != 1 else ''} missing)"
    else:
        text += " (pick at least one experience)"
    return text


class TelegramPresenter:
    """Shows progress, notifications and results for one chat interaction.

    Notifications go to the callback query as a toast when the submit came
    from a button, otherwise they are sent as a chat message.
    """

    def __init__(self, message: Message, callback: Optional[CallbackQuery] = None):
        self.message = message
        self.callback = callback
        self.answered = False

    @asynccontextmanager
    async def progress(self, text: str) -> AsyncIterator[None]:
        """Post a status message and remove it when the block exits."""
        status = await self.message.answer(f"⏳ {text}")
        try:
            yield
        finally:
            try:
                await status.delete()
            except TelegramAPIError as exc:
                logger.warning("Failed to remove progress message", error=str(exc))

    async def notify(self, text: str, severity: str = "warning") -> None:
        text = f"{SEVERITY_ICONS.get(severity, '')} {text}".strip()
        if self.callback is not None and not self.answered:
            await self.callback.answer(text, show_alert=severity == "danger")
            self.answered = True
        else:
            await self.message.answer(text)

    async def render(self, outcome: SubmissionOutcome) -> None:
        if outcome.kind is OutcomeKind.INCOMPLETE_FORM:
            await self.notify(incomplete_text(outcome), "warning")
        elif outcome.kind is OutcomeKind.REJECTED:
            await self.notify("Your answers are already being sent, please wait.", "warning")
        elif outcome.kind is OutcomeKind.FAILED:
            await self.notify(outcome.error.user_message, "danger")
        else:
            await self.message.answer(
                f"{hbold('Result')}\n\n{hbold(outcome.label)}",
                reply_markup=result_keyboard(),
            )
