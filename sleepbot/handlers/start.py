"""Start command and welcome flow handlers."""

import structlog
from aiogram import Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import InlineKeyboardButton, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from sleepbot.services.session_store import SurveySession
from sleepbot.utils.callbacks import Callbacks

router = Router()
logger = structlog.get_logger()

WELCOME_MESSAGE = (
    "👋 Hi! I can estimate your sleep quality.\n\n"
    "Answer a short questionnaire about your sleep habits, how often you notice "
    "common sleep problems and what your bedroom is like. It takes about three minutes.\n\n"
    "Commands:\n"
    "/survey – continue the questionnaire\n"
    "/progress – review your answers\n"
    "/submit – send your answers for a prediction"
)


@router.message(Command("start"))
async def send_welcome(message: Message, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Handle /start command and offer to begin the survey."""
    try:
        await state.clear()

        answered = survey_session.survey.answered_count
        button_text = "▶️ Continue survey" if answered else "▶️ Start survey"

        keyboard = InlineKeyboardBuilder()
        keyboard.add(InlineKeyboardButton(text=button_text, callback_data=Callbacks.SURVEY_START))

        await message.answer(WELCOME_MESSAGE, reply_markup=keyboard.as_markup())

        logger.info("Start command processed", chat_id=survey_session.chat_id, answered=answered)

    except Exception as e:
        logger.error("Error in start command", error=str(e), exc_info=True)
        await message.answer("Something went wrong. Please try /start again.")


def register_handlers(dp):
    """Register start handlers."""
    dp.include_router(router)
