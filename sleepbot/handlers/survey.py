"""Survey handlers: questions, answers, experiences and submission."""

from typing import Optional

import structlog
from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.utils.markdown import hbold, hitalic
from aiogram.utils.text_decorations import html_decoration

from sleepbot.errors import UnknownRating
from sleepbot.handlers.presenter import TelegramPresenter
from sleepbot.services.session_store import SurveySession
from sleepbot.services.submission_service import ResultAction
from sleepbot.survey import questions, scales
from sleepbot.survey.fields import ExperienceTag, SurveyField
from sleepbot.survey.state import SurveyState
from sleepbot.utils.callbacks import CallbackData, Callbacks

router = Router()
logger = structlog.get_logger()

TOTAL_QUESTIONS = len(questions.QUESTION_ORDER)


class SurveyStates(StatesGroup):
    """Waiting for a typed answer to a free-text question."""

    answering_text = State()


# ─── Keyboards ───────────────────────────────────────────────────────────────

def _rating_keyboard(field: SurveyField, current: int = 0) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    for value, label in scales.options(field):
        mark = "• " if value == current else ""
        keyboard.add(InlineKeyboardButton(
            text=f"{mark}{value} · {label}",
            callback_data=CallbackData.create(Callbacks.RATING, field.value, value),
        ))
    keyboard.adjust(1)
    return keyboard.as_markup()


def _text_keyboard(field: SurveyField) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    for index, preset in enumerate(questions.get_question(field).presets):
        keyboard.add(InlineKeyboardButton(
            text=preset,
            callback_data=CallbackData.create(Callbacks.TEXT, field.value, index),
        ))
    keyboard.adjust(1)
    return keyboard.as_markup()


def _experience_keyboard(survey: SurveyState) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    for tag in ExperienceTag:
        selected = survey.is_experience_selected(tag)
        keyboard.add(InlineKeyboardButton(
            text=f"{'✅' if selected else '▫️'} {tag.value}",
            callback_data=CallbackData.create(Callbacks.EXPERIENCE, tag.name, 0 if selected else 1),
        ))
    keyboard.add(InlineKeyboardButton(text="Done ➡️", callback_data=Callbacks.EXPERIENCES_DONE))
    keyboard.adjust(1)
    return keyboard.as_markup()


def _submit_keyboard() -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(InlineKeyboardButton(text="📨 Submit", callback_data=Callbacks.SURVEY_SUBMIT))
    return keyboard.as_markup()


# ─── Texts ───────────────────────────────────────────────────────────────────

def _question_text(field: SurveyField) -> str:
    question = questions.get_question(field)
    lines = [
        hbold(question.section),
        hitalic(f"Question {question.number} of {TOTAL_QUESTIONS}"),
        html_decoration.quote(question.text),
    ]
    if field.is_text:
        lines.append("Pick an answer below or type your own.")
    return "\n\n".join(lines)


def _answer_display(survey: SurveyState, field: SurveyField) -> str:
    value = survey.get(field)
    if value is None:
        return "—"
    if field.is_text:
        return str(value)
    try:
        return scales.label_for(field, value)
    except UnknownRating:
        return f"{value} (out of range)"


def _summary_text(survey: SurveyState) -> str:
    lines = [hbold("Your answers")]
    section = None
    for field in questions.QUESTION_ORDER:
        question = questions.get_question(field)
        if question.section != section:
            section = question.section
            lines.append(f"\n{hitalic(section)}")
        lines.append(f"{html_decoration.quote(question.text)} {hbold(_answer_display(survey, field))}")

    experiences = ", ".join(tag.value for tag in survey.experiences) or "—"
    lines.append(f"\n{hitalic(questions.SECTION_EXPERIENCES)}\n{html_decoration.quote(experiences)}")

    missing = len(survey.missing_fields())
    if missing:
        lines.append(f"\n{missing} of {TOTAL_QUESTIONS} questions still unanswered. Send /survey to continue.")
    return "\n".join(lines)


# ─── Rendering ───────────────────────────────────────────────────────────────

async def _render(
    message: Message,
    text: str,
    reply_markup: Optional[InlineKeyboardMarkup] = None,
    *,
    prefer_edit: bool = False,
) -> None:
    """Edit the bot message in place when possible, otherwise send a new one."""
    if prefer_edit:
        try:
            await message.edit_text(text, reply_markup=reply_markup)
            return
        except TelegramBadRequest as exc:
            logger.debug("Falling back to a new message", error=str(exc))
    await message.answer(text, reply_markup=reply_markup)


async def show_next_step(
    message: Message,
    survey: SurveyState,
    state: FSMContext,
    *,
    prefer_edit: bool = False,
) -> None:
    """Ask the first unanswered question, then experiences, then offer submit."""
    missing = survey.missing_fields()
    if missing:
        field = missing[0]
        if field.is_text:
            await state.set_state(SurveyStates.answering_text)
            await state.update_data(field=field.value)
            reply_markup = _text_keyboard(field)
        else:
            await state.clear()
            reply_markup = _rating_keyboard(field, survey.rating(field))
        await _render(message, _question_text(field), reply_markup, prefer_edit=prefer_edit)
        return

    await state.clear()
    if not survey.experiences:
        await _render(
            message,
            f"{hbold(questions.SECTION_EXPERIENCES)}\n\n{questions.EXPERIENCES_PROMPT}",
            _experience_keyboard(survey),
            prefer_edit=prefer_edit,
        )
        return

    await _render(
        message,
        f"{_summary_text(survey)}\n\nAll set! Press Submit to get your sleep quality prediction.",
        _submit_keyboard(),
        prefer_edit=prefer_edit,
    )


# ─── Navigation ──────────────────────────────────────────────────────────────

@router.callback_query(F.data == Callbacks.SURVEY_START)
async def start_survey(callback: CallbackQuery, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Start or continue the questionnaire."""
    try:
        logger.info(
            "Survey started",
            chat_id=survey_session.chat_id,
            answered=survey_session.survey.answered_count,
        )
        await show_next_step(callback.message, survey_session.survey, state, prefer_edit=True)
        await callback.answer()
    except Exception as e:
        logger.error("Error starting survey", error=str(e), chat_id=survey_session.chat_id, exc_info=True)
        await callback.answer("An error occurred while starting the survey")


@router.message(Command("survey"))
async def continue_survey(message: Message, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Continue at the first unanswered question."""
    await show_next_step(message, survey_session.survey, state)


@router.message(Command("progress"))
async def show_progress(message: Message, survey_session: SurveySession, **kwargs):
    """Show the answers given so far."""
    await message.answer(_summary_text(survey_session.survey))


# ─── Answers ─────────────────────────────────────────────────────────────────

@router.callback_query(F.data.startswith(f"{Callbacks.RATING}:"))
async def handle_rating(callback: CallbackQuery, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Store a rating picked from the keyboard."""
    try:
        parsed = CallbackData.parse(callback.data)
        field = SurveyField.parse(parsed["subaction"] or "")
        value = int(parsed["value"] or "")
    except ValueError:
        logger.warning("Malformed rating callback", data=callback.data)
        await callback.answer("Invalid answer format")
        return

    try:
        survey_session.survey.set_rating(field, value)
        logger.info("Rating saved", chat_id=survey_session.chat_id, field=field.value, value=value)
        await show_next_step(callback.message, survey_session.survey, state, prefer_edit=True)
        await callback.answer()
    except Exception as e:
        logger.error("Error saving rating", error=str(e), chat_id=survey_session.chat_id, exc_info=True)
        await callback.answer("An error occurred while saving your answer")


@router.callback_query(F.data.startswith(f"{Callbacks.TEXT}:"))
async def handle_text_preset(callback: CallbackQuery, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Store a preset answer for a free-text question."""
    try:
        parsed = CallbackData.parse(callback.data)
        field = SurveyField.parse(parsed["subaction"] or "")
        answer = questions.preset_answer(field, int(parsed["value"] or ""))
    except ValueError:
        answer = None
    if answer is None:
        logger.warning("Malformed text callback", data=callback.data)
        await callback.answer("Invalid answer format")
        return

    try:
        survey_session.survey.set_text(field, answer)
        logger.info("Answer saved", chat_id=survey_session.chat_id, field=field.value, text=answer)
        await show_next_step(callback.message, survey_session.survey, state, prefer_edit=True)
        await callback.answer()
    except Exception as e:
        logger.error("Error saving answer", error=str(e), chat_id=survey_session.chat_id, exc_info=True)
        await callback.answer("An error occurred while saving your answer")


@router.message(SurveyStates.answering_text, F.text, ~F.text.startswith("/"))
async def handle_typed_answer(message: Message, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Store a typed answer for the open free-text question."""
    data = await state.get_data()
    try:
        field = SurveyField.parse(data.get("field", ""))
    except ValueError:
        await state.clear()
        await show_next_step(message, survey_session.survey, state)
        return

    answer = message.text.strip()
    if not answer:
        await message.answer("Please type an answer or pick one of the options.")
        return

    survey_session.survey.set_text(field, answer)
    logger.info("Typed answer saved", chat_id=survey_session.chat_id, field=field.value, text=answer[:100])
    await show_next_step(message, survey_session.survey, state)


# ─── Experiences ─────────────────────────────────────────────────────────────

@router.callback_query(F.data == Callbacks.EXPERIENCES_DONE)
async def handle_experiences_done(callback: CallbackQuery, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Leave the experiences checklist."""
    if not survey_session.survey.experiences:
        await callback.answer("Pick at least one option, or \"None\"")
        return
    await show_next_step(callback.message, survey_session.survey, state, prefer_edit=True)
    await callback.answer()


@router.callback_query(F.data.startswith(f"{Callbacks.EXPERIENCE}:"))
async def handle_experience_toggle(callback: CallbackQuery, survey_session: SurveySession, **kwargs):
    """Toggle an experience and redraw the checklist."""
    try:
        parsed = CallbackData.parse(callback.data)
        tag = ExperienceTag.parse(parsed["subaction"] or "")
        selected = parsed["value"] == "1"
    except ValueError:
        logger.warning("Malformed experience callback", data=callback.data)
        await callback.answer("Invalid answer format")
        return

    survey = survey_session.survey
    survey.toggle_experience(tag, selected)
    logger.info(
        "Experience toggled",
        chat_id=survey_session.chat_id,
        experience=tag.value,
        selected=selected,
        experiences=[e.value for e in survey.experiences],
    )
    try:
        await callback.message.edit_reply_markup(reply_markup=_experience_keyboard(survey))
    except TelegramBadRequest as exc:
        logger.debug("Checklist unchanged", error=str(exc))
    await callback.answer()


# ─── Submission ──────────────────────────────────────────────────────────────

async def _submit(message: Message, survey_session: SurveySession, callback: Optional[CallbackQuery] = None) -> None:
    presenter = TelegramPresenter(message, callback)
    try:
        await survey_session.controller.submit(presenter)
    except Exception as e:
        logger.error("Survey submission crashed", error=str(e), chat_id=survey_session.chat_id, exc_info=True)
        await presenter.notify("An error occurred while preparing your answers", "danger")
    if callback is not None and not presenter.answered:
        await callback.answer()


@router.callback_query(F.data == Callbacks.SURVEY_SUBMIT)
async def handle_submit(callback: CallbackQuery, survey_session: SurveySession, **kwargs):
    """Submit from the summary button."""
    await _submit(callback.message, survey_session, callback)


@router.message(Command("submit"))
async def handle_submit_command(message: Message, survey_session: SurveySession, **kwargs):
    """Submit with whatever has been answered so far."""
    await _submit(message, survey_session)


@router.callback_query(F.data.in_({Callbacks.RESULT_RESTART, Callbacks.RESULT_OK}))
async def handle_result_ack(callback: CallbackQuery, survey_session: SurveySession, state: FSMContext, **kwargs):
    """Handle the buttons shown with a prediction."""
    action = ResultAction.RESTART if callback.data == Callbacks.RESULT_RESTART else ResultAction.OK
    restarted = survey_session.controller.acknowledge(action)

    try:
        await callback.message.edit_reply_markup(reply_markup=None)
    except TelegramBadRequest as exc:
        logger.debug("Result buttons already removed", error=str(exc))

    if restarted:
        await callback.answer("Starting over")
        await show_next_step(callback.message, survey_session.survey, state)
    else:
        await callback.answer()


def register_handlers(dp):
    """Register survey handlers."""
    dp.include_router(router)
