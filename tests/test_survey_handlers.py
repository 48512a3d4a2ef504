"""Tests for the survey conversation handlers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from sleepbot.handlers import survey as handlers
from sleepbot.services.session_store import SurveySessionStore
from sleepbot.survey.fields import ExperienceTag, SurveyField
from sleepbot.utils.callbacks import Callbacks

CHAT_ID = 42


def _message(text=None):
    message = MagicMock()
    message.text = text
    message.answer = AsyncMock(return_value=MagicMock(delete=AsyncMock()))
    message.edit_text = AsyncMock()
    message.edit_reply_markup = AsyncMock()
    return message


def _callback(data):
    callback = MagicMock()
    callback.data = data
    callback.answer = AsyncMock()
    callback.message = _message()
    return callback


@pytest.fixture
def state():
    return FSMContext(storage=MemoryStorage(), key=StorageKey(bot_id=1, chat_id=CHAT_ID, user_id=CHAT_ID))


@pytest.fixture
def store(make_client):
    return SurveySessionStore(client_factory=make_client, preflight_check=False)


@pytest.fixture
def session(store):
    return store.get_or_create(CHAT_ID)


def test_store_reuses_session_per_chat(store):
    first = store.get_or_create(CHAT_ID)

    assert store.get_or_create(CHAT_ID) is first
    assert store.get_or_create(CHAT_ID + 1) is not first
    assert len(store) == 2


@pytest.mark.asyncio
async def test_first_step_asks_text_question(session, state):
    message = _message()

    await handlers.show_next_step(message, session.survey, state)

    assert await state.get_state() == handlers.SurveyStates.answering_text.state
    assert (await state.get_data())["field"] == SurveyField.SLEEP_HOURS.value
    text = message.answer.await_args.args[0]
    assert "How many hours do you usually sleep" in text


@pytest.mark.asyncio
async def test_typed_answer_is_stored_and_next_question_asked(session, state):
    await handlers.show_next_step(_message(), session.survey, state)
    message = _message("  about 6 hours ")

    await handlers.handle_typed_answer(message, session, state)

    assert session.survey.get(SurveyField.SLEEP_HOURS) == "about 6 hours"
    assert await state.get_state() is None
    assert "How interested are you" in message.answer.await_args.args[0]


@pytest.mark.asyncio
async def test_text_preset_button(session, state):
    callback = _callback(f"{Callbacks.TEXT}:position:1")

    await handlers.handle_text_preset(callback, session, state)

    assert session.survey.get(SurveyField.POSITION) == "Side"
    callback.message.edit_text.assert_awaited_once()
    callback.answer.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_rating_button_stores_value(session, state):
    callback = _callback(f"{Callbacks.RATING}:toss_turn:3")

    await handlers.handle_rating(callback, session, state)

    assert session.survey.get(SurveyField.TOSS_TURN) == 3
    callback.message.edit_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_malformed_rating_is_rejected(session, state):
    callback = _callback(f"{Callbacks.RATING}:bedtime:3")

    await handlers.handle_rating(callback, session, state)

    callback.answer.assert_awaited_once_with("Invalid answer format")
    assert session.survey.answered_count == 0


@pytest.mark.asyncio
async def test_experience_toggles_follow_none_rule(session):
    await handlers.handle_experience_toggle(_callback("exp:LIFESTYLE_HABITS:1"), session)
    await handlers.handle_experience_toggle(_callback("exp:NONE:1"), session)
    assert session.survey.experiences == (ExperienceTag.NONE,)

    callback = _callback("exp:NONE:0")
    await handlers.handle_experience_toggle(callback, session)

    assert session.survey.experiences == ()
    callback.message.edit_reply_markup.assert_awaited_once()


@pytest.mark.asyncio
async def test_experiences_done_requires_a_selection(session, state):
    callback = _callback(Callbacks.EXPERIENCES_DONE)

    await handlers.handle_experiences_done(callback, session, state)

    callback.message.edit_text.assert_not_awaited()
    assert "at least one" in callback.answer.await_args.args[0]


@pytest.mark.asyncio
async def test_submit_incomplete_survey_shows_toast(session):
    callback = _callback(Callbacks.SURVEY_SUBMIT)

    await handlers.handle_submit(callback, session)

    callback.answer.assert_awaited_once()
    assert "Please fill in all fields" in callback.answer.await_args.args[0]
    assert session.controller.client.sent == []


@pytest.mark.asyncio
async def test_submit_and_restart(session, state, fill_survey):
    fill_survey(session.survey)
    callback = _callback(Callbacks.SURVEY_SUBMIT)

    await handlers.handle_submit(callback, session)

    result_text = callback.message.answer.await_args_list[-1].args[0]
    assert "Good Sleep Quality" in result_text
    assert len(session.controller.client.sent) == 1

    restart = _callback(Callbacks.RESULT_RESTART)
    await handlers.handle_result_ack(restart, session, state)

    assert session.survey.answered_count == 0
    restart.answer.assert_awaited_once_with("Starting over")
    restart.message.edit_reply_markup.assert_awaited_once_with(reply_markup=None)


@pytest.mark.asyncio
async def test_submit_command_with_unknown_rating_reports_error(session, fill_survey):
    fill_survey(session.survey)
    session.survey.set_rating(SurveyField.TEMP, 9)
    message = _message("/submit")

    await handlers.handle_submit_command(message, session)

    texts = [call.args[0] for call in message.answer.await_args_list]
    assert any("An error occurred" in text for text in texts)
    assert session.survey.get(SurveyField.TEMP) == 9


def test_summary_lists_answers(session, fill_survey):
    fill_survey(session.survey)

    summary = handlers._summary_text(session.survey)

    assert "7-8 hours" in summary
    assert "Sometimes" in summary
    assert "still unanswered" not in summary


def test_store_evicts_least_recently_used_session(make_client):
    store = SurveySessionStore(client_factory=make_client, preflight_check=False, max_sessions=2)
    store.get_or_create(1)
    store.get_or_create(2)
    store.get_or_create(1)

    store.get_or_create(3)

    assert len(store) == 2
    assert 1 in store
    assert 2 not in store
    assert 3 in store


def test_store_keeps_session_that_is_submitting(make_client):
    store = SurveySessionStore(client_factory=make_client, preflight_check=False, max_sessions=1)
    busy = store.get_or_create(1)
    busy.controller._cycle_active = True

    store.get_or_create(2)

    assert store.get_or_create(1) is busy
    assert len(store) == 2
