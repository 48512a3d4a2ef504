"""Shared fixtures: survey builders, fake presenter and fake prediction client."""

import asyncio
from contextlib import asynccontextmanager

import pytest

from sleepbot.errors import PredictionError
from sleepbot.services.prediction_client import PredictionResponse
from sleepbot.survey.fields import ExperienceTag, SurveyField
from sleepbot.survey.state import SurveyState

TEXT_ANSWERS = {
    SurveyField.SLEEP_HOURS: "7-8 hours",
    SurveyField.POSITION: "Side",
    SurveyField.SCREEN_TIME: "1-2 hours",
    SurveyField.ACAD_PRESSURE: "High",
}


def _fill(state: SurveyState, experiences=(ExperienceTag.NONE,), rating: int = 2) -> SurveyState:
    for field in SurveyField:
        if field.is_text:
            state.set_text(field, TEXT_ANSWERS[field])
        else:
            state.set_rating(field, rating)
    for tag in experiences:
        state.toggle_experience(tag, True)
    return state


@pytest.fixture
def fill_survey():
    """Return a helper answering every question of a SurveyState."""
    return _fill


@pytest.fixture
def survey():
    return SurveyState()


@pytest.fixture
def filled_survey():
    return _fill(SurveyState())


class FakePresenter:
    """Records rendered outcomes and progress enter/exit counts."""

    def __init__(self):
        self.outcomes = []
        self.progress_messages = []
        self.progress_closed = 0

    @asynccontextmanager
    async def progress(self, message):
        self.progress_messages.append(message)
        try:
            yield
        finally:
            self.progress_closed += 1

    async def render(self, outcome):
        self.outcomes.append(outcome)


class FakePredictionClient:
    """Prediction client returning a canned answer or raising a canned error."""

    def __init__(self, prediction="Good Sleep Quality", error: PredictionError = None, health_error=None):
        self.prediction = prediction
        self.error = error
        self.health_error = health_error
        self.sent = []
        self.health_checks = 0
        self.release = None

    async def send(self, payload):
        self.sent.append(payload)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return PredictionResponse(prediction=self.prediction)

    async def check_health(self):
        self.health_checks += 1
        if self.health_error is not None:
            raise self.health_error

    def hold(self):
        """Block ``send`` until the returned event is set."""
        self.release = asyncio.Event()
        return self.release


@pytest.fixture
def presenter():
    return FakePresenter()


@pytest.fixture
def prediction_client():
    return FakePredictionClient()


@pytest.fixture
def make_client():
    """Factory for prediction clients with custom canned behaviour."""
    return FakePredictionClient
