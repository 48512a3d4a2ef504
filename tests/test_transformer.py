"""Tests for building the prediction payload."""

import json

import pytest

from sleepbot.errors import UnknownRating
from sleepbot.survey.fields import ExperienceTag, SurveyField
from sleepbot.survey.state import SurveyState
from sleepbot.survey.transformer import build_payload, encode_payload


def test_payload_labels_ratings_and_passes_text(filled_survey):
    filled_survey.set_rating(SurveyField.INTEREST_RATE, 4)
    filled_survey.set_rating(SurveyField.TEMP, 5)
    filled_survey.set_rating(SurveyField.TOSS_TURN, 3)

    payload = build_payload(filled_survey)

    assert payload["sleep_hours"] == "7-8 hours"
    assert payload["position"] == "Side"
    assert payload["interest_rate"] == "Very Interested"
    assert payload["temp"] == "Excellent"
    assert payload["ventilation"] == "Poor"
    assert payload["toss_turn"] == "Often"
    assert payload["concentration"] == "Sometimes"


def test_payload_has_every_field_then_experiences(filled_survey):
    payload = build_payload(filled_survey)

    assert list(payload) == [field.value for field in SurveyField] + ["experiences"]


def test_payload_with_none_experience(filled_survey):
    assert filled_survey.is_valid() is True

    payload = build_payload(filled_survey)

    assert payload["experiences"] == "None"


def test_experiences_joined_in_selection_order(fill_survey):
    survey = fill_survey(
        SurveyState(),
        experiences=(ExperienceTag.PART_TIME_JOB, ExperienceTag.SLEEP_DISORDER),
    )

    assert build_payload(survey)["experiences"] == "Part-time job, Sleep disorder"


def test_payload_is_deterministic(filled_survey):
    first = encode_payload(build_payload(filled_survey))
    second = encode_payload(build_payload(filled_survey))

    assert first == second
    assert json.loads(first)["experiences"] == "None"


def test_out_of_range_rating_raises(filled_survey):
    filled_survey.set_rating(SurveyField.LIGHTING, 6)

    with pytest.raises(UnknownRating) as exc_info:
        build_payload(filled_survey)

    assert exc_info.value.field == "lighting"


def test_unset_rating_raises():
    with pytest.raises(UnknownRating):
        build_payload(SurveyState())


def test_build_payload_does_not_mutate_survey(filled_survey):
    before = {field: filled_survey.get(field) for field in SurveyField}

    build_payload(filled_survey)

    assert {field: filled_survey.get(field) for field in SurveyField} == before
    assert filled_survey.experiences == (ExperienceTag.NONE,)
