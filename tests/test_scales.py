"""Tests for rating scales and label lookup."""

import pytest

from sleepbot.errors import UnknownRating
from sleepbot.survey import scales
from sleepbot.survey.fields import SurveyField
from sleepbot.survey.scales import ScaleKind


FREQUENCY_FIELDS = [
    SurveyField.DIFFICULTY_FALLING_ASLEEP,
    SurveyField.WAKING_UP,
    SurveyField.DIFF_BACK_TO_SLEEP,
    SurveyField.TOSS_TURN,
    SurveyField.UNREFRESHED,
    SurveyField.HEAD_ACHES,
    SurveyField.IRRITATED,
    SurveyField.INTERVENES,
    SurveyField.GETTING_OUT_OF_BED,
    SurveyField.CONCENTRATION,
]

ENVIRONMENTAL_FIELDS = [
    SurveyField.TEMP,
    SurveyField.VENTILATION,
    SurveyField.NOISE_LEVEL,
    SurveyField.LIGHTING,
]


def test_field_families_have_expected_sizes():
    kinds = [scales.scale_for(field) for field in SurveyField]

    assert kinds.count(ScaleKind.INTEREST) == 1
    assert kinds.count(ScaleKind.FREQUENCY) == 10
    assert kinds.count(ScaleKind.ENVIRONMENTAL) == 4
    assert kinds.count(ScaleKind.FREEFORM) == 4
    assert [f for f in SurveyField if scales.scale_for(f) is ScaleKind.FREQUENCY] == FREQUENCY_FIELDS
    assert [f for f in SurveyField if scales.scale_for(f) is ScaleKind.ENVIRONMENTAL] == ENVIRONMENTAL_FIELDS


@pytest.mark.parametrize(
    "field,value,expected",
    [
        (SurveyField.INTEREST_RATE, 1, "Not Interested"),
        (SurveyField.INTEREST_RATE, 4, "Very Interested"),
        (SurveyField.TOSS_TURN, 2, "Sometimes"),
        (SurveyField.CONCENTRATION, 4, "Almost Always"),
        (SurveyField.TEMP, 1, "Very Poor"),
        (SurveyField.LIGHTING, 5, "Excellent"),
        (SurveyField.NOISE_LEVEL, 3, "Average"),
    ],
)
def test_label_for_in_range(field, value, expected):
    assert scales.label_for(field, value) == expected


@pytest.mark.parametrize(
    "field,value",
    [
        (SurveyField.INTEREST_RATE, 0),
        (SurveyField.INTEREST_RATE, 5),
        (SurveyField.WAKING_UP, 5),
        (SurveyField.WAKING_UP, -1),
        (SurveyField.VENTILATION, 6),
        (SurveyField.VENTILATION, None),
        (SurveyField.TEMP, "3"),
        (SurveyField.TEMP, True),
    ],
)
def test_label_for_out_of_range_raises(field, value):
    with pytest.raises(UnknownRating) as exc_info:
        scales.label_for(field, value)

    assert exc_info.value.field == field.value
    assert exc_info.value.value == value


def test_label_for_freeform_field_raises():
    with pytest.raises(UnknownRating):
        scales.label_for(SurveyField.SLEEP_HOURS, 1)


def test_value_for_is_reverse_of_label_for():
    for value, label in scales.options(SurveyField.VENTILATION):
        assert scales.value_for(SurveyField.VENTILATION, label) == value

    with pytest.raises(UnknownRating):
        scales.value_for(SurveyField.VENTILATION, "Rarely")


def test_options_and_size():
    assert scales.options(SurveyField.INTEREST_RATE) == [
        (1, "Not Interested"),
        (2, "Neutral"),
        (3, "Interested"),
        (4, "Very Interested"),
    ]
    assert scales.size(SurveyField.TOSS_TURN) == 4
    assert scales.size(SurveyField.LIGHTING) == 5


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        scales.FREQUENCY_LABELS[5] = "Never"
