"""Rating scales and the field to scale assignment."""

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Tuple

from sleepbot.errors import UnknownRating
from sleepbot.survey.fields import SurveyField


class ScaleKind(str, Enum):
    """Rating families used by the questionnaire."""

    INTEREST = "interest"
    FREQUENCY = "frequency"
    ENVIRONMENTAL = "environmental"
    FREEFORM = "freeform"


INTEREST_LABELS: Mapping[int, str] = MappingProxyType({
    1: "Not Interested",
    2: "Neutral",
    3: "Interested",
    4: "Very Interested",
})

FREQUENCY_LABELS: Mapping[int, str] = MappingProxyType({
    1: "Rarely",
    2: "Sometimes",
    3: "Often",
    4: "Almost Always",
})

ENVIRONMENTAL_LABELS: Mapping[int, str] = MappingProxyType({
    1: "Very Poor",
    2: "Poor",
    3: "Average",
    4: "Good",
    5: "Excellent",
})

SCALE_TABLES: Mapping[ScaleKind, Mapping[int, str]] = MappingProxyType({
    ScaleKind.INTEREST: INTEREST_LABELS,
    ScaleKind.FREQUENCY: FREQUENCY_LABELS,
    ScaleKind.ENVIRONMENTAL: ENVIRONMENTAL_LABELS,
})

FIELD_SCALES: Mapping[SurveyField, ScaleKind] = MappingProxyType({
    SurveyField.SLEEP_HOURS: ScaleKind.FREEFORM,
    SurveyField.INTEREST_RATE: ScaleKind.INTEREST,
    SurveyField.POSITION: ScaleKind.FREEFORM,
    SurveyField.SCREEN_TIME: ScaleKind.FREEFORM,
    SurveyField.ACAD_PRESSURE: ScaleKind.FREEFORM,
    SurveyField.DIFFICULTY_FALLING_ASLEEP: ScaleKind.FREQUENCY,
    SurveyField.WAKING_UP: ScaleKind.FREQUENCY,
    SurveyField.DIFF_BACK_TO_SLEEP: ScaleKind.FREQUENCY,
    SurveyField.TOSS_TURN: ScaleKind.FREQUENCY,
    SurveyField.UNREFRESHED: ScaleKind.FREQUENCY,
    SurveyField.HEAD_ACHES: ScaleKind.FREQUENCY,
    SurveyField.IRRITATED: ScaleKind.FREQUENCY,
    SurveyField.INTERVENES: ScaleKind.FREQUENCY,
    SurveyField.GETTING_OUT_OF_BED: ScaleKind.FREQUENCY,
    SurveyField.CONCENTRATION: ScaleKind.FREQUENCY,
    SurveyField.TEMP: ScaleKind.ENVIRONMENTAL,
    SurveyField.VENTILATION: ScaleKind.ENVIRONMENTAL,
    SurveyField.NOISE_LEVEL: ScaleKind.ENVIRONMENTAL,
    SurveyField.LIGHTING: ScaleKind.ENVIRONMENTAL,
})


def scale_for(field: SurveyField) -> ScaleKind:
    """Return the scale kind a field is rated on."""
    return FIELD_SCALES[field]


def _name(field) -> str:
    return getattr(field, "value", str(field))


def _table_for(field: SurveyField) -> Mapping[int, str]:
    table = SCALE_TABLES.get(FIELD_SCALES.get(field))
    if table is None:
        raise UnknownRating(_name(field), None)
    return table


def label_for(field: SurveyField, value: int) -> str:
    """Return the label for ``value`` on the field's scale.

    Raises UnknownRating when the value is outside 1..N, is not an integer,
    or the field has no rating scale.
    """
    table = _table_for(field)
    # bool is an int subclass; True must not resolve to level 1
    if isinstance(value, bool) or not isinstance(value, int) or value not in table:
        raise UnknownRating(_name(field), value)
    return table[value]


def value_for(field: SurveyField, label: str) -> int:
    """Reverse lookup: the numeric level of ``label`` on the field's scale."""
    for value, candidate in _table_for(field).items():
        if candidate == label:
            return value
    raise UnknownRating(_name(field), label)


def options(field: SurveyField) -> List[Tuple[int, str]]:
    """Ordered ``(value, label)`` pairs for building rating choices."""
    return sorted(_table_for(field).items())


def size(field: SurveyField) -> int:
    """Number of levels on the field's scale."""
    return len(_table_for(field))
