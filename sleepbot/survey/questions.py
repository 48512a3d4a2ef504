"""Questionnaire content: sections, prompts and preset answers."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sleepbot.survey.fields import SurveyField

SECTION_HABITS = "Sleep habits"
SECTION_QUALITY = "Sleep quality"
SECTION_ENVIRONMENT = "Sleep environment"
SECTION_EXPERIENCES = "Experiences"


@dataclass(frozen=True)
class Question:
    """A single questionnaire prompt."""

    field: SurveyField
    section: str
    text: str
    presets: Tuple[str, ...] = ()

    @property
    def number(self) -> int:
        return QUESTION_ORDER.index(self.field) + 1


QUESTIONS: Dict[SurveyField, Question] = {
    q.field: q
    for q in [
        Question(
            SurveyField.SLEEP_HOURS,
            SECTION_HABITS,
            "How many hours do you usually sleep per night?",
            ("Less than 5 hours", "5-6 hours", "7-8 hours", "More than 8 hours"),
        ),
        Question(
            SurveyField.INTEREST_RATE,
            SECTION_HABITS,
            "How interested are you in improving your sleep?",
        ),
        Question(
            SurveyField.POSITION,
            SECTION_HABITS,
            "What position do you usually sleep in?",
            ("Back", "Side", "Stomach", "It varies"),
        ),
        Question(
            SurveyField.SCREEN_TIME,
            SECTION_HABITS,
            "How much screen time do you have before bed?",
            ("Less than 30 minutes", "30-60 minutes", "1-2 hours", "More than 2 hours"),
        ),
        Question(
            SurveyField.ACAD_PRESSURE,
            SECTION_HABITS,
            "How much academic pressure do you feel?",
            ("Low", "Moderate", "High", "Very high"),
        ),
        Question(
            SurveyField.DIFFICULTY_FALLING_ASLEEP,
            SECTION_QUALITY,
            "How often do you have difficulty falling asleep?",
        ),
        Question(
            SurveyField.WAKING_UP,
            SECTION_QUALITY,
            "How often do you wake up during the night?",
        ),
        Question(
            SurveyField.DIFF_BACK_TO_SLEEP,
            SECTION_QUALITY,
            "How often is it hard to get back to sleep after waking up?",
        ),
        Question(
            SurveyField.TOSS_TURN,
            SECTION_QUALITY,
            "How often do you toss and turn in bed?",
        ),
        Question(
            SurveyField.UNREFRESHED,
            SECTION_QUALITY,
            "How often do you wake up feeling unrefreshed?",
        ),
        Question(
            SurveyField.HEAD_ACHES,
            SECTION_QUALITY,
            "How often do you wake up with a headache?",
        ),
        Question(
            SurveyField.IRRITATED,
            SECTION_QUALITY,
            "How often do you feel irritable because of poor sleep?",
        ),
        Question(
            SurveyField.INTERVENES,
            SECTION_QUALITY,
            "How often does poor sleep interfere with your daily activities?",
        ),
        Question(
            SurveyField.GETTING_OUT_OF_BED,
            SECTION_QUALITY,
            "How often do you struggle to get out of bed in the morning?",
        ),
        Question(
            SurveyField.CONCENTRATION,
            SECTION_QUALITY,
            "How often do you have trouble concentrating during the day?",
        ),
        Question(
            SurveyField.TEMP,
            SECTION_ENVIRONMENT,
            "How would you rate the temperature of your bedroom?",
        ),
        Question(
            SurveyField.VENTILATION,
            SECTION_ENVIRONMENT,
            "How would you rate the ventilation of your bedroom?",
        ),
        Question(
            SurveyField.NOISE_LEVEL,
            SECTION_ENVIRONMENT,
            "How would you rate the noise level at night?",
        ),
        Question(
            SurveyField.LIGHTING,
            SECTION_ENVIRONMENT,
            "How would you rate the lighting when you sleep?",
        ),
    ]
}

QUESTION_ORDER: List[SurveyField] = list(SurveyField)

EXPERIENCES_PROMPT = (
    "Which of these affect your sleep? Pick all that apply, "
    "or \"None\" if nothing does."
)


def get_question(survey_field: SurveyField) -> Question:
    return QUESTIONS[survey_field]


def preset_answer(survey_field: SurveyField, index: int) -> Optional[str]:
    """Preset answer by position, or None when the index is out of range."""
    presets = QUESTIONS[survey_field].presets
    if 0 <= index < len(presets):
        return presets[index]
    return None
