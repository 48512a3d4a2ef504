"""Survey field identifiers and the experience catalog."""

from enum import Enum


class SurveyField(str, Enum):
    """The 19 answers collected by the questionnaire, in form order."""

    SLEEP_HOURS = "sleep_hours"
    INTEREST_RATE = "interest_rate"
    POSITION = "position"
    SCREEN_TIME = "screen_time"
    ACAD_PRESSURE = "acad_pressure"
    # Sleep quality symptoms
    DIFFICULTY_FALLING_ASLEEP = "difficulty_falling_asleep"
    WAKING_UP = "waking_up"
    DIFF_BACK_TO_SLEEP = "diff_back_to_sleep"
    TOSS_TURN = "toss_turn"
    UNREFRESHED = "unrefreshed"
    HEAD_ACHES = "head_aches"
    IRRITATED = "irritated"
    INTERVENES = "intervenes"
    GETTING_OUT_OF_BED = "getting_out_of_bed"
    CONCENTRATION = "concentration"
    # Sleep environment
    TEMP = "temp"
    VENTILATION = "ventilation"
    NOISE_LEVEL = "noise_level"
    LIGHTING = "lighting"

    @property
    def is_text(self) -> bool:
        return self in TEXT_FIELDS

    @property
    def is_rating(self) -> bool:
        return self not in TEXT_FIELDS

    @classmethod
    def parse(cls, raw: str) -> "SurveyField":
        """Resolve a wire key such as ``toss_turn`` to its field."""
        try:
            return cls(raw)
        except ValueError:
            raise ValueError(f"Unknown survey field: {raw}") from None


TEXT_FIELDS = frozenset({
    SurveyField.SLEEP_HOURS,
    SurveyField.POSITION,
    SurveyField.SCREEN_TIME,
    SurveyField.ACAD_PRESSURE,
})


class ExperienceTag(str, Enum):
    """Circumstances affecting sleep; NONE excludes every other tag."""

    SLEEP_DISORDER = "Sleep disorder"
    HEALTH_CONDITION = "Health condition"
    PART_TIME_JOB = "Part-time job"
    LIFESTYLE_HABITS = "Lifestyle habits"
    NONE = "None"

    @classmethod
    def parse(cls, raw: str) -> "ExperienceTag":
        """Accept either the member name or the display text."""
        if raw in cls.__members__:
            return cls[raw]
        try:
            return cls(raw)
        except ValueError:
            raise ValueError(f"Unknown experience: {raw}") from None
