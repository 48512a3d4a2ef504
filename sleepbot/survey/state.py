"""In-progress survey answers and the experience selection."""

from typing import Dict, List, Optional, Tuple, Union

import structlog

from sleepbot.survey.fields import ExperienceTag, SurveyField

Answer = Union[int, str]

logger = structlog.get_logger(__name__)


class SurveyState:
    """Holds the answers for one questionnaire session."""

    def __init__(self) -> None:
        self._answers: Dict[SurveyField, Answer] = {}
        self._experiences: List[ExperienceTag] = []

    # ─── Answers ────────────────────────────────────────────────────────────

    def set_rating(self, field: SurveyField, value: int) -> None:
        """Store a raw rating. Range checks happen when the label is resolved."""
        if not field.is_rating:
            raise ValueError(f"{field.value} is a text field")
        self._answers[field] = value

    def set_text(self, field: SurveyField, value: str) -> None:
        """Store a free-text answer; a blank answer clears the field."""
        if not field.is_text:
            raise ValueError(f"{field.value} is a rating field")
        value = (value or "").strip()
        if value:
            self._answers[field] = value
        else:
            self._answers.pop(field, None)

    def get(self, field: SurveyField) -> Optional[Answer]:
        return self._answers.get(field)

    def rating(self, field: SurveyField) -> int:
        """Current rating for a field, 0 while unanswered."""
        value = self._answers.get(field)
        return value if isinstance(value, int) else 0

    # ─── Experiences ────────────────────────────────────────────────────────

    def toggle_experience(self, tag: ExperienceTag, selected: bool) -> None:
        """Select or deselect an experience, keeping NONE exclusive."""
        if selected and tag is ExperienceTag.NONE:
            self._experiences = [ExperienceTag.NONE]
        elif selected:
            self._experiences = [e for e in self._experiences if e is not ExperienceTag.NONE]
            if tag not in self._experiences:
                self._experiences.append(tag)
        elif tag in self._experiences:
            self._experiences.remove(tag)

    def is_experience_selected(self, tag: ExperienceTag) -> bool:
        return tag in self._experiences

    @property
    def experiences(self) -> Tuple[ExperienceTag, ...]:
        """Selected tags in the order they were picked."""
        return tuple(self._experiences)

    # ─── Validation ─────────────────────────────────────────────────────────

    def missing_fields(self) -> List[SurveyField]:
        """Unanswered fields in form order."""
        return [field for field in SurveyField if self._is_unset(self._answers.get(field))]

    @property
    def answered_count(self) -> int:
        return len(SurveyField) - len(self.missing_fields())

    def is_valid(self) -> bool:
        """True when every field is answered and at least one experience is picked."""
        return not self.missing_fields() and bool(self._experiences)

    def reset(self) -> None:
        """Forget every answer and experience."""
        self._answers = {}
        self._experiences = []
        logger.debug("Survey state reset")

    @staticmethod
    def _is_unset(value: Optional[Answer]) -> bool:
        return value is None or value == ""
