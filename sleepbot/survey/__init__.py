"""Survey data model and payload transformation.

The questionnaire is held in a ``SurveyState``, resolved against the rating
scales and turned into the prediction payload by ``build_payload``.
"""

from .fields import ExperienceTag, SurveyField
from .scales import ScaleKind, label_for, scale_for
from .state import SurveyState
from .transformer import build_payload

__all__ = [
    "ExperienceTag",
    "SurveyField",
    "ScaleKind",
    "label_for",
    "scale_for",
    "SurveyState",
    "build_payload",
]
