"""Convert a completed survey into the prediction service payload."""

import json
from typing import Any, Dict

from sleepbot.survey import scales
from sleepbot.survey.fields import SurveyField
from sleepbot.survey.state import SurveyState

EXPERIENCE_SEPARATOR = ", "


def build_payload(state: SurveyState) -> Dict[str, Any]:
    """Build the labeled payload for a valid survey.

    Ratings become their scale labels, free-text answers pass through and the
    experiences are joined in the order they were picked. The survey is not
    re-validated: an unset or out-of-range rating raises UnknownRating.
    """
    payload: Dict[str, Any] = {}
    for field in SurveyField:
        value = state.get(field)
        if field.is_text:
            payload[field.value] = value
        else:
            payload[field.value] = scales.label_for(field, value)

    payload["experiences"] = EXPERIENCE_SEPARATOR.join(tag.value for tag in state.experiences)
    return payload


def encode_payload(payload: Dict[str, Any]) -> bytes:
    """Serialize a payload to the JSON request body."""
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")
