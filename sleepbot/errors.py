"""Domain errors raised by the survey pipeline and the prediction client."""

from typing import Optional, Sequence


class SurveyError(Exception):
    """Base class for survey errors."""

    user_message = "Something went wrong. Please try again."


class IncompleteForm(SurveyError):
    """Raised when a survey is submitted before every answer is given."""

    user_message = "Please fill in all fields"

    def __init__(self, missing: Sequence[str] = ()):
        self.missing = tuple(missing)
        super().__init__(f"Survey is incomplete, missing: {', '.join(self.missing) or 'experiences'}")


class UnknownRating(SurveyError):
    """Raised when a rating cannot be resolved to a label on its scale."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"No label for value {value!r} on field {field!r}")


class PredictionError(SurveyError):
    """Base class for failures talking to the prediction service."""

    kind = "prediction_error"
    user_message = "Error sending data"


class ConnectivityFailure(PredictionError):
    """The prediction service could not be reached."""

    kind = "connectivity"
    user_message = "Cannot reach the server. Check your connection and try again."


class ServerError(PredictionError):
    """The prediction service answered with a non-2xx status."""

    kind = "server_error"

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Prediction service returned HTTP {status_code}: {detail or 'no detail'}")

    @property
    def user_message(self) -> str:
        if self.status_code == 400:
            return "The server rejected the answers as invalid data."
        if self.status_code >= 500:
            return "Server error. Please try again later."
        return "Error sending data"


class MalformedResponse(PredictionError):
    """The prediction service answered without a usable prediction."""

    kind = "malformed_response"
    user_message = "Unexpected response from the server."
