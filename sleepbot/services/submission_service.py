"""Submit cycle: validate, transform, send and report the outcome."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncContextManager, Optional, Protocol, Tuple

import structlog

from sleepbot.errors import PredictionError, UnknownRating
from sleepbot.metrics import PREDICTION_LATENCY, SURVEY_SUBMISSIONS
from sleepbot.services.prediction_client import PredictionClient
from sleepbot.survey.fields import SurveyField
from sleepbot.survey.state import SurveyState
from sleepbot.survey.transformer import build_payload

PROGRESS_MESSAGE = "Sending…"


class SubmissionState(str, Enum):
    """Controller lifecycle."""

    IDLE = "idle"
    VALIDATING = "validating"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class OutcomeKind(str, Enum):
    INCOMPLETE_FORM = "incomplete_form"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED = "rejected"


class ResultAction(str, Enum):
    """Buttons offered with a prediction result."""

    RESTART = "restart"
    OK = "ok"


@dataclass(frozen=True)
class SubmissionOutcome:
    """What a submit cycle ended with, for the presentation layer to render."""

    kind: OutcomeKind
    label: Optional[str] = None
    error: Optional[PredictionError] = None
    missing: Tuple[SurveyField, ...] = field(default_factory=tuple)

    @classmethod
    def incomplete(cls, missing) -> "SubmissionOutcome":
        return cls(OutcomeKind.INCOMPLETE_FORM, missing=tuple(missing))

    @classmethod
    def succeeded(cls, label: str) -> "SubmissionOutcome":
        return cls(OutcomeKind.SUCCEEDED, label=label)

    @classmethod
    def failed(cls, error: PredictionError) -> "SubmissionOutcome":
        return cls(OutcomeKind.FAILED, error=error)

    @classmethod
    def rejected(cls) -> "SubmissionOutcome":
        return cls(OutcomeKind.REJECTED)


class SubmissionPresenter(Protocol):
    """Renders submit outcomes; supplied by the interaction layer."""

    def progress(self, message: str) -> AsyncContextManager[None]:
        ...

    async def render(self, outcome: SubmissionOutcome) -> None:
        ...


class SubmissionController:
    """Runs one submit cycle at a time for a single survey."""

    def __init__(
        self,
        survey: SurveyState,
        client: PredictionClient,
        preflight_check: bool = False,
    ):
        self.survey = survey
        self.client = client
        self.preflight_check = preflight_check
        self.state = SubmissionState.IDLE
        self._awaiting_ack = False
        self._cycle_active = False
        self.logger = structlog.get_logger(__name__)

    @property
    def is_busy(self) -> bool:
        """True from validation until the outcome has been rendered."""
        return self._cycle_active

    async def submit(self, presenter: SubmissionPresenter) -> SubmissionOutcome:
        """Validate the survey, send it and hand the outcome to the presenter.

        Network failures are converted into a FAILED outcome. UnknownRating is
        logged and re-raised after the controller is back to IDLE. The survey
        is never reset here; see ``acknowledge``.
        """
        if self.is_busy:
            self.logger.warning("Submit rejected, cycle already running", state=self.state.value)
            outcome = SubmissionOutcome.rejected()
            SURVEY_SUBMISSIONS.labels(outcome=outcome.kind.value).inc()
            await presenter.render(outcome)
            return outcome

        self._cycle_active = True
        try:
            return await self._run_cycle(presenter)
        finally:
            self.state = SubmissionState.IDLE
            self._cycle_active = False

    async def _run_cycle(self, presenter: SubmissionPresenter) -> SubmissionOutcome:
        self.state = SubmissionState.VALIDATING
        if not self.survey.is_valid():
            missing = self.survey.missing_fields()
            self.state = SubmissionState.IDLE
            self.logger.info(
                "Survey incomplete",
                missing=[f.value for f in missing],
                experiences=len(self.survey.experiences),
            )
            outcome = SubmissionOutcome.incomplete(missing)
            SURVEY_SUBMISSIONS.labels(outcome=outcome.kind.value).inc()
            await presenter.render(outcome)
            return outcome

        self.state = SubmissionState.SENDING
        self._awaiting_ack = False
        try:
            async with presenter.progress(PROGRESS_MESSAGE):
                payload = build_payload(self.survey)
                if self.preflight_check:
                    await self.client.check_health()
                started = time.perf_counter()
                try:
                    response = await self.client.send(payload)
                finally:
                    PREDICTION_LATENCY.observe(time.perf_counter() - started)
        except PredictionError as exc:
            self.state = SubmissionState.FAILED
            self.logger.warning("Survey submission failed", kind=exc.kind, error=str(exc))
            outcome = SubmissionOutcome.failed(exc)
        except UnknownRating as exc:
            SURVEY_SUBMISSIONS.labels(outcome="unknown_rating").inc()
            self.logger.error(
                "Survey holds a rating outside its scale",
                field=exc.field,
                value=exc.value,
            )
            raise
        else:
            self.state = SubmissionState.SUCCEEDED
            self._awaiting_ack = True
            self.logger.info("Prediction received", prediction=response.prediction)
            outcome = SubmissionOutcome.succeeded(response.prediction)

        SURVEY_SUBMISSIONS.labels(outcome=outcome.kind.value).inc()
        await presenter.render(outcome)
        return outcome

    def acknowledge(self, action: ResultAction) -> bool:
        """Handle the user's answer to a result; restart wipes the survey.

        Returns True when the survey was reset.
        """
        if not self._awaiting_ack:
            self.logger.debug("Ignoring acknowledgment without a pending result", action=action.value)
            return False

        self._awaiting_ack = False
        if action is ResultAction.RESTART:
            self.survey.reset()
            self.logger.info("Survey restarted after result")
            return True
        return False
