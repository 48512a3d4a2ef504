"""In-memory survey sessions, one per chat."""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from sleepbot.config import settings
from sleepbot.services.prediction_client import HttpPredictionClient, PredictionClient
from sleepbot.services.submission_service import SubmissionController
from sleepbot.survey.state import SurveyState

logger = structlog.get_logger(__name__)


@dataclass
class SurveySession:
    """Survey answers and the controller that submits them."""

    chat_id: int
    survey: SurveyState
    controller: SubmissionController


class SurveySessionStore:
    """Keeps survey sessions in process memory, least recently used first.

    At most ``max_sessions`` sessions are kept. Creating one more evicts the
    least recently used session whose controller is not mid-submit; its
    answers are lost.
    """

    def __init__(
        self,
        client_factory: Optional[Callable[[], PredictionClient]] = None,
        preflight_check: Optional[bool] = None,
        max_sessions: Optional[int] = None,
    ):
        self._sessions: "OrderedDict[int, SurveySession]" = OrderedDict()
        self._client_factory = client_factory or HttpPredictionClient
        self._client: Optional[PredictionClient] = None
        self.preflight_check = (
            settings.prediction_healthcheck_enabled if preflight_check is None else preflight_check
        )
        self.max_sessions = settings.survey_max_sessions if max_sessions is None else max_sessions

    @property
    def client(self) -> PredictionClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def get_or_create(self, chat_id: int) -> SurveySession:
        """Return the chat's session, starting an empty one on first use."""
        session = self._sessions.get(chat_id)
        if session is not None:
            self._sessions.move_to_end(chat_id)
            return session

        self._evict()
        survey = SurveyState()
        session = SurveySession(
            chat_id=chat_id,
            survey=survey,
            controller=SubmissionController(survey, self.client, preflight_check=self.preflight_check),
        )
        self._sessions[chat_id] = session
        logger.info("Survey session created", chat_id=chat_id, sessions=len(self._sessions))
        return session

    def _evict(self) -> None:
        while len(self._sessions) >= self.max_sessions:
            idle = next(
                (chat_id for chat_id, s in self._sessions.items() if not s.controller.is_busy),
                None,
            )
            if idle is None:
                logger.warning("Session limit reached with every session busy", limit=self.max_sessions)
                return
            del self._sessions[idle]
            logger.info("Survey session evicted", chat_id=idle)

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


survey_sessions = SurveySessionStore()
