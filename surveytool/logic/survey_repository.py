"""Repository contract consumed by the submission engine.

Implementations: `SqlSurveyRepository` (repository_responses.py) for the
service and `InMemorySurveyRepository` (inmemory_state.py) for tests and
local experiments.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

from surveytool.models.answers import StoredResponse
from surveytool.models.graph import SurveyGraph


class SurveyRepository(Protocol):
    def fetch_graph(self, survey_id: int) -> Optional[SurveyGraph]:
        """Return the full question/option graph, or None if the survey is unknown."""

    def persist_response(self, response: StoredResponse) -> int:
        """Store a response with all of its items and return the assigned id."""

    def fetch_response(self, response_id: int) -> Optional[StoredResponse]:
        """Return a stored response with items, or None."""

    def list_responses(self, survey_id: int) -> List[StoredResponse]:
        """Return a survey's responses, newest first."""

    def survey_exists(self, survey_id: int) -> bool:
        """Return True if the survey exists, without loading its graph."""

    def score_totals(self, survey_id: int) -> Tuple[int, int]:
        """Return (sum of stored scores, number of responses) for a survey."""


__all__ = ["SurveyRepository"]
