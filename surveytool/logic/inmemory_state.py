"""In-memory survey repository (test/dev only).

Holds graphs and stored responses in process-local dicts. Each instance is
independent, so tests build a fresh one per case.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from surveytool.models.answers import StoredResponse
from surveytool.models.graph import SurveyGraph


class InMemorySurveyRepository:
    def __init__(self) -> None:
        self.graphs: Dict[int, SurveyGraph] = {}
        self.responses: Dict[int, StoredResponse] = {}
        self._ids = itertools.count(1)

    def add_graph(self, graph: SurveyGraph) -> None:
        self.graphs[graph.survey_id] = graph

    def fetch_graph(self, survey_id: int) -> Optional[SurveyGraph]:
        return self.graphs.get(survey_id)

    def persist_response(self, response: StoredResponse) -> int:
        response_id = next(self._ids)
        self.responses[response_id] = replace(response, id=response_id)
        return response_id

    def fetch_response(self, response_id: int) -> Optional[StoredResponse]:
        return self.responses.get(response_id)

    def list_responses(self, survey_id: int) -> List[StoredResponse]:
        found = [r for r in self.responses.values() if r.survey_id == survey_id]
        return sorted(found, key=lambda r: (r.created_at, r.id), reverse=True)

    def survey_exists(self, survey_id: int) -> bool:
        return survey_id in self.graphs

    def score_totals(self, survey_id: int) -> Tuple[int, int]:
        scores = [r.score for r in self.responses.values() if r.survey_id == survey_id]
        return sum(scores), len(scores)


__all__ = ["InMemorySurveyRepository"]
