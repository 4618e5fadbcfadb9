"""Pydantic payloads for response submission, read-back and score summaries."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from surveytool.models.answers import AggregateScore, AnswerSubmission, StoredResponse
from surveytool.models.surveys import CamelModel


class SubmissionItemModel(CamelModel):
    question_id: int
    selected_option_ids: Optional[List[int]] = None
    free_text: Optional[str] = None

    def to_domain(self) -> AnswerSubmission:
        ids = tuple(self.selected_option_ids) if self.selected_option_ids is not None else None
        return AnswerSubmission(question_id=self.question_id, selected_option_ids=ids, free_text=self.free_text)


class SubmitResponseModel(CamelModel):
    items: List[SubmissionItemModel] = []


class SubmitResponseResult(CamelModel):
    response_id: int
    score: int


class ResponseItemOut(CamelModel):
    question_id: int
    selected_option_ids: Optional[List[int]] = None
    free_text: Optional[str] = None


class ResponseSummaryOut(CamelModel):
    id: int
    survey_id: int
    created_at: datetime
    score: int

    @classmethod
    def from_domain(cls, resp: StoredResponse) -> "ResponseSummaryOut":
        return cls(id=resp.id, survey_id=resp.survey_id, created_at=resp.created_at, score=resp.score)


class ResponseDetailsOut(ResponseSummaryOut):
    items: List[ResponseItemOut] = []

    @classmethod
    def from_domain(cls, resp: StoredResponse) -> "ResponseDetailsOut":
        items = []
        for it in resp.items:
            ids = it.selected_option_ids
            items.append(
                ResponseItemOut(
                    question_id=it.question_id,
                    selected_option_ids=list(ids) if ids is not None else None,
                    free_text=it.free_text,
                )
            )
        return cls(
            id=resp.id,
            survey_id=resp.survey_id,
            created_at=resp.created_at,
            score=resp.score,
            items=items,
        )


class ScoreSummaryOut(CamelModel):
    survey_id: int
    total_score: int
    response_count: int
    average_score: float

    @classmethod
    def from_domain(cls, survey_id: int, agg: AggregateScore) -> "ScoreSummaryOut":
        return cls(
            survey_id=survey_id,
            total_score=agg.total_score,
            response_count=agg.response_count,
            average_score=agg.average_score,
        )


class VisibilityPreviewOut(CamelModel):
    survey_id: int
    visible_question_ids: List[int]


__all__ = [
    "SubmissionItemModel",
    "SubmitResponseModel",
    "SubmitResponseResult",
    "ResponseItemOut",
    "ResponseSummaryOut",
    "ResponseDetailsOut",
    "ScoreSummaryOut",
    "VisibilityPreviewOut",
]
