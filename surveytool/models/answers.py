"""Submission inputs and stored response types.

`ResponseItem.answer` is either `SelectedOptions` or `FreeTextAnswer`, never
both, so the read model can project one side and leave the other as None.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class AnswerSubmission:
    question_id: int
    selected_option_ids: Optional[Tuple[int, ...]] = None
    free_text: Optional[str] = None


@dataclass(frozen=True)
class SelectedOptions:
    option_ids: Tuple[int, ...]


@dataclass(frozen=True)
class FreeTextAnswer:
    text: Optional[str] = None


AnswerPayload = Union[SelectedOptions, FreeTextAnswer]


@dataclass(frozen=True)
class ResponseItem:
    question_id: int
    answer: AnswerPayload

    @property
    def selected_option_ids(self) -> Optional[Tuple[int, ...]]:
        if isinstance(self.answer, SelectedOptions):
            return self.answer.option_ids
        return None

    @property
    def free_text(self) -> Optional[str]:
        if isinstance(self.answer, FreeTextAnswer):
            return self.answer.text
        return None


@dataclass(frozen=True)
class StoredResponse:
    survey_id: int
    created_at: datetime
    score: int
    items: Tuple[ResponseItem, ...] = ()
    id: Optional[int] = None


@dataclass(frozen=True)
class SubmissionResult:
    response_id: int
    score: int


@dataclass(frozen=True)
class AggregateScore:
    total_score: int
    response_count: int
    average_score: float


__all__ = [
    "AnswerSubmission",
    "SelectedOptions",
    "FreeTextAnswer",
    "AnswerPayload",
    "ResponseItem",
    "StoredResponse",
    "SubmissionResult",
    "AggregateScore",
]
