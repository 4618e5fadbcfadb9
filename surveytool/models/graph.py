"""Immutable survey graph snapshot handed to the submission engine.

A `SurveyGraph` is fetched once per submission and never mutated while the
engine evaluates it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Option:
    id: int
    question_id: int
    text: str
    weight: int


@dataclass(frozen=True)
class Question:
    id: int
    survey_id: int
    text: str
    type: str
    parent_question_id: Optional[int] = None
    trigger_option_ids: Optional[FrozenSet[int]] = None
    options: Tuple[Option, ...] = ()

    def option_by_id(self, option_id: int) -> Optional[Option]:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


@dataclass(frozen=True)
class SurveyGraph:
    survey_id: int
    title: str
    description: Optional[str] = None
    questions: Tuple[Question, ...] = ()
    _by_id: Dict[int, Question] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {q.id: q for q in self.questions})

    def question(self, question_id: int) -> Optional[Question]:
        return self._by_id.get(question_id)


__all__ = ["Option", "Question", "SurveyGraph"]
