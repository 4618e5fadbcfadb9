"""Pydantic payloads for survey, question and option authoring routes.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from surveytool.models.graph import Option, Question, SurveyGraph
from surveytool.models.question_type import QuestionType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateSurveyModel(CamelModel):
    title: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None


class UpdateSurveyModel(CreateSurveyModel):
    pass


class QuestionWriteModel(CamelModel):
    text: str = Field(min_length=3, max_length=500)
    type: str
    parent_question_id: Optional[int] = None
    show_when_any_option_selected: Optional[List[int]] = None

    @field_validator("type")
    @classmethod
    def type_must_be_known(cls, v: str) -> str:
        if v not in QuestionType.ALL:
            raise ValueError(f"type must be one of {sorted(QuestionType.ALL)}")
        return v


class CreateOptionModel(CamelModel):
    text: str = Field(min_length=1, max_length=200)
    weight: int = 0


class UpdateOptionModel(CreateOptionModel):
    pass


class CreatedModel(CamelModel):
    id: int


class OptionOut(CamelModel):
    id: int
    text: str
    weight: int

    @classmethod
    def from_domain(cls, opt: Option) -> "OptionOut":
        return cls(id=opt.id, text=opt.text, weight=opt.weight)


class QuestionOut(CamelModel):
    id: int
    text: str
    type: str
    parent_question_id: Optional[int] = None
    show_when_any_option_selected: Optional[List[int]] = None
    options: List[OptionOut] = []

    @classmethod
    def from_domain(cls, q: Question) -> "QuestionOut":
        triggers = sorted(q.trigger_option_ids) if q.trigger_option_ids is not None else None
        return cls(
            id=q.id,
            text=q.text,
            type=q.type,
            parent_question_id=q.parent_question_id,
            show_when_any_option_selected=triggers,
            options=[OptionOut.from_domain(o) for o in q.options],
        )


class SurveyOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    questions: List[QuestionOut] = []

    @classmethod
    def from_domain(cls, graph: SurveyGraph) -> "SurveyOut":
        return cls(
            id=graph.survey_id,
            title=graph.title,
            description=graph.description,
            questions=[QuestionOut.from_domain(q) for q in graph.questions],
        )


__all__ = [
    "CamelModel",
    "CreateSurveyModel",
    "UpdateSurveyModel",
    "QuestionWriteModel",
    "CreateOptionModel",
    "UpdateOptionModel",
    "CreatedModel",
    "OptionOut",
    "QuestionOut",
    "SurveyOut",
]
