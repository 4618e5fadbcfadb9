"""Stored response data access and the SQL-backed survey repository.

A response and all of its items are written in one transaction. Each item row
carries an `answer_kind` discriminator ("options" or "text") so the tagged
answer payload survives the round trip even when free text is empty.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import text as sql_text

from surveytool.db.base import get_engine
from surveytool.logic.id_csv import decode_ids, encode_ids
from surveytool.logic.repository_surveys import fetch_survey_graph, survey_exists
from surveytool.models.answers import FreeTextAnswer, ResponseItem, SelectedOptions, StoredResponse
from surveytool.models.graph import SurveyGraph

logger = logging.getLogger(__name__)

KIND_OPTIONS = "options"
KIND_TEXT = "text"


def _to_db_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_db_timestamp(value: object) -> datetime:
    dt = value if isinstance(value, datetime) else datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _item_from_row(row) -> ResponseItem:  # type: ignore[no-untyped-def]
    if row["answer_kind"] == KIND_OPTIONS:
        return ResponseItem(int(row["question_id"]), SelectedOptions(decode_ids(row["selected_option_ids_csv"]) or ()))
    return ResponseItem(int(row["question_id"]), FreeTextAnswer(row["free_text"]))


def insert_response(response: StoredResponse) -> int:
    """Insert a response and its items atomically; return the new id."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            response_id = conn.execute(
                sql_text(
                    "INSERT INTO survey_response (survey_id, created_at, score) "
                    "VALUES (:sid, :created_at, :score) RETURNING id"
                ),
                {
                    "sid": response.survey_id,
                    "created_at": _to_db_timestamp(response.created_at),
                    "score": response.score,
                },
            ).scalar_one()
            for item in response.items:
                is_options = isinstance(item.answer, SelectedOptions)
                conn.execute(
                    sql_text(
                        """
                        INSERT INTO response_item
                            (response_id, question_id, answer_kind, selected_option_ids_csv, free_text)
                        VALUES (:rid, :qid, :kind, :ids, :text)
                        """
                    ),
                    {
                        "rid": response_id,
                        "qid": item.question_id,
                        "kind": KIND_OPTIONS if is_options else KIND_TEXT,
                        "ids": encode_ids(item.selected_option_ids) if is_options else None,
                        "text": None if is_options else item.free_text,
                    },
                )
    except Exception:
        logger.error("insert_response failed survey_id=%s", response.survey_id, exc_info=True)
        raise
    return int(response_id)


def get_response(response_id: int) -> Optional[StoredResponse]:
    eng = get_engine()
    with eng.connect() as conn:
        head = conn.execute(
            sql_text("SELECT id, survey_id, created_at, score FROM survey_response WHERE id = :id"),
            {"id": response_id},
        ).mappings().fetchone()
        if head is None:
            return None
        rows = conn.execute(
            sql_text(
                """
                SELECT question_id, answer_kind, selected_option_ids_csv, free_text
                FROM response_item
                WHERE response_id = :id
                ORDER BY id ASC
                """
            ),
            {"id": response_id},
        ).mappings().all()
    return StoredResponse(
        id=int(head["id"]),
        survey_id=int(head["survey_id"]),
        created_at=_from_db_timestamp(head["created_at"]),
        score=int(head["score"]),
        items=tuple(_item_from_row(r) for r in rows),
    )


def list_responses_for_survey(survey_id: int) -> List[StoredResponse]:
    """Return responses with items for a survey, newest first."""
    eng = get_engine()
    with eng.connect() as conn:
        heads = conn.execute(
            sql_text(
                """
                SELECT id, survey_id, created_at, score
                FROM survey_response
                WHERE survey_id = :sid
                ORDER BY created_at DESC, id DESC
                """
            ),
            {"sid": survey_id},
        ).mappings().all()
        rows = conn.execute(
            sql_text(
                """
                SELECT ri.response_id, ri.question_id, ri.answer_kind, ri.selected_option_ids_csv, ri.free_text
                FROM response_item ri
                JOIN survey_response sr ON sr.id = ri.response_id
                WHERE sr.survey_id = :sid
                ORDER BY ri.id ASC
                """
            ),
            {"sid": survey_id},
        ).mappings().all()

    items_by_response: Dict[int, List[ResponseItem]] = {}
    for r in rows:
        items_by_response.setdefault(int(r["response_id"]), []).append(_item_from_row(r))
    return [
        StoredResponse(
            id=int(h["id"]),
            survey_id=int(h["survey_id"]),
            created_at=_from_db_timestamp(h["created_at"]),
            score=int(h["score"]),
            items=tuple(items_by_response.get(int(h["id"]), ())),
        )
        for h in heads
    ]


def score_totals_for_survey(survey_id: int) -> Tuple[int, int]:
    """Return (sum of scores, response count) computed in the database."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT COALESCE(SUM(score), 0), COUNT(*) FROM survey_response WHERE survey_id = :sid"),
            {"sid": survey_id},
        ).one()
    return int(row[0]), int(row[1])


class SqlSurveyRepository:
    """SurveyRepository backed by the shared SQLAlchemy engine."""

    def fetch_graph(self, survey_id: int) -> Optional[SurveyGraph]:
        return fetch_survey_graph(survey_id)

    def persist_response(self, response: StoredResponse) -> int:
        return insert_response(response)

    def fetch_response(self, response_id: int) -> Optional[StoredResponse]:
        return get_response(response_id)

    def list_responses(self, survey_id: int) -> List[StoredResponse]:
        return list_responses_for_survey(survey_id)

    def survey_exists(self, survey_id: int) -> bool:
        return survey_exists(survey_id)

    def score_totals(self, survey_id: int) -> Tuple[int, int]:
        return score_totals_for_survey(survey_id)


def get_survey_repository() -> SqlSurveyRepository:
    """FastAPI dependency returning the SQL-backed repository."""
    return SqlSurveyRepository()


__all__ = [
    "insert_response",
    "get_response",
    "list_responses_for_survey",
    "score_totals_for_survey",
    "SqlSurveyRepository",
    "get_survey_repository",
]
