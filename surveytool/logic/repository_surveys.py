"""Survey-level data access helpers.

Encapsulates SQL for survey rows and full graph loading so route handlers and
the authoring service stay free of inline SQL.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy import text as sql_text

from surveytool.db.base import get_engine
from surveytool.logic.id_csv import decode_ids
from surveytool.models.graph import Option, Question, SurveyGraph

logger = logging.getLogger(__name__)


def survey_exists(survey_id: int) -> bool:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT 1 FROM survey WHERE id = :id"),
            {"id": survey_id},
        ).fetchone()
    return row is not None


def count_surveys() -> int:
    eng = get_engine()
    with eng.connect() as conn:
        return int(conn.execute(sql_text("SELECT COUNT(*) FROM survey")).scalar_one())


def fetch_survey_graph(survey_id: int) -> Optional[SurveyGraph]:
    """Load a survey with all questions and options in one connection.

    Questions and options are ordered by id (creation order).
    """
    eng = get_engine()
    with eng.connect() as conn:
        survey = conn.execute(
            sql_text("SELECT id, title, description FROM survey WHERE id = :id"),
            {"id": survey_id},
        ).mappings().fetchone()
        if survey is None:
            return None
        q_rows = conn.execute(
            sql_text(
                """
                SELECT id, survey_id, text, type, parent_question_id, trigger_option_ids_csv
                FROM question
                WHERE survey_id = :sid
                ORDER BY id ASC
                """
            ),
            {"sid": survey_id},
        ).mappings().all()
        o_rows = conn.execute(
            sql_text(
                """
                SELECT o.id, o.question_id, o.text, o.weight
                FROM answer_option o
                JOIN question q ON q.id = o.question_id
                WHERE q.survey_id = :sid
                ORDER BY o.id ASC
                """
            ),
            {"sid": survey_id},
        ).mappings().all()

    options_by_question: Dict[int, List[Option]] = {}
    for r in o_rows:
        opt = Option(id=int(r["id"]), question_id=int(r["question_id"]), text=r["text"], weight=int(r["weight"]))
        options_by_question.setdefault(opt.question_id, []).append(opt)

    questions = []
    for r in q_rows:
        triggers = decode_ids(r["trigger_option_ids_csv"])
        questions.append(
            Question(
                id=int(r["id"]),
                survey_id=int(r["survey_id"]),
                text=r["text"],
                type=r["type"],
                parent_question_id=int(r["parent_question_id"]) if r["parent_question_id"] is not None else None,
                trigger_option_ids=frozenset(triggers) if triggers is not None else None,
                options=tuple(options_by_question.get(int(r["id"]), ())),
            )
        )
    return SurveyGraph(
        survey_id=int(survey["id"]),
        title=survey["title"],
        description=survey["description"],
        questions=tuple(questions),
    )


def list_survey_ids() -> List[int]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(sql_text("SELECT id FROM survey ORDER BY id ASC")).fetchall()
    return [int(r[0]) for r in rows]


def insert_survey(title: str, description: Optional[str]) -> int:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text("INSERT INTO survey (title, description) VALUES (:t, :d) RETURNING id"),
                {"t": title, "d": description},
            ).scalar_one()
    except Exception:
        logger.error("insert_survey failed", exc_info=True)
        raise
    return int(new_id)


def update_survey_row(survey_id: int, title: str, description: Optional[str]) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text("UPDATE survey SET title = :t, description = :d WHERE id = :id"),
                {"t": title, "d": description, "id": survey_id},
            )
    except Exception:
        logger.error("update_survey_row failed survey_id=%s", survey_id, exc_info=True)
        raise
    return result.rowcount > 0


def delete_survey_cascade(survey_id: int) -> bool:
    """Delete a survey with its questions, options, responses and items.

    Runs in one transaction; returns False when the survey does not exist.
    """
    eng = get_engine()
    try:
        with eng.begin() as conn:
            params = {"sid": survey_id}
            conn.execute(
                sql_text(
                    "DELETE FROM response_item WHERE response_id IN "
                    "(SELECT id FROM survey_response WHERE survey_id = :sid)"
                ),
                params,
            )
            conn.execute(sql_text("DELETE FROM survey_response WHERE survey_id = :sid"), params)
            conn.execute(
                sql_text(
                    "DELETE FROM answer_option WHERE question_id IN "
                    "(SELECT id FROM question WHERE survey_id = :sid)"
                ),
                params,
            )
            # Break parent links before removing rows to satisfy self-referencing FKs
            conn.execute(sql_text("UPDATE question SET parent_question_id = NULL WHERE survey_id = :sid"), params)
            conn.execute(sql_text("DELETE FROM question WHERE survey_id = :sid"), params)
            result = conn.execute(sql_text("DELETE FROM survey WHERE id = :sid"), params)
    except Exception:
        logger.error("delete_survey_cascade failed survey_id=%s", survey_id, exc_info=True)
        raise
    return result.rowcount > 0


__all__ = [
    "survey_exists",
    "count_surveys",
    "fetch_survey_graph",
    "list_survey_ids",
    "insert_survey",
    "update_survey_row",
    "delete_survey_cascade",
]
