"""Question and option repository helpers for authoring.

Encapsulates DB reads/writes used by the authoring service, keeping the HTTP
layer free of direct SQL. Failures are logged at ERROR with exc_info and
re-raised so callers decide the recovery path.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy import text as sql_text

from surveytool.db.base import get_engine
from surveytool.logic.id_csv import encode_ids

logger = logging.getLogger(__name__)


def get_question_row(question_id: int) -> Optional[dict]:
    """Return {id, survey_id, parent_question_id} for a question, or None."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT id, survey_id, parent_question_id FROM question WHERE id = :id"),
            {"id": question_id},
        ).mappings().fetchone()
    return dict(row) if row is not None else None


def list_child_question_ids(question_id: int) -> List[int]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text("SELECT id FROM question WHERE parent_question_id = :id ORDER BY id ASC"),
            {"id": question_id},
        ).fetchall()
    return [int(r[0]) for r in rows]


def insert_question(
    survey_id: int,
    text: str,
    qtype: str,
    parent_question_id: Optional[int],
    trigger_option_ids: Optional[Iterable[int]],
) -> int:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text(
                    """
                    INSERT INTO question (survey_id, text, type, parent_question_id, trigger_option_ids_csv)
                    VALUES (:sid, :text, :type, :pid, :triggers)
                    RETURNING id
                    """
                ),
                {
                    "sid": survey_id,
                    "text": text,
                    "type": qtype,
                    "pid": parent_question_id,
                    "triggers": encode_ids(trigger_option_ids),
                },
            ).scalar_one()
    except Exception:
        logger.error("insert_question failed survey_id=%s", survey_id, exc_info=True)
        raise
    return int(new_id)


def update_question_row(
    question_id: int,
    text: str,
    qtype: str,
    parent_question_id: Optional[int],
    trigger_option_ids: Optional[Iterable[int]],
) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    """
                    UPDATE question
                    SET text = :text, type = :type, parent_question_id = :pid,
                        trigger_option_ids_csv = :triggers
                    WHERE id = :id
                    """
                ),
                {
                    "id": question_id,
                    "text": text,
                    "type": qtype,
                    "pid": parent_question_id,
                    "triggers": encode_ids(trigger_option_ids),
                },
            )
    except Exception:
        logger.error("update_question_row failed qid=%s", question_id, exc_info=True)
        raise
    return result.rowcount > 0


def delete_questions(question_ids: List[int]) -> None:
    """Delete questions (children first) with their options and answer items.

    All rows go in one transaction. Stored response scores are not touched.
    """
    if not question_ids:
        return
    eng = get_engine()
    try:
        with eng.begin() as conn:
            for qid in question_ids:
                params = {"qid": qid}
                conn.execute(sql_text("DELETE FROM response_item WHERE question_id = :qid"), params)
                conn.execute(sql_text("DELETE FROM answer_option WHERE question_id = :qid"), params)
                conn.execute(sql_text("DELETE FROM question WHERE id = :qid"), params)
    except Exception:
        logger.error("delete_questions failed ids=%s", question_ids, exc_info=True)
        raise


def insert_option(question_id: int, text: str, weight: int) -> int:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text("INSERT INTO answer_option (question_id, text, weight) VALUES (:qid, :t, :w) RETURNING id"),
                {"qid": question_id, "t": text, "w": weight},
            ).scalar_one()
    except Exception:
        logger.error("insert_option failed qid=%s", question_id, exc_info=True)
        raise
    return int(new_id)


def update_option_row(option_id: int, text: str, weight: int) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text("UPDATE answer_option SET text = :t, weight = :w WHERE id = :id"),
                {"t": text, "w": weight, "id": option_id},
            )
    except Exception:
        logger.error("update_option_row failed option_id=%s", option_id, exc_info=True)
        raise
    return result.rowcount > 0


def delete_option_row(option_id: int) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(sql_text("DELETE FROM answer_option WHERE id = :id"), {"id": option_id})
    except Exception:
        logger.error("delete_option_row failed option_id=%s", option_id, exc_info=True)
        raise
    return result.rowcount > 0


__all__ = [
    "get_question_row",
    "list_child_question_ids",
    "insert_question",
    "update_question_row",
    "delete_questions",
    "insert_option",
    "update_option_row",
    "delete_option_row",
]
