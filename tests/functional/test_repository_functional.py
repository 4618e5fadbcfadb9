"""Functional tests for the SQL-backed repository and migrations runner.

Each test runs against a fresh in-memory SQLite database (`fresh_db`).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from sqlalchemy import text as sql_text
from sqlalchemy.exc import OperationalError

import surveytool
from surveytool.db.migrations_runner import apply_migrations, default_migrations_dir
from surveytool.logic import authoring
from surveytool.logic.errors import DomainValidationError
from surveytool.logic.repository_responses import SqlSurveyRepository
from surveytool.logic.submission import submit_response
from surveytool.models.answers import AnswerSubmission, FreeTextAnswer, SelectedOptions
from surveytool.models.question_type import QuestionType

T0 = datetime(2025, 8, 23, 15, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(fresh_db):
    sid = authoring.create_survey("Customer Satisfaction Survey", None)
    q1 = authoring.add_question(sid, "How satisfied are you?", QuestionType.SINGLE_CHOICE)
    very = authoring.add_option(q1, "Very satisfied", 5)
    not_sat = authoring.add_option(q1, "Not satisfied", 1)
    q2 = authoring.add_question(sid, "What needs work?", QuestionType.MULTIPLE_CHOICE, q1, [not_sat])
    quality = authoring.add_option(q2, "Product quality", 2)
    support = authoring.add_option(q2, "Customer support", 2)
    q3 = authoring.add_question(sid, "Any comments?", QuestionType.FREE_TEXT)
    return dict(sid=sid, q1=q1, very=very, not_sat=not_sat, q2=q2, quality=quality, support=support, q3=q3)


def test_migrations_are_journaled_once(fresh_db) -> None:
    assert apply_migrations(fresh_db) == []
    with fresh_db.connect() as conn:
        names = [r[0] for r in conn.execute(sql_text("SELECT filename FROM schema_migrations"))]
    assert names == ["001_init.sql"]


def test_migration_scripts_ship_inside_the_package(fresh_db) -> None:
    package_dir = Path(surveytool.__file__).resolve().parent
    sqlite_dir = default_migrations_dir(fresh_db)
    assert package_dir in sqlite_dir.parents
    assert (sqlite_dir / "001_init.sql").is_file()
    postgres_dir = default_migrations_dir(SimpleNamespace(dialect=SimpleNamespace(name="postgresql")))
    assert package_dir in postgres_dir.parents
    assert (postgres_dir / "001_init.sql").is_file()


def test_fetch_graph_materializes_questions_and_options(seeded) -> None:
    graph = SqlSurveyRepository().fetch_graph(seeded["sid"])
    assert graph is not None
    assert [q.id for q in graph.questions] == [seeded["q1"], seeded["q2"], seeded["q3"]]
    q2 = graph.question(seeded["q2"])
    assert q2.parent_question_id == seeded["q1"]
    assert q2.trigger_option_ids == frozenset({seeded["not_sat"]})
    assert [o.weight for o in q2.options] == [2, 2]
    assert graph.question(seeded["q3"]).trigger_option_ids is None


def test_fetch_graph_unknown_survey_is_none(fresh_db) -> None:
    assert SqlSurveyRepository().fetch_graph(12345) is None


def test_persist_and_fetch_round_trip(seeded) -> None:
    repo = SqlSurveyRepository()
    result = submit_response(
        repo,
        seeded["sid"],
        [
            AnswerSubmission(seeded["q1"], (seeded["not_sat"],)),
            AnswerSubmission(seeded["q2"], (seeded["support"], seeded["quality"])),
            AnswerSubmission(seeded["q3"], free_text=None),
        ],
        now=T0,
    )
    stored = repo.fetch_response(result.response_id)
    assert stored.score == result.score == 5
    assert stored.created_at == T0
    assert stored.items[0].answer == SelectedOptions((seeded["not_sat"],))
    assert stored.items[1].answer == SelectedOptions((seeded["support"], seeded["quality"]))
    assert stored.items[2].answer == FreeTextAnswer(None)


def test_rejected_submission_writes_nothing(seeded, fresh_db) -> None:
    repo = SqlSurveyRepository()
    with pytest.raises(DomainValidationError):
        submit_response(
            repo,
            seeded["sid"],
            [AnswerSubmission(seeded["q1"], (seeded["very"],)), AnswerSubmission(seeded["q2"], (seeded["quality"],))],
        )
    with fresh_db.connect() as conn:
        assert conn.execute(sql_text("SELECT COUNT(*) FROM survey_response")).scalar_one() == 0
        assert conn.execute(sql_text("SELECT COUNT(*) FROM response_item")).scalar_one() == 0


def test_list_responses_newest_first(seeded) -> None:
    repo = SqlSurveyRepository()
    ids = []
    for minutes, opt in [(0, seeded["very"]), (2, seeded["not_sat"]), (1, seeded["very"])]:
        res = submit_response(repo, seeded["sid"], [AnswerSubmission(seeded["q1"], (opt,))], now=T0 + timedelta(minutes=minutes))
        ids.append(res.response_id)
    listed = repo.list_responses(seeded["sid"])
    assert [r.id for r in listed] == [ids[1], ids[2], ids[0]]
    assert all(len(r.items) == 1 for r in listed)
    assert repo.list_responses(999) == []


def test_fetch_unknown_response_is_none(fresh_db) -> None:
    assert SqlSurveyRepository().fetch_response(1) is None


def test_score_totals_are_computed_in_the_database(seeded) -> None:
    repo = SqlSurveyRepository()
    assert repo.score_totals(seeded["sid"]) == (0, 0)
    for opt in (seeded["very"], seeded["not_sat"]):
        submit_response(repo, seeded["sid"], [AnswerSubmission(seeded["q1"], (opt,))])
    assert repo.score_totals(seeded["sid"]) == (6, 2)
    assert repo.survey_exists(seeded["sid"]) is True
    assert repo.survey_exists(999) is False


def test_failed_write_is_logged_and_reraised(seeded, fresh_db, caplog) -> None:
    with fresh_db.begin() as conn:
        conn.execute(sql_text("DROP TABLE answer_option"))
    with caplog.at_level("ERROR", logger="surveytool.logic.repository_questions"):
        with pytest.raises(OperationalError):
            authoring.add_option(seeded["q1"], "Broken", 1)
    assert any("insert_option failed" in r.getMessage() and r.exc_info for r in caplog.records)
