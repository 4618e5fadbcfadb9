from __future__ import annotations

"""Functional test bootstrap.

Database-backed tests run against a private in-memory SQLite database. The
`fresh_db` fixture disposes of the shared engine so every test starts from an
empty schema, then applies the SQLite migrations.

The `satisfaction` fixture builds the customer satisfaction graph used
throughout the suite:
  Q1 SingleChoice  (Very=5, Somewhat=3, Not=1)
  Q2 MultipleChoice, parent Q1, shown when Q1=Not (Quality=2, Support=2, Delivery=1)
  Q3 FreeText
"""

import os
from types import SimpleNamespace

import pytest

# Point the app at in-memory SQLite before any surveytool import reads config
os.environ["TEST_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
os.environ["SEED_DEMO_DATA"] = "0"

from surveytool.logic.inmemory_state import InMemorySurveyRepository  # noqa: E402
from surveytool.models.graph import Option, Question, SurveyGraph  # noqa: E402
from surveytool.models.question_type import QuestionType  # noqa: E402


def build_satisfaction_graph(survey_id: int = 1) -> SimpleNamespace:
    ids = SimpleNamespace(
        survey=survey_id,
        q1=1, very=11, somewhat=12, not_sat=13,
        q2=2, quality=21, support=22, delivery=23,
        q3=3,
    )
    q1 = Question(
        id=ids.q1,
        survey_id=survey_id,
        text="How satisfied are you with our service?",
        type=QuestionType.SINGLE_CHOICE,
        options=(
            Option(ids.very, ids.q1, "Very satisfied", 5),
            Option(ids.somewhat, ids.q1, "Somewhat satisfied", 3),
            Option(ids.not_sat, ids.q1, "Not satisfied", 1),
        ),
    )
    q2 = Question(
        id=ids.q2,
        survey_id=survey_id,
        text="What areas need improvement?",
        type=QuestionType.MULTIPLE_CHOICE,
        parent_question_id=ids.q1,
        trigger_option_ids=frozenset({ids.not_sat}),
        options=(
            Option(ids.quality, ids.q2, "Product quality", 2),
            Option(ids.support, ids.q2, "Customer support", 2),
            Option(ids.delivery, ids.q2, "Delivery time", 1),
        ),
    )
    q3 = Question(id=ids.q3, survey_id=survey_id, text="Any additional comments?", type=QuestionType.FREE_TEXT)
    ids.graph = SurveyGraph(
        survey_id=survey_id,
        title="Customer Satisfaction Survey",
        description=None,
        questions=(q1, q2, q3),
    )
    return ids


@pytest.fixture
def satisfaction() -> SimpleNamespace:
    return build_satisfaction_graph()


@pytest.fixture
def memory_repo(satisfaction) -> InMemorySurveyRepository:
    repo = InMemorySurveyRepository()
    repo.add_graph(satisfaction.graph)
    return repo


@pytest.fixture
def fresh_db():
    """Yield an engine bound to a brand new, migrated in-memory database."""
    from surveytool.db.base import get_engine, reset_engine
    from surveytool.db.migrations_runner import apply_migrations

    reset_engine()
    engine = get_engine()
    apply_migrations(engine)
    yield engine
    reset_engine()


@pytest.fixture
def client(fresh_db):
    from fastapi.testclient import TestClient
    from surveytool.main import create_app

    with TestClient(create_app()) as c:
        yield c
